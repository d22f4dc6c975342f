"""
Metadata Query Builder

Builds request URLs for the D365 metadata endpoints.

Name matching is done server side and is case-insensitive:

- exact name: ``(tolower(Name) eq tolower('x') or tolower(EntitySetName) eq tolower('x'))``
- contains:   ``(contains(tolower(Name), tolower('x')) or contains(tolower(EntitySetName), tolower('x')))``

Enumerations match on ``LabelId`` instead of ``EntitySetName``.
"""

from typing import List, Optional, Tuple
from urllib.parse import quote

import httpx
import structlog

from ..errors import ConfigurationError
from ..models import ConnectionContext, Contains, ExactName, MetadataQuery

logger = structlog.get_logger(__name__)

FILTER_OPTION = "$filter="


def escape_literal(value: str) -> str:
    """
    Escape a value for use inside an OData string literal.

    Single quotes are doubled, then the literal is percent-encoded so that
    characters such as '&', '#' and '+' stay inside the $filter option.
    """
    return quote(value.replace("'", "''"), safe="'")


class QueryBuilder:
    """Pure URL construction, no network access"""

    @staticmethod
    def build(context: ConnectionContext, query: MetadataQuery) -> str:
        """
        Build the fully qualified request URL for a metadata query.

        Args:
            context: Resolved connection parameters
            query: Resource, name matching mode and optional OData suffix

        Returns:
            Absolute request URL

        Raises:
            ConfigurationError: If neither a system url nor a base url is set
        """
        base = QueryBuilder.resolve_endpoint(context, query.search_term)
        separator = "" if base.endswith("/") else "/"
        url = f"{base}{separator}{query.resource.path}"

        query_string = QueryBuilder.build_query_string(query)
        if query_string:
            url = f"{url}?{query_string}"

        logger.debug("Metadata query url built",
                     resource=query.resource.value,
                     mode=query.mode.kind,
                     url=url)
        return url

    @staticmethod
    def resolve_endpoint(context: ConnectionContext, search_term: Optional[str] = None) -> str:
        """Return the system url, falling back to the base url"""
        endpoint = context.system_url or context.base_url
        if not endpoint:
            raise ConfigurationError(
                "No D365 environment url configured. Pass a url or set D365FO_URL",
                search_term=search_term,
            )

        try:
            parsed = httpx.URL(endpoint)
        except httpx.InvalidURL as e:
            raise ConfigurationError(
                f"Invalid D365 environment url '{endpoint}': {e}", search_term=search_term
            ) from e

        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConfigurationError(
                f"Invalid D365 environment url '{endpoint}', expected an absolute http(s) url",
                search_term=search_term,
            )
        return endpoint

    @staticmethod
    def build_filter_expression(query: MetadataQuery) -> str:
        """Return the parenthesized name filter, or an empty string for RawOnly"""
        mode = query.mode
        primary, secondary = query.resource.name_fields

        if isinstance(mode, ExactName):
            literal = escape_literal(mode.value)
            return (
                f"(tolower({primary}) eq tolower('{literal}')"
                f" or tolower({secondary}) eq tolower('{literal}'))"
            )

        if isinstance(mode, Contains):
            literal = escape_literal(mode.value)
            return (
                f"(contains(tolower({primary}), tolower('{literal}'))"
                f" or contains(tolower({secondary}), tolower('{literal}')))"
            )

        return ""

    @staticmethod
    def build_query_string(query: MetadataQuery) -> str:
        """
        Combine the seeded name filter with the caller's OData suffix.

        The suffix is appended as given. Every '?' is removed from the result,
        so a suffix written as '?$top=5' behaves like '$top=5'. A '$filter'
        option inside the suffix is merged into the seeded filter with 'and'.
        """
        expression = QueryBuilder.build_filter_expression(query)
        suffix = query.odata_suffix or ""

        if FILTER_OPTION in suffix and (expression or suffix.count(FILTER_OPTION) > 1):
            suffix_filter, suffix = QueryBuilder._split_filter_option(suffix.replace("?", ""))
            if expression:
                expression = f"{expression} and ({suffix_filter})"
            else:
                expression = f"({suffix_filter})"

        seeded = f"{FILTER_OPTION}{expression}" if expression else ""

        combined = seeded
        if suffix:
            joiner = "&" if seeded and not suffix.lstrip("?").startswith("&") else ""
            combined = f"{seeded}{joiner}{suffix}"

        return combined.replace("?", "").lstrip("&")

    @staticmethod
    def _split_filter_option(suffix: str) -> Tuple[str, str]:
        """Pull the $filter option out of a query fragment"""
        filters: List[str] = []
        remaining: List[str] = []
        for option in suffix.split("&"):
            if option.startswith(FILTER_OPTION):
                filters.append(option[len(FILTER_OPTION):])
            elif option:
                remaining.append(option)

        rest = "&".join(remaining)
        return " and ".join(filters), f"&{rest}" if rest else ""
