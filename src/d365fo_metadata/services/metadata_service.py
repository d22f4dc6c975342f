"""
Public Metadata Service

Runs the query pipeline: resolve connection, build url, get token, fetch,
shape. Failures are returned in the QueryResult, never retried.
"""

from typing import Any, Dict, Optional
import structlog

from ..auth import ITokenProvider
from ..client import IMetadataClient, MetadataClient
from ..config import Settings, get_settings
from ..errors import MetadataQueryError
from ..factories import TokenProviderFactory
from ..models import ConnectionContext, MetadataQuery, MetadataResource, query_mode_from_parameters
from ..query import QueryBuilder
from ..result import QueryResult
from ..shaping import OutputMode, ResponseShaper, ShapedOutput
from .interface import IMetadataService

logger = structlog.get_logger(__name__)


class PublicMetadataService(IMetadataService):
    """Public entity and public enumeration lookups"""

    def __init__(
        self,
        settings: Settings,
        client: IMetadataClient,
        token_provider: Optional[ITokenProvider] = None,
    ):
        self.settings = settings
        self.client = client
        self.token_provider = token_provider

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        token_provider: Optional[ITokenProvider] = None,
    ) -> "PublicMetadataService":
        """Create the service with an HTTP client configured from settings"""
        settings = settings or get_settings()
        logger.info("Creating metadata service", request_timeout=settings.request_timeout)
        return cls(settings, MetadataClient(timeout=settings.request_timeout), token_provider)

    async def get_public_entities(
        self,
        *,
        name: Optional[str] = None,
        name_contains: Optional[str] = None,
        odata_query: Optional[str] = None,
        raw_output: bool = False,
        out_names_only: bool = False,
        output_as_json: bool = False,
        **connection: Optional[str],
    ) -> QueryResult[ShapedOutput]:
        if raw_output:
            mode = OutputMode.RAW
        elif out_names_only:
            mode = OutputMode.ENTITY_NAMES_ONLY
        else:
            mode = OutputMode.ENTITY_LIST

        return await self._run(
            MetadataResource.PUBLIC_ENTITIES,
            name, name_contains, odata_query,
            mode, output_as_json, connection,
        )

    async def get_public_enums(
        self,
        *,
        name: Optional[str] = None,
        name_contains: Optional[str] = None,
        odata_query: Optional[str] = None,
        raw_output: bool = False,
        output_as_json: bool = False,
        **connection: Optional[str],
    ) -> QueryResult[ShapedOutput]:
        mode = OutputMode.RAW if raw_output else OutputMode.ENUM_FLATTENED

        return await self._run(
            MetadataResource.PUBLIC_ENUMERATIONS,
            name, name_contains, odata_query,
            mode, output_as_json, connection,
        )

    async def _run(
        self,
        resource: MetadataResource,
        name: Optional[str],
        name_contains: Optional[str],
        odata_query: Optional[str],
        mode: OutputMode,
        as_json: bool,
        connection: Dict[str, Any],
    ) -> QueryResult[ShapedOutput]:
        query: Optional[MetadataQuery] = None

        try:
            query = MetadataQuery(
                resource=resource,
                mode=query_mode_from_parameters(name, name_contains),
                odata_suffix=odata_query or None,
            )
            context = ConnectionContext.resolve(self.settings, **connection)
            output = await self.execute(context, query, mode, as_json)

        except MetadataQueryError as e:
            if e.search_term is None and query is not None:
                e.search_term = query.search_term
            logger.error("Metadata query failed",
                         resource=resource.value,
                         search_term=e.search_term,
                         error=str(e),
                         error_type=type(e).__name__)
            return QueryResult.failure(e)

        return QueryResult.success(output)

    async def execute(
        self,
        context: ConnectionContext,
        query: MetadataQuery,
        mode: OutputMode,
        as_json: bool = False,
    ) -> ShapedOutput:
        """
        Run one query end to end.

        Raises:
            MetadataQueryError: Any failure along the pipeline
        """
        search_term = query.search_term

        # The url is validated before any token request or network call
        url = QueryBuilder.build(context, query)

        logger.info("Resolving metadata",
                     resource=query.resource.value,
                     search_term=search_term,
                     **context.describe())

        token_provider = self.token_provider or TokenProviderFactory.create(context)
        token = await token_provider.get_token(context)

        document = await self.client.fetch(url, token, search_term=search_term)
        return ResponseShaper.shape(document, mode, as_json=as_json, search_term=search_term)
