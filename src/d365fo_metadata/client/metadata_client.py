"""
D365 Metadata Client

Reads the public entity and public enumeration metadata endpoints.
One request per call; failures surface immediately.
"""

from typing import Optional, Dict, Any
import httpx
import structlog

from ..auth import build_authorization_header
from ..errors import (
    AuthenticationError,
    MalformedResponseError,
    RequestTimeoutError,
    TransportError,
)
from .interface import IMetadataClient

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class MetadataClient(IMetadataClient):
    """HTTP client for the D365 metadata endpoints"""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    def get_headers(self, url: str, token: str) -> Dict[str, str]:
        """Get standard HTTP headers for D365 OData requests"""
        headers = build_authorization_header(url, token)
        headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "OData-MaxVersion": "4.0",
            "OData-Version": "4.0",
        })
        return headers

    async def fetch(
        self, url: str, token: str, search_term: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Query a D365 metadata endpoint.

        Args:
            url: Request url built by the QueryBuilder
            token: Bearer token
            search_term: Name or text being resolved, for diagnostics

        Returns:
            JSON response from the D365 OData API
        """
        logger.info("Querying D365 metadata", url=url, search_term=search_term)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=self.get_headers(url, token))
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error("D365 metadata query failed",
                         url=url, search_term=search_term,
                         status_code=status_code,
                         response_text=e.response.text)

            if status_code in (401, 403):
                raise AuthenticationError(
                    f"Access to the metadata endpoint was denied (HTTP {status_code})",
                    search_term=search_term,
                ) from e
            raise TransportError(
                f"Metadata endpoint returned HTTP {status_code}",
                search_term=search_term,
                status_code=status_code,
            ) from e

        except httpx.TimeoutException as e:
            logger.error("D365 metadata query timed out",
                         url=url, search_term=search_term, timeout=self.timeout)
            raise RequestTimeoutError(
                f"Metadata request timed out after {self.timeout} seconds",
                search_term=search_term,
            ) from e

        except httpx.HTTPError as e:
            logger.error("D365 metadata request error",
                         url=url, search_term=search_term, error=str(e))
            raise TransportError(
                f"Metadata request failed: {e}", search_term=search_term
            ) from e

        try:
            result = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "Metadata endpoint did not return JSON", search_term=search_term
            ) from e

        if not isinstance(result, dict):
            raise MalformedResponseError(
                "Metadata endpoint returned an unexpected JSON document",
                search_term=search_term,
            )

        logger.info("D365 metadata query successful",
                    search_term=search_term,
                    record_count=len(result.get("value", []) or []))
        return result

    def get_client_info(self) -> Dict[str, Any]:
        return {
            "type": "metadata_client",
            "timeout": self.timeout,
        }
