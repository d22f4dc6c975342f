"""
Metadata Client Interface

Defines contract for clients reading the D365 metadata endpoints
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class IMetadataClient(ABC):
    """Interface for D365 metadata clients"""

    @abstractmethod
    async def fetch(
        self,
        url: str,
        token: str,
        search_term: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Execute a single GET against a metadata url.

        Args:
            url: Fully qualified request url
            token: Bearer token
            search_term: Term being resolved, attached to errors

        Returns:
            Decoded JSON document

        Raises:
            AuthenticationError: On 401/403 responses
            TransportError: On network failures or other non-2xx responses
            RequestTimeoutError: When the request exceeds the timeout
            MalformedResponseError: When the body is not a JSON object
        """
        pass

    @abstractmethod
    def get_client_info(self) -> Dict[str, Any]:
        """
        Get client implementation information.

        Returns:
            Client metadata (type, timeout, etc.)
        """
        pass
