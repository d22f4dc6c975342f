"""
Token Provider Interface

Defines contract for bearer token acquisition (client credentials, static token)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any

from ..errors import AuthenticationError
from ..models import ConnectionContext


class ITokenProvider(ABC):
    """Interface for bearer token providers"""

    @abstractmethod
    async def get_token(self, context: ConnectionContext) -> str:
        """
        Get a bearer token for the D365 environment described by the context.

        Args:
            context: Resolved connection parameters

        Returns:
            Bearer token for D365 API access

        Raises:
            AuthenticationError: If authentication fails
        """
        pass

    @abstractmethod
    def get_provider_info(self) -> Dict[str, Any]:
        """
        Get information about the token provider.

        Returns:
            Provider metadata (type, cache size, etc.)
        """
        pass


__all__ = ["ITokenProvider", "AuthenticationError"]
