"""
Token Provider Factory

Creates token provider instances based on the connection context.
"""

from typing import Optional
import structlog

from ..auth import ITokenProvider, ClientCredentialsTokenProvider, StaticTokenProvider
from ..models import ConnectionContext

logger = structlog.get_logger(__name__)


class TokenProviderFactory:
    """Factory for creating token providers"""

    _shared_client_credentials: Optional[ClientCredentialsTokenProvider] = None

    @staticmethod
    def create(context: ConnectionContext) -> ITokenProvider:
        """
        Create a token provider for the context.

        A caller supplied token is used as is. Otherwise the process-wide
        client credentials provider is returned so its token cache is reused
        across invocations.
        """
        if context.token:
            logger.debug("Creating token provider", provider_type="static")
            return StaticTokenProvider(context.token)

        if TokenProviderFactory._shared_client_credentials is None:
            TokenProviderFactory._shared_client_credentials = ClientCredentialsTokenProvider()
        logger.debug("Creating token provider", provider_type="client_credentials")
        return TokenProviderFactory._shared_client_credentials

    @staticmethod
    def get_available_providers() -> list[str]:
        """Get list of available token provider types"""
        return ["client_credentials", "static"]
