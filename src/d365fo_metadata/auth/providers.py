"""
Token Providers

Azure AD client credentials implementation of ITokenProvider, plus a provider
for callers that already hold a bearer token.
"""

import asyncio
import time
from typing import Dict, Any, Optional
from azure.identity import ClientSecretCredential
import structlog

from ..errors import AuthenticationError, ConfigurationError
from ..models import ConnectionContext
from .interface import ITokenProvider

logger = structlog.get_logger(__name__)

# Tokens this close to expiry are not handed out
EXPIRY_BUFFER_SECONDS = 60


class ClientCredentialsTokenProvider(ITokenProvider):
    """Acquires D365 tokens with the OAuth client credentials flow"""

    def __init__(self) -> None:
        self.token_cache: Dict[str, Dict[str, Any]] = {}
        self._credentials: Dict[str, ClientSecretCredential] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def scope_for(context: ConnectionContext) -> str:
        """The token audience is the environment url"""
        return f"{context.base_url}/.default"

    def _credential_for(self, context: ConnectionContext) -> ClientSecretCredential:
        key = f"{context.tenant_id}:{context.client_id}"
        if key not in self._credentials:
            self._credentials[key] = ClientSecretCredential(
                tenant_id=context.tenant_id,
                client_id=context.client_id,
                client_secret=context.client_secret,
            )
        return self._credentials[key]

    async def get_token(self, context: ConnectionContext) -> str:
        """
        Get D365 access token using client credentials flow

        Args:
            context: Connection parameters with tenant, client id and secret

        Returns:
            Valid access token for the environment in context.base_url
        """
        missing = [
            name for name, value in (
                ("tenant", context.tenant_id),
                ("url", context.base_url),
                ("client id", context.client_id),
                ("client secret", context.client_secret),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Cannot request a token, missing: {', '.join(missing)}"
            )

        scope = self.scope_for(context)
        cache_key = f"{context.tenant_id}:{context.client_id}:{scope}"

        async with self._lock:
            # Check cache first
            if cache_key in self.token_cache:
                token_data = self.token_cache[cache_key]
                if token_data["expires_at"] > time.time() + EXPIRY_BUFFER_SECONDS:
                    logger.debug("Using cached D365 token", scope=scope)
                    return str(token_data["token"])

            try:
                logger.debug("Requesting new D365 token", scope=scope)
                token = self._credential_for(context).get_token(scope)
            except Exception as e:
                logger.error(
                    "Failed to acquire D365 token",
                    error=str(e),
                    tenant_id=context.tenant_id,
                    client_id=context.client_id,
                )
                raise AuthenticationError(f"Failed to acquire D365 token: {e}") from e

            self.token_cache[cache_key] = {"token": token.token, "expires_at": token.expires_on}
            logger.info("D365 token acquired successfully", scope=scope, expires_at=token.expires_on)

            return str(token.token)

    def clear_token_cache(self) -> None:
        """Clear the token cache"""
        self.token_cache.clear()
        logger.info("Token cache cleared")

    def get_provider_info(self) -> Dict[str, Any]:
        return {
            "type": "client_credentials",
            "cache_size": len(self.token_cache),
        }


class StaticTokenProvider(ITokenProvider):
    """Returns a bearer token the caller already holds"""

    def __init__(self, token: Optional[str] = None) -> None:
        self.token = token

    async def get_token(self, context: ConnectionContext) -> str:
        token = self.token or context.token
        if not token:
            raise AuthenticationError("No bearer token supplied")
        logger.debug("Using caller supplied token")
        return token

    def get_provider_info(self) -> Dict[str, Any]:
        return {"type": "static", "has_token": bool(self.token)}
