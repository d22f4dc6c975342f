"""
Server Factory for the D365FO metadata MCP server

Creates configured server instances and validates configuration.
"""

from typing import Optional
import structlog
from fastmcp import FastMCP

from . import __version__
from .config import Settings, get_settings
from .factories import TokenProviderFactory
from .models import ConnectionContext, MetadataQuery, MetadataResource
from .query import QueryBuilder
from .services import PublicMetadataService
from .tools import ToolRegistry

logger = structlog.get_logger(__name__)


class ServerFactory:
    """
    Factory for creating fully configured MCP server instances.
    """

    @staticmethod
    def create_configured_server(settings: Optional[Settings] = None) -> FastMCP:
        """
        Create a ready-to-run MCP server.

        Returns:
            FastMCP server with the metadata tools registered
        """
        logger.info("Creating D365FO metadata MCP server")

        settings = settings or get_settings()
        if not settings.is_configured:
            logger.warning("No default D365 url configured, tool calls will fail until D365FO_URL is set")

        mcp = FastMCP(name="D365FO-Metadata", version=__version__)

        metadata_service = PublicMetadataService.from_settings(settings)
        ToolRegistry.register_all_tools(mcp, metadata_service)

        logger.info("D365FO metadata MCP server created")
        return mcp


class ServerValidator:
    """
    Configuration checks run from the command line.
    """

    @staticmethod
    async def validate_configuration(settings: Optional[Settings] = None) -> bool:
        """Validate configuration and token acquisition"""
        print("🔧 Validating D365FO metadata configuration...")

        settings = settings or get_settings()
        context = ConnectionContext.resolve(settings)

        print("✅ Configuration loaded")
        print(f"   - Tenant: {context.tenant_id or '(not set)'}")
        print(f"   - Url: {context.base_url or '(not set)'}")
        print(f"   - System Url: {context.system_url or '(not set)'}")
        print(f"   - Client Id: {context.client_id or '(not set)'}")
        print(f"   - Request Timeout: {settings.request_timeout}s")

        try:
            url = QueryBuilder.build(context, MetadataQuery(resource=MetadataResource.PUBLIC_ENTITIES))
            print(f"✅ Metadata endpoint: {url}")
        except Exception as e:
            print(f"❌ Invalid configuration: {e}")
            return False

        try:
            token_provider = TokenProviderFactory.create(context)
            await token_provider.get_token(context)
            print("✅ D365 token acquired")
        except Exception as e:
            print(f"❌ Token acquisition failed: {e}")
            return False

        print("\n🎉 Configuration validation completed successfully!")
        return True
