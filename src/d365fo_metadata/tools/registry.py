"""
Tool Registry for the D365FO metadata MCP server

Exposes the public entity and public enumeration lookups as MCP tools.
"""

from typing import Optional
from fastmcp import FastMCP
from fastmcp.exceptions import FastMCPError
import structlog

from ..services import IMetadataService

logger = structlog.get_logger(__name__)


class ToolRegistry:
    """
    Centralized tool registration.
    """

    @staticmethod
    def register_all_tools(mcp: FastMCP, metadata_service: IMetadataService) -> None:
        """Register all MCP tools"""
        logger.info("Registering MCP tools")

        ToolRegistry._register_metadata_tools(mcp, metadata_service)

        logger.info("All MCP tools registered successfully")

    @staticmethod
    def _register_metadata_tools(mcp: FastMCP, metadata_service: IMetadataService) -> None:
        """Register public metadata lookup tools"""

        @mcp.tool
        async def get_public_entities(
            name: Optional[str] = None,
            name_contains: Optional[str] = None,
            odata_query: Optional[str] = None,
            names_only: bool = False,
        ) -> str:
            """
            Look up D365 public entities (data entities exposed over OData).

            Matching is case-insensitive against both the entity name and the
            entity set name. Use either name or name_contains, not both.

            Args:
                name: Exact entity name or entity set name (e.g. 'CustomersV3')
                name_contains: Text contained in the name (e.g. 'Customer')
                odata_query: Extra OData options, e.g. '$select=Name,EntitySetName'
                names_only: Return only data entity name / entity set name pairs

            Returns:
                JSON list of entities sorted by name

            Examples:
                get_public_entities(name="CustomersV3")
                get_public_entities(name_contains="Vendor", names_only=True)
            """
            result = await metadata_service.get_public_entities(
                name=name,
                name_contains=name_contains,
                odata_query=odata_query,
                out_names_only=names_only,
                output_as_json=True,
            )
            if not result.ok:
                logger.error("Public entity lookup failed", error=str(result.error))
                raise FastMCPError(f"Failed to get public entities: {result.error}")
            return str(result.value)

        @mcp.tool
        async def get_public_enums(
            name: Optional[str] = None,
            name_contains: Optional[str] = None,
            odata_query: Optional[str] = None,
        ) -> str:
            """
            Look up D365 public enumerations and their values.

            Matching is case-insensitive against the enum name and its label id.
            Every enum member is returned as one record with enum_name,
            enum_value_name, enum_int_value and enum_value_label_id, members
            ordered by value.

            Args:
                name: Exact enum name or label id (e.g. 'NoYes')
                name_contains: Text contained in the enum name or label id
                odata_query: Extra OData options

            Returns:
                JSON list of flattened enum members

            Examples:
                get_public_enums(name="NoYes")
                get_public_enums(name_contains="Status")
            """
            result = await metadata_service.get_public_enums(
                name=name,
                name_contains=name_contains,
                odata_query=odata_query,
                output_as_json=True,
            )
            if not result.ok:
                logger.error("Public enum lookup failed", error=str(result.error))
                raise FastMCPError(f"Failed to get public enums: {result.error}")
            return str(result.value)
