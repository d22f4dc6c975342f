"""
Metadata Service Interface

Defines contract for public metadata lookups
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..result import QueryResult
from ..shaping import ShapedOutput


class IMetadataService(ABC):
    """Interface for public metadata services"""

    @abstractmethod
    async def get_public_entities(
        self,
        *,
        name: Optional[str] = None,
        name_contains: Optional[str] = None,
        odata_query: Optional[str] = None,
        raw_output: bool = False,
        out_names_only: bool = False,
        output_as_json: bool = False,
        tenant: Optional[str] = None,
        url: Optional[str] = None,
        system_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        token: Optional[str] = None,
    ) -> QueryResult[ShapedOutput]:
        """
        Get public entities, optionally filtered by name.

        Args:
            name: Exact entity name or entity set name (case-insensitive)
            name_contains: Text contained in the entity name or entity set name
            odata_query: OData options appended to the request, e.g. '$top=10'
            raw_output: Return the response document unchanged
            out_names_only: Return only entity and entity set names
            output_as_json: Return JSON text instead of records
            tenant, url, system_url, client_id, client_secret, token:
                Connection parameters overriding the default configuration

        Returns:
            QueryResult holding the shaped output or the failure
        """
        pass

    @abstractmethod
    async def get_public_enums(
        self,
        *,
        name: Optional[str] = None,
        name_contains: Optional[str] = None,
        odata_query: Optional[str] = None,
        raw_output: bool = False,
        output_as_json: bool = False,
        tenant: Optional[str] = None,
        url: Optional[str] = None,
        system_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        token: Optional[str] = None,
    ) -> QueryResult[ShapedOutput]:
        """
        Get public enumerations flattened to one record per member.

        Args:
            name: Exact enum name or label id (case-insensitive)
            name_contains: Text contained in the enum name or label id
            odata_query: OData options appended to the request
            raw_output: Return the response document unchanged
            output_as_json: Return JSON text instead of records

        Returns:
            QueryResult holding the shaped output or the failure
        """
        pass
