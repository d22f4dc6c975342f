"""
Response Shaper

Turns a metadata response document into console/caller friendly output.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import structlog

from ..errors import MalformedResponseError

logger = structlog.get_logger(__name__)

Record = Dict[str, Any]
ShapedOutput = Union[Record, List[Record], str]


class OutputMode(str, Enum):
    """How a metadata response is returned"""

    RAW = "raw"
    ENTITY_LIST = "entity_list"
    ENTITY_NAMES_ONLY = "entity_names_only"
    ENUM_FLATTENED = "enum_flattened"

    def __str__(self) -> str:
        return self.value


def get_field(record: Record, name: str) -> Any:
    """Read a server field by its PascalCase name, accepting camelCase too"""
    if name in record:
        return record[name]
    camel = name[:1].lower() + name[1:]
    if camel in record:
        return record[camel]
    raise KeyError(name)


class ResponseShaper:
    """Stateless shaping of metadata responses"""

    @staticmethod
    def shape(
        document: Record,
        mode: OutputMode,
        as_json: bool = False,
        search_term: Optional[str] = None,
    ) -> ShapedOutput:
        """
        Shape a metadata response.

        Args:
            document: Decoded JSON response, envelope included
            mode: Output mode
            as_json: Serialize the shaped result to a JSON string
            search_term: Term being resolved, attached to errors

        Returns:
            The raw document, a list of records, or their JSON text

        Raises:
            MalformedResponseError: If the value collection (or an enum's
                member list) is missing in a non-raw mode
        """
        result: Union[Record, List[Record]]

        if mode is OutputMode.RAW:
            result = document
        elif mode is OutputMode.ENTITY_LIST:
            result = ResponseShaper.sort_by_name(ResponseShaper.extract_values(document, search_term))
        elif mode is OutputMode.ENTITY_NAMES_ONLY:
            entities = ResponseShaper.sort_by_name(ResponseShaper.extract_values(document, search_term))
            result = ResponseShaper.project_entity_names(entities)
        elif mode is OutputMode.ENUM_FLATTENED:
            enums = ResponseShaper.sort_by_name(ResponseShaper.extract_values(document, search_term))
            result = ResponseShaper.flatten_enums(enums, search_term)
        else:
            raise ValueError(f"Unknown output mode: {mode}")

        logger.debug("Response shaped",
                     mode=mode.value,
                     as_json=as_json,
                     record_count=len(result) if isinstance(result, list) else None)

        if as_json:
            return json.dumps(result, indent=2, default=str)
        return result

    @staticmethod
    def extract_values(document: Record, search_term: Optional[str] = None) -> List[Record]:
        """Return the OData value collection"""
        try:
            values = get_field(document, "Value")
        except KeyError:
            raise MalformedResponseError(
                "Response has no 'value' collection", search_term=search_term
            ) from None

        if not isinstance(values, list):
            raise MalformedResponseError(
                "Response 'value' is not a collection", search_term=search_term
            )
        return values

    @staticmethod
    def sort_by_name(records: List[Record]) -> List[Record]:
        """Ordinal ascending sort on Name"""
        return sorted(records, key=lambda record: str(record.get("Name", record.get("name", ""))))

    @staticmethod
    def project_entity_names(entities: List[Record]) -> List[Record]:
        return [
            {
                "data_entity_name": entity.get("Name", entity.get("name")),
                "entity_name": entity.get("EntitySetName", entity.get("entitySetName")),
            }
            for entity in entities
        ]

    @staticmethod
    def flatten_enums(enums: List[Record], search_term: Optional[str] = None) -> List[Record]:
        """
        One record per enum member.

        Enum order is kept as given, members are sorted by value within each enum.
        """
        flattened: List[Record] = []
        for enum in enums:
            try:
                enum_name = get_field(enum, "Name")
                members = sorted(get_field(enum, "Members") or [],
                                 key=lambda item: get_field(item, "Value"))
            except KeyError as e:
                raise MalformedResponseError(
                    f"Enumeration record is missing '{e.args[0]}'", search_term=search_term
                ) from None

            for member in members:
                flattened.append({
                    "enum_name": enum_name,
                    "enum_value_name": member.get("Name", member.get("name")),
                    "enum_int_value": get_field(member, "Value"),
                    "enum_value_label_id": member.get("LabelId", member.get("labelId")),
                })
        return flattened
