"""Request URL construction for the metadata endpoints"""

from .builder import QueryBuilder, escape_literal

__all__ = [
    "QueryBuilder",
    "escape_literal",
]
