"""
Query result container

Services return a QueryResult instead of raising, so each caller decides
whether a failure is raised or reported.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import MetadataQueryError

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Either a value or the error that prevented it"""

    value: Optional[T] = None
    error: Optional[MetadataQueryError] = None

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: MetadataQueryError) -> "QueryResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the stored error"""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
