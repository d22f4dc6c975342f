"""Metadata service implementations"""

from .interface import IMetadataService
from .metadata_service import PublicMetadataService

__all__ = [
    "IMetadataService",
    "PublicMetadataService",
]
