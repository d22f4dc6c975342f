"""
Metadata Client module

HTTP client for the D365 Finance & Operations metadata endpoints.
"""

from .interface import IMetadataClient
from .metadata_client import MetadataClient

__all__ = [
    "IMetadataClient",
    "MetadataClient",
]
