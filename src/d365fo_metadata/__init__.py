"""
D365FO Metadata

Query the public entity and public enumeration metadata of a Microsoft
Dynamics 365 Finance & Operations environment over OData.
"""

__version__ = "0.1.0"

from .main import main

__all__ = ["main"]
