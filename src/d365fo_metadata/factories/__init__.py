"""
Factories for the metadata query collaborators

Chooses the token provider for a resolved connection context.
"""

from .auth_factory import TokenProviderFactory

__all__ = [
    "TokenProviderFactory",
]
