"""
Authentication module for D365FO metadata queries

Handles Azure AD client credentials and caller supplied bearer tokens.
"""

from .interface import ITokenProvider, AuthenticationError
from .headers import build_authorization_header
from .providers import ClientCredentialsTokenProvider, StaticTokenProvider

__all__ = [
    "ITokenProvider",
    "AuthenticationError",
    "ClientCredentialsTokenProvider",
    "StaticTokenProvider",
    "build_authorization_header",
]
