"""
Error taxonomy for metadata queries

Every error carries the search term that was being resolved when it happened.
The underlying technical error is chained as ``__cause__``.
"""

from typing import Optional


class MetadataQueryError(Exception):
    """Base class for metadata query failures"""

    def __init__(self, message: str, search_term: Optional[str] = None):
        super().__init__(message)
        self.search_term = search_term

    def __str__(self) -> str:
        message = super().__str__()
        if self.search_term:
            return f"{message} (search term: {self.search_term})"
        return message


class ConfigurationError(MetadataQueryError):
    """Missing or invalid connection configuration"""
    pass


class AuthenticationError(MetadataQueryError):
    """Token acquisition failed or the endpoint rejected the token (401/403)"""
    pass


class TransportError(MetadataQueryError):
    """Network failure or non-2xx response"""

    def __init__(
        self,
        message: str,
        search_term: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, search_term)
        self.status_code = status_code


class RequestTimeoutError(TransportError):
    """The request exceeded the configured timeout"""
    pass


class MalformedResponseError(MetadataQueryError):
    """The response is missing fields the requested output mode needs"""
    pass
