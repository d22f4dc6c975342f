"""Authorization header helpers"""

from typing import Dict

import structlog

logger = structlog.get_logger(__name__)


def build_authorization_header(url: str, token: str) -> Dict[str, str]:
    """
    Build the Authorization header for a request to the given url.

    A token that already carries the 'Bearer ' scheme is used as is.
    """
    if not token:
        raise ValueError("A bearer token is required")

    value = token if token.lower().startswith("bearer ") else f"Bearer {token}"
    logger.debug("Authorization header built", url=url)
    return {"Authorization": value}
