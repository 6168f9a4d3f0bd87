"""
Shared-secret API key gate.

The caller key is read from the ``X-API-Key`` header, falling back to the
``api`` query parameter, and compared against a single configured secret.
"""

import hmac
from typing import Optional

from backend.app.core.context import RequestContext

API_KEY_HEADER = "X-API-Key"
API_KEY_QUERY_PARAM = "api"


class AuthGate:
    """Validates request contexts against one configured API key."""

    def __init__(self, secret: str):
        self.secret = secret or ""

    @staticmethod
    def extract_key(context: RequestContext) -> Optional[str]:
        key = context.header(API_KEY_HEADER)
        if key is not None:
            return key
        return context.query_param(API_KEY_QUERY_PARAM)

    def validate(self, context: RequestContext) -> bool:
        """
        Check the caller key.

        Returns:
            True if the supplied key equals the configured secret,
            False when it is missing, different, or no secret is configured.
        """
        key = self.extract_key(context)
        if key is None or not self.secret:
            return False
        return hmac.compare_digest(key.encode("utf-8"), self.secret.encode("utf-8"))
