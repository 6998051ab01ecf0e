"""HMAC signing for opaque cookie values."""

import hashlib
import hmac
import logging
from typing import Optional

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SEPARATOR = "."


class SignedTokenCodec:
    """Signs and verifies string values with HMAC-SHA256.

    A signed blob is ``value + "." + hexdigest``. The secret is process-wide
    configuration; building a codec without one is a configuration error.
    """

    def __init__(self, secret: Optional[str]):
        if not secret:
            raise ConfigurationError("SESSION_SECRET environment variable is required")
        self._secret = secret.encode("utf-8")

    def _digest(self, value: str) -> str:
        return hmac.new(self._secret, value.encode("utf-8"), hashlib.sha256).hexdigest()

    def sign(self, value: str) -> str:
        """Return ``value`` with its signature appended."""
        return f"{value}{SEPARATOR}{self._digest(value)}"

    def verify(self, signed_value: Optional[str]) -> Optional[str]:
        """Return the original value, or None if the blob is not authentic.

        Never raises.
        """
        if not signed_value:
            return None

        parts = signed_value.split(SEPARATOR)
        if len(parts) != 2:
            return None

        value, signature = parts
        if not value or not signature:
            return None

        expected = self._digest(value)
        if len(signature) != len(expected):
            return None

        if hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
            return value

        logger.debug("Rejected signed value with mismatched signature")
        return None
