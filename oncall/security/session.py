"""Cookie-backed session values.

All session state lives in the client's cookie jar; nothing is kept in
server memory between requests.
"""

import logging
import secrets
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

from .signing import SignedTokenCodec

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "linear_session"
STATE_COOKIE_NAME = "linear_oauth_state"
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days
STATE_MAX_AGE = 60 * 10  # 10 minutes
STATE_NONCE_BYTES = 32


class SessionStore:
    """Reads and writes the Linear access token and the OAuth state nonce."""

    def __init__(self, codec: SignedTokenCodec, secure: bool = False):
        """Initialize the store.

        Args:
            codec: Codec used to sign and verify cookie values
            secure: Mark cookies Secure (production only)
        """
        self.codec = codec
        self.secure = secure

    def _set_cookie(self, response: Response, name: str, value: str, max_age: int) -> None:
        response.set_cookie(
            key=name,
            value=self.codec.sign(value),
            max_age=max_age,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )

    def _read_cookie(self, conn: HTTPConnection, name: str) -> Optional[str]:
        signed_value = conn.cookies.get(name)
        if not signed_value:
            return None
        return self.codec.verify(signed_value)

    def get_access_token(self, conn: HTTPConnection) -> Optional[str]:
        """Return the verified access token, or None."""
        return self._read_cookie(conn, SESSION_COOKIE_NAME)

    def set_access_token(self, response: Response, token: str) -> None:
        self._set_cookie(response, SESSION_COOKIE_NAME, token, SESSION_MAX_AGE)

    def clear_access_token(self, response: Response) -> None:
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")

    def issue_oauth_state(self, response: Response) -> str:
        """Store a fresh CSRF nonce and return it in plain text."""
        state = secrets.token_hex(STATE_NONCE_BYTES)
        self._set_cookie(response, STATE_COOKIE_NAME, state, STATE_MAX_AGE)
        return state

    def consume_oauth_state(
        self,
        conn: HTTPConnection,
        response: Response,
        provided_state: Optional[str]
    ) -> bool:
        """Check ``provided_state`` against the stored nonce.

        The nonce is single-use: on success the cookie is deleted before
        returning True.
        """
        state = self._read_cookie(conn, STATE_COOKIE_NAME)
        if not state or not provided_state:
            return False

        if not secrets.compare_digest(state.encode("utf-8"), provided_state.encode("utf-8")):
            logger.warning("OAuth state mismatch")
            return False

        response.delete_cookie(STATE_COOKIE_NAME, path="/")
        return True
