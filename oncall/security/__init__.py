"""Signed cookie sessions and the Linear OAuth flow."""

from .signing import SignedTokenCodec
from .session import SessionStore, SESSION_COOKIE_NAME, STATE_COOKIE_NAME
from .oauth import OAuthFlowController

__all__ = [
    "SignedTokenCodec",
    "SessionStore",
    "SESSION_COOKIE_NAME",
    "STATE_COOKIE_NAME",
    "OAuthFlowController",
]
