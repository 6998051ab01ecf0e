"""Linear OAuth2 authorization-code flow.

The controller never builds redirect responses itself; callers translate
OAuthError codes into a redirect back to the public origin.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from starlette.requests import HTTPConnection
from starlette.responses import Response

from ..exceptions import ConfigurationError, OAuthError
from .session import SessionStore

logger = logging.getLogger(__name__)

LINEAR_AUTHORIZE_URL = "https://linear.app/oauth/authorize"
LINEAR_TOKEN_URL = "https://api.linear.app/oauth/token"


class OAuthFlowController:
    """Starts the Linear authorization flow and completes the callback."""

    def __init__(
        self,
        session_store: SessionStore,
        client_id: Optional[str],
        client_secret: Optional[str],
        public_origin: Optional[str],
        scope: str = "read,issues:create",
        redirect_path: str = "/auth/linear/callback",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not client_id or not client_secret or not public_origin:
            raise ConfigurationError(
                "LINEAR_OAUTH_CLIENT_ID, LINEAR_OAUTH_CLIENT_SECRET, and "
                "PUBLIC_ORIGIN environment variables are required"
            )

        self.session_store = session_store
        self.client_id = client_id
        self.client_secret = client_secret
        self.public_origin = public_origin.rstrip("/")
        self.scope = scope
        self.redirect_uri = f"{self.public_origin}{redirect_path}"
        self.timeout = timeout
        self._transport = transport

    def start(self, response: Response) -> str:
        """Issue a state nonce on ``response`` and return the provider URL."""
        state = self.session_store.issue_oauth_state(response)
        params = urlencode({
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
        })
        logger.info("Starting Linear OAuth flow")
        return f"{LINEAR_AUTHORIZE_URL}?{params}"

    async def callback(
        self,
        conn: HTTPConnection,
        response: Response,
        code: Optional[str],
        state: Optional[str],
        provider_error: Optional[str] = None
    ) -> str:
        """Validate the callback, exchange the code and store the token.

        Returns:
            The access token that was written to the session cookie

        Raises:
            OAuthError: On provider denial, missing parameters, a bad or
                replayed state, or a failed token exchange
        """
        if provider_error:
            logger.warning(f"Linear OAuth denied by provider: {provider_error}")
            raise OAuthError(
                OAuthError.PROVIDER_DENIED,
                f"Authorization denied by provider: {provider_error}"
            )

        if not code or not state:
            raise OAuthError(OAuthError.MISSING_PARAMETER, "Missing code or state parameter")

        if not self.session_store.consume_oauth_state(conn, response, state):
            logger.warning("Rejected OAuth callback with invalid state")
            raise OAuthError(OAuthError.INVALID_STATE, "Invalid or expired OAuth state")

        access_token = await self.exchange_code(code)
        self.session_store.set_access_token(response, access_token)
        logger.info("Linear account connected")
        return access_token

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token (single attempt)."""
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(LINEAR_TOKEN_URL, data=form)
        except httpx.HTTPError as e:
            logger.error(f"Token exchange request failed: {e}")
            raise OAuthError(
                OAuthError.TOKEN_EXCHANGE_FAILED,
                f"Failed to exchange code for token: {e}"
            ) from e

        if not resp.is_success:
            logger.error(f"Token exchange rejected: {resp.status_code} {resp.text}")
            raise OAuthError(
                OAuthError.TOKEN_EXCHANGE_FAILED,
                f"Failed to exchange code for token: {resp.status_code} {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token or not isinstance(access_token, str):
            raise OAuthError(
                OAuthError.TOKEN_EXCHANGE_FAILED,
                "Token response did not contain an access_token",
                status_code=resp.status_code,
                body=resp.text,
            )
        return access_token
