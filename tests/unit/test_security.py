"""Unit tests for signed cookies, the session store and the OAuth flow."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from faker import Faker
from starlette.requests import Request
from starlette.responses import Response

from oncall.exceptions import ConfigurationError, OAuthError
from oncall.security import (
    SESSION_COOKIE_NAME,
    STATE_COOKIE_NAME,
    OAuthFlowController,
    SessionStore,
    SignedTokenCodec,
)
from oncall.security.oauth import LINEAR_AUTHORIZE_URL, LINEAR_TOKEN_URL


def cookie_request(**cookies) -> Request:
    """Build a request carrying ``cookies``."""
    header = "; ".join(f"{name}={value}" for name, value in cookies.items())
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": [(b"cookie", header.encode("latin-1"))],
    })


def response_cookies(response: Response) -> dict[str, str]:
    """Cookie values written by ``response``; deleted cookies map to ""."""
    cookies = {}
    for header in response.headers.getlist("set-cookie"):
        name, _, rest = header.partition("=")
        cookies[name] = rest.split(";", 1)[0].strip('"')
    return cookies


def build_controller(session_store, handler=None) -> OAuthFlowController:
    transport = httpx.MockTransport(handler) if handler else None
    return OAuthFlowController(
        session_store,
        client_id="client-id",
        client_secret="client-secret",
        public_origin="https://app.example.com/",
        transport=transport,
    )


class TestSignedTokenCodec:
    """Test suite for HMAC signing."""

    @pytest.mark.unit
    def test_sign_and_verify(self, codec):
        signed = codec.sign("lin_oauth_abc123")

        assert signed.startswith("lin_oauth_abc123.")
        assert codec.verify(signed) == "lin_oauth_abc123"

    @pytest.mark.unit
    def test_tampered_value_rejected(self, codec):
        signed = codec.sign("token-a")
        _, signature = signed.split(".")

        assert codec.verify(f"token-b.{signature}") is None

    @pytest.mark.unit
    def test_round_trip_for_varied_values(self, codec):
        fake = Faker()
        values = [fake.uuid4(), fake.sha256(), fake.pystr(min_chars=1, max_chars=64), "lin_oauth_'quoted'"]

        for value in values:
            assert codec.verify(codec.sign(value)) == value

    @pytest.mark.unit
    def test_every_flipped_signature_character_rejected(self, codec):
        value, signature = codec.sign("lin_oauth_abc123").split(".")

        for position, char in enumerate(signature):
            flipped = "0" if char != "0" else "1"
            tampered = signature[:position] + flipped + signature[position + 1:]
            assert codec.verify(f"{value}.{tampered}") is None, position

    @pytest.mark.unit
    def test_uppercased_signature_rejected(self, codec):
        value, signature = codec.sign("token").split(".")

        assert codec.verify(f"{value}.{signature.upper()}") is None

    @pytest.mark.unit
    def test_other_secret_rejected(self, codec):
        signed = SignedTokenCodec("another-secret").sign("token")

        assert codec.verify(signed) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("blob", [
        None,
        "",
        "no-separator",
        "a.b.c",
        ".deadbeef",
        "value.",
        "value.short",
    ])
    def test_malformed_values_never_raise(self, codec, blob):
        assert codec.verify(blob) is None

    @pytest.mark.unit
    def test_missing_secret_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            SignedTokenCodec(None)


class TestSessionStore:
    """Test suite for cookie-backed session values."""

    @pytest.mark.unit
    def test_access_token_round_trip(self, session_store):
        response = Response()
        session_store.set_access_token(response, "token-123")

        cookies = response_cookies(response)
        request = cookie_request(**{SESSION_COOKIE_NAME: cookies[SESSION_COOKIE_NAME]})

        assert cookies[SESSION_COOKIE_NAME] != "token-123"
        assert session_store.get_access_token(request) == "token-123"

    @pytest.mark.unit
    def test_cookie_attributes(self, codec):
        response = Response()
        SessionStore(codec, secure=True).set_access_token(response, "token-123")

        header = response.headers["set-cookie"].lower()
        assert "httponly" in header
        assert "samesite=lax" in header
        assert "path=/" in header
        assert "secure" in header
        assert "max-age=604800" in header

    @pytest.mark.unit
    def test_unsigned_cookie_is_ignored(self, session_store):
        request = cookie_request(**{SESSION_COOKIE_NAME: "forged-token"})

        assert session_store.get_access_token(request) is None

    @pytest.mark.unit
    def test_clear_access_token(self, session_store):
        response = Response()
        session_store.clear_access_token(response)

        assert response_cookies(response)[SESSION_COOKIE_NAME] == ""

    @pytest.mark.unit
    def test_oauth_state_is_single_use(self, session_store):
        issued = Response()
        state = session_store.issue_oauth_state(issued)
        stored = response_cookies(issued)[STATE_COOKIE_NAME]
        request = cookie_request(**{STATE_COOKIE_NAME: stored})

        consumed = Response()
        assert session_store.consume_oauth_state(request, consumed, state) is True
        assert response_cookies(consumed)[STATE_COOKIE_NAME] == ""

    @pytest.mark.unit
    def test_oauth_state_mismatch(self, session_store):
        issued = Response()
        session_store.issue_oauth_state(issued)
        request = cookie_request(**{STATE_COOKIE_NAME: response_cookies(issued)[STATE_COOKIE_NAME]})

        response = Response()
        assert session_store.consume_oauth_state(request, response, "not-the-state") is False
        assert STATE_COOKIE_NAME not in response_cookies(response)

    @pytest.mark.unit
    def test_oauth_state_without_cookie(self, session_store):
        assert session_store.consume_oauth_state(cookie_request(), Response(), "anything") is False


class TestOAuthFlowController:
    """Test suite for the Linear OAuth flow."""

    @pytest.mark.unit
    def test_missing_configuration(self, session_store):
        with pytest.raises(ConfigurationError):
            OAuthFlowController(session_store, None, "secret", "https://app.example.com")

    @pytest.mark.unit
    def test_start_builds_authorize_url(self, session_store):
        controller = build_controller(session_store)
        response = Response()

        url = controller.start(response)

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert url.startswith(LINEAR_AUTHORIZE_URL)
        assert params["client_id"] == ["client-id"]
        assert params["redirect_uri"] == ["https://app.example.com/auth/linear/callback"]
        assert params["response_type"] == ["code"]
        assert params["scope"] == ["read,issues:create"]
        assert STATE_COOKIE_NAME in response_cookies(response)

    @pytest.mark.unit
    async def test_callback_stores_access_token(self, session_store):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "lin_token", "token_type": "Bearer"})

        controller = build_controller(session_store, handler)
        started = Response()
        state = parse_qs(urlparse(controller.start(started)).query)["state"][0]
        request = cookie_request(**{STATE_COOKIE_NAME: response_cookies(started)[STATE_COOKIE_NAME]})

        response = Response()
        token = await controller.callback(request, response, "auth-code", state)

        cookies = response_cookies(response)
        assert token == "lin_token"
        assert seen["url"] == LINEAR_TOKEN_URL
        assert seen["body"]["grant_type"] == ["authorization_code"]
        assert seen["body"]["code"] == ["auth-code"]
        assert cookies[STATE_COOKIE_NAME] == ""
        assert session_store.get_access_token(
            cookie_request(**{SESSION_COOKIE_NAME: cookies[SESSION_COOKIE_NAME]})
        ) == "lin_token"

    @pytest.mark.unit
    async def test_provider_denied(self, session_store):
        controller = build_controller(session_store)

        with pytest.raises(OAuthError) as exc_info:
            await controller.callback(cookie_request(), Response(), None, None, "access_denied")

        assert exc_info.value.code == OAuthError.PROVIDER_DENIED

    @pytest.mark.unit
    async def test_missing_parameter(self, session_store):
        controller = build_controller(session_store)

        with pytest.raises(OAuthError) as exc_info:
            await controller.callback(cookie_request(), Response(), "code", None)

        assert exc_info.value.code == OAuthError.MISSING_PARAMETER

    @pytest.mark.unit
    async def test_unknown_state_writes_no_token(self, session_store):
        """A state that was never issued fails before any token exchange."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"access_token": "lin_token"})

        controller = build_controller(session_store, handler)
        controller.start(Response())
        response = Response()

        with pytest.raises(OAuthError) as exc_info:
            await controller.callback(cookie_request(), response, "code", "forged-state")

        assert exc_info.value.code == OAuthError.INVALID_STATE
        assert calls == []
        assert SESSION_COOKIE_NAME not in response_cookies(response)

    @pytest.mark.unit
    @pytest.mark.parametrize("token_response", [
        httpx.Response(400, text="invalid_grant"),
        httpx.Response(200, json={"token_type": "Bearer"}),
        httpx.Response(200, text="ok"),
        httpx.Response(200, json=[1, 2]),
        httpx.Response(200, json={"access_token": None}),
    ])
    async def test_token_exchange_failed(self, session_store, token_response):
        controller = build_controller(session_store, lambda request: token_response)
        started = Response()
        state = parse_qs(urlparse(controller.start(started)).query)["state"][0]
        request = cookie_request(**{STATE_COOKIE_NAME: response_cookies(started)[STATE_COOKIE_NAME]})
        response = Response()

        with pytest.raises(OAuthError) as exc_info:
            await controller.callback(request, response, "code", state)

        assert exc_info.value.code == OAuthError.TOKEN_EXCHANGE_FAILED
        assert SESSION_COOKIE_NAME not in response_cookies(response)

    @pytest.mark.unit
    async def test_token_exchange_network_error(self, session_store):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        controller = build_controller(session_store, handler)

        with pytest.raises(OAuthError) as exc_info:
            await controller.exchange_code("code")

        assert exc_info.value.code == OAuthError.TOKEN_EXCHANGE_FAILED
