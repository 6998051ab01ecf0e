"""Component providers for route dependencies.

Each provider builds its component on first use and caches it. A missing
setting raises ConfigurationError from the provider, which breaks only the
routes that need that component.
"""

import logging
from functools import lru_cache
from typing import Callable

from ..config import settings
from ..pipeline import ExportGateway, PipelineSession
from ..security import OAuthFlowController, SessionStore, SignedTokenCodec
from ..services import detect_intent, generate_mockup

logger = logging.getLogger(__name__)

PipelineFactory = Callable[[], PipelineSession]


@lru_cache
def get_token_codec() -> SignedTokenCodec:
    return SignedTokenCodec(settings.SESSION_SECRET)


@lru_cache
def get_session_store() -> SessionStore:
    return SessionStore(get_token_codec(), secure=settings.is_production)


@lru_cache
def get_oauth_controller() -> OAuthFlowController:
    return OAuthFlowController(
        get_session_store(),
        client_id=settings.LINEAR_OAUTH_CLIENT_ID,
        client_secret=settings.LINEAR_OAUTH_CLIENT_SECRET,
        public_origin=settings.PUBLIC_ORIGIN,
        scope=settings.LINEAR_OAUTH_SCOPE,
        redirect_path=settings.LINEAR_OAUTH_REDIRECT_PATH,
        timeout=settings.LINEAR_API_TIMEOUT,
    )


@lru_cache
def get_export_gateway() -> ExportGateway:
    return ExportGateway(
        default_team_id=settings.LINEAR_TEAM_ID,
        timeout=settings.LINEAR_API_TIMEOUT,
    )


def get_pipeline_factory() -> PipelineFactory:
    """Factory for one PipelineSession per WebSocket connection."""

    def create_session() -> PipelineSession:
        return PipelineSession.from_settings(
            settings,
            classifier=detect_intent,
            generator=generate_mockup,
            export_gateway=get_export_gateway(),
        )

    return create_session


def reset_providers() -> None:
    """Drop cached components (used after settings change in tests)."""
    for provider in (get_token_codec, get_session_store, get_oauth_controller, get_export_gateway):
        provider.cache_clear()
