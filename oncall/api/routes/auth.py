"""Linear OAuth endpoints."""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from ...exceptions import ConfigurationError, OAuthError
from ...security import OAuthFlowController, SessionStore
from ..dependencies import get_oauth_controller, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/linear", tags=["auth"])


@router.get("/start", summary="Start the Linear OAuth flow")
async def start(controller: OAuthFlowController = Depends(get_oauth_controller)) -> Response:
    response = Response(status_code=status.HTTP_302_FOUND)
    response.headers["location"] = controller.start(response)
    return response


@router.get("/callback", summary="Complete the Linear OAuth flow")
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    controller: OAuthFlowController = Depends(get_oauth_controller)
) -> Response:
    """Redirect back to the app, with ``?error=<code>`` on failure.

    The same response is used on failure so a consumed state cookie is
    still deleted in the browser.
    """
    response = RedirectResponse(controller.public_origin, status_code=status.HTTP_302_FOUND)

    try:
        await controller.callback(request, response, code, state, error)
    except OAuthError as e:
        logger.warning(f"Linear OAuth callback failed: {e.code} - {e}")
        response.headers["location"] = f"{controller.public_origin}?{urlencode({'error': e.code})}"

    return response


@router.get("/status", summary="Whether a Linear account is connected")
async def connection_status(request: Request) -> dict:
    try:
        store = get_session_store()
    except ConfigurationError as e:
        logger.warning(f"Session store unavailable: {e}")
        return {"connected": False}

    return {"connected": store.get_access_token(request) is not None}


@router.post("/logout", summary="Disconnect the Linear account")
async def logout(store: SessionStore = Depends(get_session_store)) -> Response:
    response = JSONResponse({"success": True})
    store.clear_access_token(response)
    return response
