"""Linear issue export endpoint."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ...exceptions import ExportError, Unauthenticated
from ...models.linear import IssueReference, LinearIssueRequest
from ...pipeline import ExportGateway
from ...security import SessionStore
from ..dependencies import get_export_gateway, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/linear", tags=["linear"])


@router.post(
    "/issues",
    response_model=IssueReference,
    summary="Create a Linear issue",
    description="Creates an issue with the connected account's OAuth token."
)
async def create_issue(
    body: LinearIssueRequest,
    request: Request,
    store: SessionStore = Depends(get_session_store),
    gateway: ExportGateway = Depends(get_export_gateway)
):
    access_token = store.get_access_token(request)

    try:
        return await gateway.create_issue(body, access_token)
    except Unauthenticated as e:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": str(e)}
        )
    except ExportError as e:
        logger.error(f"Failed to create Linear issue: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Failed to create Linear issue"}
        )
