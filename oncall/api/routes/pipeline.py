"""Live pipeline WebSocket and metrics endpoints."""

import asyncio
import json
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ...exceptions import (
    ConfigurationError,
    ExportFailed,
    InvalidTicketTransitionError,
    NoTeamResolved,
    TicketNotFoundError,
    Unauthenticated,
)
from ...models.base import CamelModel
from ...models.transcript import Speaker
from ...pipeline import PipelineSession
from ...utils.metrics import metrics
from ..dependencies import PipelineFactory, get_pipeline_factory, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pipeline"])


class ClientMessage(CamelModel):
    """A message sent by the browser over the pipeline socket."""

    type: Literal["transcript", "select_variant", "retry", "remove", "export"]
    speaker: Speaker = Speaker.USER
    text: Optional[str] = None
    is_final: bool = True
    ticket_id: Optional[str] = None
    index: Optional[int] = None


def _error(code: str, message: str, ticket_id: Optional[str] = None) -> dict:
    payload = {"type": "error", "code": code, "message": message}
    if ticket_id is not None:
        payload["ticketId"] = ticket_id
    return payload


class PipelineConnection:
    """Bridges one WebSocket to one PipelineSession."""

    def __init__(self, websocket: WebSocket, session: PipelineSession):
        self.websocket = websocket
        self.session = session
        self.outbox: asyncio.Queue = asyncio.Queue()
        self._exports: set[asyncio.Task] = set()

        session.subscribe(self._on_event)

    def _on_event(self, kind: str, payload: dict) -> None:
        self.outbox.put_nowait({"type": kind, "data": payload})

    async def forward(self) -> None:
        while True:
            message = await self.outbox.get()
            await self.websocket.send_json(message)

    def handle(self, raw: dict) -> None:
        try:
            message = ClientMessage.model_validate(raw)
        except ValidationError as e:
            self.outbox.put_nowait(_error("invalid_message", str(e)))
            return

        ticket_id = message.ticket_id
        try:
            if message.type == "transcript":
                self.session.receive_fragment(message.speaker, message.text or "", message.is_final)
            elif ticket_id is None:
                self.outbox.put_nowait(_error("invalid_message", "ticketId is required"))
            elif message.type == "select_variant":
                self.session.select_variant(ticket_id, message.index if message.index is not None else -1)
            elif message.type == "retry":
                self.session.retry(ticket_id)
            elif message.type == "remove":
                if self.session.remove(ticket_id):
                    self.outbox.put_nowait({"type": "removed", "data": {"ticketId": ticket_id}})
            elif message.type == "export":
                task = asyncio.create_task(self._export(ticket_id))
                self._exports.add(task)
                task.add_done_callback(self._exports.discard)
        except TicketNotFoundError as e:
            self.outbox.put_nowait(_error("ticket_not_found", str(e), ticket_id))
        except InvalidTicketTransitionError as e:
            self.outbox.put_nowait(_error("invalid_transition", str(e), ticket_id))

    async def _export(self, ticket_id: str) -> None:
        try:
            access_token = get_session_store().get_access_token(self.websocket)
            reference = await self.session.export(ticket_id, access_token)
        except Unauthenticated as e:
            self.outbox.put_nowait(_error("unauthenticated", str(e), ticket_id))
        except NoTeamResolved as e:
            self.outbox.put_nowait(_error("no_team", str(e), ticket_id))
        except ExportFailed as e:
            self.outbox.put_nowait(_error("export_failed", str(e), ticket_id))
        except ConfigurationError as e:
            self.outbox.put_nowait(_error("configuration", str(e), ticket_id))
        except TicketNotFoundError as e:
            self.outbox.put_nowait(_error("ticket_not_found", str(e), ticket_id))
        except InvalidTicketTransitionError as e:
            self.outbox.put_nowait(_error("invalid_transition", str(e), ticket_id))
        except Exception as e:
            logger.error(f"Export of {ticket_id} failed: {e}", exc_info=True)
            self.outbox.put_nowait(_error("export_failed", str(e) or "Export failed", ticket_id))
        else:
            self.outbox.put_nowait({
                "type": "exported",
                "data": {"ticketId": ticket_id, **reference.model_dump(mode="json", by_alias=True)}
            })

    def close(self) -> None:
        for task in list(self._exports):
            task.cancel()
        self.session.close()


@router.websocket("/pipeline")
async def pipeline_socket(
    websocket: WebSocket,
    create_session: PipelineFactory = Depends(get_pipeline_factory)
):
    """Run one pipeline session for the lifetime of the socket."""
    await websocket.accept()
    connection = PipelineConnection(websocket, create_session())
    forwarder = asyncio.create_task(connection.forward())
    metrics.adjust_gauge("pipeline_sessions", 1)
    logger.info("Pipeline socket connected")

    try:
        while True:
            try:
                raw = json.loads(await websocket.receive_text())
            except ValueError:
                raw = None
            if not isinstance(raw, dict):
                connection.outbox.put_nowait(_error("invalid_message", "Expected a JSON object"))
                continue
            connection.handle(raw)
    except WebSocketDisconnect:
        logger.info("Pipeline socket disconnected")
    finally:
        connection.close()
        forwarder.cancel()
        metrics.adjust_gauge("pipeline_sessions", -1)


@router.get("/metrics", summary="In-process pipeline metrics")
async def get_metrics() -> dict:
    return metrics.get_stats()
