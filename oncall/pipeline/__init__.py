"""Ticket pipeline: intent gating, ticket lifecycle and export."""

from .ids import IdSequence
from .debounce import DebounceTimer
from .tickets import TicketStateMachine, build_mockup_request
from .intent_gate import IntentGate
from .export import ExportGateway, build_issue_description, build_issue_title
from .session import PipelineSession

__all__ = [
    "IdSequence",
    "DebounceTimer",
    "TicketStateMachine",
    "build_mockup_request",
    "IntentGate",
    "ExportGateway",
    "build_issue_description",
    "build_issue_title",
    "PipelineSession",
]
