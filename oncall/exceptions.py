"""Exception types shared across the pipeline and the session layer."""

from typing import Optional


class OncallError(Exception):
    """Base class for application errors."""


class ConfigurationError(OncallError):
    """A required setting is missing."""


# Ticket lifecycle

class TicketNotFoundError(OncallError):
    def __init__(self, ticket_id: str):
        super().__init__(f"Ticket not found: {ticket_id}")
        self.ticket_id = ticket_id


class InvalidTicketTransitionError(OncallError):
    def __init__(self, ticket_id: str, current: str, target: str):
        super().__init__(
            f"Ticket {ticket_id} cannot move from '{current}' to '{target}'"
        )
        self.ticket_id = ticket_id
        self.current = current
        self.target = target


# OAuth

class OAuthError(OncallError):
    """OAuth callback failure.

    ``code`` is the machine-readable value sent back to the browser as
    ``?error=<code>``.
    """

    PROVIDER_DENIED = "provider_denied"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_STATE = "invalid_state"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.body = body


# Export

class ExportError(OncallError):
    """Base class for issue export failures."""


class Unauthenticated(ExportError):
    def __init__(self, message: str = "Linear account is not connected"):
        super().__init__(message)


class NoTeamResolved(ExportError):
    def __init__(self, message: str = "Unable to resolve a Linear team for the issue"):
        super().__init__(message)


class ExportFailed(ExportError):
    """The issue tracker call failed. Wraps the underlying message."""
