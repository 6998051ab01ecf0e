"""Export gateway - turns a ready ticket into a Linear issue."""

import logging
from typing import Callable, Optional

import httpx

from ..exceptions import ExportFailed, NoTeamResolved, Unauthenticated
from ..models.intent import DetectedIntent
from ..models.linear import IssueReference, LinearIssueRequest
from ..models.ticket import Ticket
from ..services.linear_client import LinearAPIError, LinearClient
from ..utils.metrics import MetricsCollector, Timer, metrics

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], LinearClient]


def build_issue_title(intent: DetectedIntent) -> str:
    return f"{intent.component or 'Component'}: {intent.intent or 'UI Request'}"


def build_issue_description(ticket: Ticket) -> str:
    """Markdown body with the verbatim quote, intent fields and the chosen mockup."""
    intent = ticket.intent
    sections = [
        "## Context",
        "",
        "Customer feedback from call:",
        "",
        f"\"{intent.source_text}\"",
        "",
        "## Details",
        "",
        f"- **Component**: {intent.component or 'N/A'}",
        f"- **Intent**: {intent.intent or 'N/A'}",
        f"- **Context**: {intent.context or 'N/A'}",
    ]

    variant = ticket.selected_variant
    if variant is not None:
        sections += [
            "",
            "## Mockup",
            "",
            f"**Variant**: {variant.name}",
            "",
            "```html",
            variant.html,
            "```",
            "",
            "```css",
            variant.css,
            "```",
        ]

    return "\n".join(sections)


class ExportGateway:
    """Creates Linear issues on behalf of the connected account."""

    def __init__(
        self,
        default_team_id: Optional[str] = None,
        client_factory: Optional[ClientFactory] = None,
        timeout: float = 30.0,
        metrics_collector: Optional[MetricsCollector] = None
    ):
        """Initialize the gateway.

        Args:
            default_team_id: Team used when a request names none
            client_factory: Builds a LinearClient for an access token
            timeout: Linear API timeout in seconds
            metrics_collector: Metrics sink (default: global collector)
        """
        self.default_team_id = default_team_id
        self.client_factory = client_factory or (
            lambda token: LinearClient(token, timeout=timeout)
        )
        self.metrics = metrics_collector or metrics

    async def export(
        self,
        ticket: Ticket,
        access_token: Optional[str],
        team_id: Optional[str] = None,
        assignee_id: Optional[str] = None,
        project_id: Optional[str] = None,
        label_ids: Optional[list[str]] = None,
        priority: Optional[int] = None
    ) -> IssueReference:
        """Export ``ticket`` with its selected variant.

        Raises:
            Unauthenticated: No access token; no network call is made
            NoTeamResolved: No team given, configured or available
            ExportFailed: Any Linear or network failure
        """
        if access_token is None:
            raise Unauthenticated()

        request = LinearIssueRequest(
            title=build_issue_title(ticket.intent),
            description=build_issue_description(ticket),
            team_id=team_id,
            assignee_id=assignee_id,
            project_id=project_id,
            label_ids=label_ids,
            priority=priority,
        )
        logger.info(f"Exporting {ticket.id} to Linear")
        return await self.create_issue(request, access_token)

    async def create_issue(
        self,
        request: LinearIssueRequest,
        access_token: Optional[str]
    ) -> IssueReference:
        """Create an issue from a prepared request."""
        if not access_token:
            raise Unauthenticated()

        client = self.client_factory(access_token)
        self.metrics.adjust_gauge("exports_in_flight", 1)

        try:
            with Timer("linear_issue_create", self.metrics):
                team_id = request.team_id or self.default_team_id
                if not team_id:
                    team_id = await self._resolve_team(client)

                issue = await client.create_issue(
                    team_id=team_id,
                    title=request.title,
                    description=request.description,
                    assignee_id=request.assignee_id,
                    project_id=request.project_id,
                    label_ids=request.label_ids,
                    priority=request.priority,
                )
                reference = IssueReference(id=issue["id"], url=issue["url"])
        except (httpx.HTTPError, LinearAPIError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Linear export failed: {e}")
            self.metrics.increment_counter("exports_failed")
            raise ExportFailed(str(e)) from e
        finally:
            self.metrics.adjust_gauge("exports_in_flight", -1)

        self.metrics.increment_counter("exports_succeeded")
        return reference

    async def _resolve_team(self, client: LinearClient) -> str:
        teams = await client.teams()
        if not teams or not teams[0].get("id"):
            raise NoTeamResolved()
        team_id = teams[0]["id"]
        logger.info(f"Resolved Linear team {team_id} ({teams[0].get('name')})")
        return team_id
