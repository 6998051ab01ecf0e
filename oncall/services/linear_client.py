"""Minimal Linear GraphQL client.

Only the two operations the export step needs: listing teams and
creating an issue.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

LINEAR_GRAPHQL_URL = "https://api.linear.app/graphql"

TEAMS_QUERY = """
query Teams {
  teams {
    nodes {
      id
      name
    }
  }
}
"""

ISSUE_CREATE_MUTATION = """
mutation IssueCreate($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue {
      id
      identifier
      url
    }
  }
}
"""


class LinearAPIError(Exception):
    """Linear returned an error or an unexpected payload."""


class LinearClient:
    """Async client authenticated with a user's OAuth access token."""

    def __init__(
        self,
        access_token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport

    async def _execute(self, query: str, variables: Optional[dict] = None) -> dict[str, Any]:
        """Run a GraphQL operation and return its ``data`` member."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                LINEAR_GRAPHQL_URL,
                json={"query": query, "variables": variables or {}},
                headers={"Authorization": f"Bearer {self.access_token}"},
            )

        if not response.is_success:
            raise LinearAPIError(f"Linear API error: {response.status_code} {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise LinearAPIError(f"Linear API returned invalid JSON: {response.text}") from e
        if not isinstance(payload, dict):
            raise LinearAPIError("Linear API returned an unexpected payload")

        if payload.get("errors"):
            messages = "; ".join(err.get("message", "unknown error") for err in payload["errors"])
            raise LinearAPIError(f"Linear API error: {messages}")

        return payload.get("data") or {}

    async def teams(self) -> list[dict[str, str]]:
        """Return the teams visible to the token, in API order."""
        data = await self._execute(TEAMS_QUERY)
        return data.get("teams", {}).get("nodes", [])

    async def create_issue(
        self,
        team_id: str,
        title: str,
        description: str,
        assignee_id: Optional[str] = None,
        project_id: Optional[str] = None,
        label_ids: Optional[list[str]] = None,
        priority: Optional[int] = None
    ) -> dict[str, str]:
        """Create an issue and return its ``id``, ``identifier`` and ``url``."""
        issue_input: dict[str, Any] = {
            "teamId": team_id,
            "title": title,
            "description": description,
        }
        if assignee_id:
            issue_input["assigneeId"] = assignee_id
        if project_id:
            issue_input["projectId"] = project_id
        if label_ids:
            issue_input["labelIds"] = label_ids
        if priority is not None:
            issue_input["priority"] = priority

        data = await self._execute(ISSUE_CREATE_MUTATION, {"input": issue_input})
        result = data.get("issueCreate") or {}

        if not result.get("success") or not result.get("issue"):
            raise LinearAPIError("Linear issueCreate failed")

        issue = result["issue"]
        logger.info(f"Created Linear issue {issue.get('identifier', issue['id'])}")
        return issue
