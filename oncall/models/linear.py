"""Linear issue models."""

from typing import Optional

from pydantic import Field

from .base import CamelModel


class LinearIssueRequest(CamelModel):
    """Body of POST /linear/issues."""

    title: str = Field(..., min_length=1, description="Issue title")
    description: str = Field(..., min_length=1, description="Markdown description")
    team_id: Optional[str] = None
    assignee_id: Optional[str] = None
    project_id: Optional[str] = None
    label_ids: Optional[list[str]] = None
    priority: Optional[int] = Field(default=None, ge=0, le=4)


class IssueReference(CamelModel):
    """Identifier and location of a created issue."""

    id: str
    url: str
