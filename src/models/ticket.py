"""Ticket document models as stored in the tickets table."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    """Priority options offered by the defect form."""

    SEVERE = "Severe"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    FEATURE_REQUEST = "Feature request"


# What the form's select shows before the reporter picks a level.
PRIORITY_PLACEHOLDER = "--Select--"


class TicketStatus(str, Enum):
    """Workflow states a ticket can be moved through."""

    UNASSIGNED = "unassigned"
    CREATED = "created"


class DocumentModel(BaseModel):
    """Base for stored documents: snake_case in Python, camelCase in DynamoDB."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize to the JSON-safe camelCase shape written to the store."""
        return self.model_dump(mode="json", by_alias=True)


class Person(DocumentModel):
    """Embedded reference to a user (owner or assignee)."""

    id: str = ""
    display_name: str = ""
    email: str = ""


class ProjectRef(DocumentModel):
    """Project a ticket was raised against."""

    project_id: str
    project_name: str = ""


class LogEntry(DocumentModel):
    """One status change in the ticket history."""

    person_name: str
    person_role: str
    timestamp: datetime
    status_changed_to: str


class Ticket(DocumentModel):
    """A defect as persisted by the submission workflow."""

    id: str
    owner: Person
    project: ProjectRef
    title: str
    description: str
    image_url: str = ""
    priority: str = ""
    created_at: datetime
    status: str = TicketStatus.UNASSIGNED.value
    assignee: Person = Field(default_factory=Person)
    logs: List[LogEntry] = Field(min_length=1)
    comments: List[dict] = Field(default_factory=list)
