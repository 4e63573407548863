"""Pydantic models for stored documents and API payloads."""

from models.response import ApiResponse  # noqa: F401
from models.submission import (  # noqa: F401
    DefectForm,
    ImageAttachment,
    ImagePayload,
    SubmissionOutcome,
    SubmissionStatus,
    SubmitDefectRequest,
)
from models.ticket import (  # noqa: F401
    PRIORITY_PLACEHOLDER,
    LogEntry,
    Person,
    Priority,
    ProjectRef,
    Ticket,
    TicketStatus,
)
from models.user import CurrentUser  # noqa: F401
