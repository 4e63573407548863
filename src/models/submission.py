"""Models for the defect submission workflow and its HTTP payload."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Base64Bytes, BaseModel, ConfigDict, Field, computed_field

from models.ticket import Ticket


class ImageAttachment(BaseModel):
    """Screenshot attached to a defect. Raw bytes are never serialized."""

    model_config = ConfigDict(frozen=True)

    filename: str = ""
    content_type: str = "application/octet-stream"
    data: bytes = Field(default=b"", exclude=True, repr=False)

    @computed_field
    @property
    def size(self) -> int:
        return len(self.data)


class DefectForm(BaseModel):
    """Immutable snapshot of the defect form at the moment of submission."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    priority: str = ""
    image: Optional[ImageAttachment] = None

    def without_image(self) -> "DefectForm":
        return self.model_copy(update={"image": None})


class SubmissionStatus(str, Enum):
    """Where a submission ended."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    UPLOAD_ERROR = "upload_error"
    WRITE_ERROR = "write_error"


class SubmissionOutcome(BaseModel):
    """
    Tagged result of one submission attempt.

    ``form`` is the form state the client should display next: blank after a
    successful write, the untouched input after any failure so the reporter
    can resubmit.
    """

    status: SubmissionStatus
    form: DefectForm
    ticket_id: Optional[str] = None
    ticket: Optional[Ticket] = None
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    index_updated: Optional[bool] = None

    @property
    def succeeded(self) -> bool:
        return self.status is SubmissionStatus.SUCCESS


class ImagePayload(BaseModel):
    """Base64 encoded image as sent by the browser."""

    filename: str = ""
    content_type: str = "application/octet-stream"
    data_base64: Base64Bytes


class SubmitDefectRequest(BaseModel):
    """Body of POST /projects/{projectId}/defects."""

    title: str = ""
    description: str = ""
    priority: str = ""
    image: Optional[ImagePayload] = None

    def to_form(self) -> DefectForm:
        image = None
        if self.image is not None:
            image = ImageAttachment(
                filename=self.image.filename,
                content_type=self.image.content_type,
                data=self.image.data_base64,
            )
        return DefectForm(
            title=self.title,
            description=self.description,
            priority=self.priority,
            image=image,
        )
