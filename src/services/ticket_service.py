"""
Defect submission workflow.

One submission is a short chain of remote calls: an optional image upload to
S3, the ticket write to DynamoDB, and a merge-write that records the ticket id
on the reporter's profile. The profile write is dispatched first and runs
alongside the rest; it is never ordered against the ticket write. None of the
writes are transactional with each other, so a failure part way through can
leave an orphaned image or an index entry for a ticket that was never stored.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional
import uuid

from models.submission import DefectForm, SubmissionOutcome, SubmissionStatus
from models.ticket import LogEntry, Priority, ProjectRef, Ticket, TicketStatus
from models.user import CurrentUser
from repositories.dynamodb_repo import DynamoDbRepository
from repositories.s3_repo import S3Repository, UploadProgress, UploadState, image_key
from utils.config import AppConfig
from utils.error_handling import DocumentStoreError, ObjectStoreError
from utils.logging_config import get_logger
from utils.validators import exceeds_size_limit

logger = get_logger(__name__)

OVERSIZED_IMAGE_WARNING = "The maximum image size allowed is 3MB"
KNOWN_PRIORITIES = {p.value for p in Priority}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_ticket_id() -> str:
    return str(uuid.uuid4())


class TicketSubmissionService:
    """Encapsulates the submit-a-defect workflow."""

    def __init__(
        self,
        tickets_repo: Optional[DynamoDbRepository] = None,
        users_repo: Optional[DynamoDbRepository] = None,
        image_repo: Optional[S3Repository] = None,
        config: Optional[AppConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_ticket_id,
        progress_listener: Optional[Callable[[UploadState, float], None]] = None,
    ):
        self.config = config or AppConfig.from_environment()
        self.tickets_repo = tickets_repo or DynamoDbRepository(self.config.tickets_table)
        self.users_repo = users_repo or DynamoDbRepository(self.config.users_table)
        self.image_repo = image_repo or S3Repository(
            self.config.images_bucket, base_url=self.config.image_base_url
        )
        self.clock = clock
        self.id_factory = id_factory
        self.progress_listener = progress_listener

    def check_image(self, form: DefectForm) -> tuple[DefectForm, List[str]]:
        """Drop an oversized image from the form; the rest of the form is kept."""
        if form.image is None:
            return form, []
        if exceeds_size_limit(form.image.size, self.config.max_image_bytes):
            logger.warning(
                "Image rejected, too large",
                extra={
                    "image_bytes": form.image.size,
                    "limit_bytes": self.config.max_image_bytes,
                },
            )
            return form.without_image(), [OVERSIZED_IMAGE_WARNING]
        return form, []

    async def submit(
        self, form: DefectForm, current_user: CurrentUser, project: ProjectRef
    ) -> SubmissionOutcome:
        """
        Run one submission attempt and report how it ended.

        Title, description and priority are stored as given, including empty
        strings and the select placeholder. Nothing is retried.
        """
        if not project.project_id:
            return SubmissionOutcome(
                status=SubmissionStatus.VALIDATION_ERROR,
                form=form,
                error="project id is required",
            )

        checked_form, warnings = self.check_image(form)
        if checked_form.priority not in KNOWN_PRIORITIES:
            logger.debug("Unrecognized priority stored as-is", extra={"priority": checked_form.priority})

        ticket_id = self.id_factory()
        created_at = self.clock()

        index_task = asyncio.create_task(self._record_on_user(current_user, ticket_id))

        # The index write must settle even if a step below raises unexpectedly;
        # asyncio.run would otherwise cancel it on the way out.
        try:
            outcome = await self._store_ticket(
                form, checked_form, warnings, ticket_id, created_at, current_user, project
            )
        finally:
            index_updated = await index_task
        return outcome.model_copy(update={"index_updated": index_updated})

    async def _store_ticket(
        self,
        form: DefectForm,
        checked_form: DefectForm,
        warnings: List[str],
        ticket_id: str,
        created_at: datetime,
        current_user: CurrentUser,
        project: ProjectRef,
    ) -> SubmissionOutcome:
        """Upload the image if any, then write the ticket document."""
        log_extra = {"ticket_id": ticket_id, "user_id": current_user.id}

        image_url = ""
        if checked_form.image is not None:
            try:
                image_url = await asyncio.to_thread(
                    self._upload_image, ticket_id, checked_form.image.data
                )
            except ObjectStoreError as exc:
                logger.error("Couldn't upload image", extra={**log_extra, "error": str(exc)})
                return SubmissionOutcome(
                    status=SubmissionStatus.UPLOAD_ERROR,
                    form=form,
                    ticket_id=ticket_id,
                    warnings=warnings,
                    error=str(exc),
                )

        ticket = self.build_ticket(
            ticket_id, created_at, checked_form, current_user, project, image_url
        )
        try:
            await asyncio.to_thread(self.tickets_repo.put, ticket.to_document())
        except DocumentStoreError as exc:
            logger.error("Error creating ticket", extra={**log_extra, "error": str(exc)})
            return SubmissionOutcome(
                status=SubmissionStatus.WRITE_ERROR,
                form=form,
                ticket_id=ticket_id,
                warnings=warnings,
                error=str(exc),
            )

        logger.info("Ticket submitted", extra={**log_extra, "has_image": bool(image_url)})
        return SubmissionOutcome(
            status=SubmissionStatus.SUCCESS,
            form=DefectForm(),
            ticket_id=ticket_id,
            ticket=ticket,
            warnings=warnings,
        )

    def build_ticket(
        self,
        ticket_id: str,
        created_at: datetime,
        form: DefectForm,
        current_user: CurrentUser,
        project: ProjectRef,
        image_url: str,
    ) -> Ticket:
        """Assemble the initial ticket document with its single "created" log entry."""
        return Ticket(
            id=ticket_id,
            owner=current_user.as_person(),
            project=project,
            title=form.title,
            description=form.description,
            image_url=image_url,
            priority=form.priority,
            created_at=created_at,
            status=TicketStatus.UNASSIGNED.value,
            logs=[
                LogEntry(
                    person_name=current_user.display_name,
                    person_role=current_user.role,
                    timestamp=created_at,
                    status_changed_to=TicketStatus.CREATED.value,
                )
            ],
        )

    def _upload_image(self, ticket_id: str, data: bytes) -> str:
        key = image_key(ticket_id)
        progress = UploadProgress(len(data), key, listener=self.progress_listener)
        self.image_repo.upload_image(key, data, progress=progress)
        url = self.image_repo.get_download_url(key)
        logger.info("Image available", extra={"ticket_id": ticket_id, "image_url": url})
        return url

    async def _record_on_user(self, current_user: CurrentUser, ticket_id: str) -> bool:
        """
        Add the ticket id to the reporter's myTickets.

        By default the whole list is rewritten from the caller's snapshot, so
        two sessions submitting at once can drop one id. With
        ``atomic_ticket_index`` the append happens in DynamoDB instead.
        """
        try:
            if self.config.atomic_ticket_index:
                await asyncio.to_thread(
                    self.users_repo.append_to_list, current_user.id, "myTickets", [ticket_id]
                )
            else:
                await asyncio.to_thread(
                    self.users_repo.merge,
                    current_user.id,
                    {"myTickets": [*current_user.my_tickets, ticket_id]},
                )
        except DocumentStoreError as exc:
            logger.error(
                "Couldn't update user ticket index",
                extra={"ticket_id": ticket_id, "user_id": current_user.id, "error": str(exc)},
            )
            return False
        return True
