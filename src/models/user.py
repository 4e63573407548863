"""User profile models."""

from typing import List

from pydantic import Field

from models.ticket import DocumentModel, Person


class CurrentUser(DocumentModel):
    """Snapshot of the signed-in user as known when the request started."""

    id: str
    display_name: str = ""
    email: str = ""
    role: str = ""
    my_tickets: List[str] = Field(default_factory=list)

    def as_person(self) -> Person:
        return Person(id=self.id, display_name=self.display_name, email=self.email)
