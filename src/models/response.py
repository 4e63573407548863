"""Envelope for read endpoints."""

from typing import Any, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Generic API response used by GET /me and GET /projects/{id}."""

    message: str
    data: Optional[Any] = None
    correlation_id: Optional[str] = None
