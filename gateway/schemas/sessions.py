# gateway/schemas/sessions.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from gateway.utils.dt import ensure_aware_utc


class SessionRecord(BaseModel):
    """Read-only view of a session row, as seen by the gateway."""
    id: str
    user_id: str
    expires_at: datetime
    refresh_token: Optional[str] = None
    refresh_expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    # SQLite and some drivers hand back naive datetimes; stored values are UTC
    @field_validator("expires_at", "refresh_expires_at")
    @classmethod
    def _aware_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_aware_utc(v)

    @model_validator(mode="after")
    def _refresh_pair(self) -> "SessionRecord":
        if (self.refresh_token is None) != (self.refresh_expires_at is None):
            raise ValueError("refresh_token and refresh_expires_at must be set together")
        return self


class VerifyOut(BaseModel):
    valid: bool
    userId: Optional[str] = None
    error: Optional[str] = None


class ErrorOut(BaseModel):
    error: str
