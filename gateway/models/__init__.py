# gateway/models/__init__.py
# ============================================================================
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from gateway.database import Base


class Session(Base):
    """Login session row.

    The table is owned by the auth frontend (login / refresh / logout write it);
    the gateway only reads it, looking rows up by `token`. Column names are the
    frontend's camelCase ones, hence the explicit names below.
    """
    __tablename__ = "session"

    id:      Mapped[str] = mapped_column(String, primary_key=True)
    token:   Mapped[str] = mapped_column(String, unique=True, index=True)
    user_id: Mapped[str] = mapped_column("userId", String, nullable=False)

    expires_at: Mapped[datetime] = mapped_column("expiresAt", DateTime(timezone=True), nullable=False)

    # both set or both NULL
    refresh_token:      Mapped[str | None]      = mapped_column("refreshToken", String, nullable=True)
    refresh_expires_at: Mapped[datetime | None] = mapped_column("refreshExpiresAt", DateTime(timezone=True), nullable=True)
