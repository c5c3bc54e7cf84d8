"""System-wide settings model (single row)."""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class SystemSettings(SQLModel, table=True):
    """Singleton row holding submission limits. Null or 0 disables a limit."""

    __tablename__ = "system_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    daily_submission_limit: Optional[int] = Field(default=None)
    weekly_submission_limit: Optional[int] = Field(default=None)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
