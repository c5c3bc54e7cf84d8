from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from songboard.models.schedule import Schedule
    from songboard.models.user import User
    from songboard.models.vote import Vote


class Song(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    artist: str
    requester_id: int = Field(foreign_key="user.id", index=True)
    semester: Optional[str] = Field(default=None, index=True)  # e.g. "2024-S1"
    played: bool = Field(default=False)
    # Stored as UTC; naive values read back from the database are UTC
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    requester: "User" = Relationship(back_populates="songs")
    votes: List["Vote"] = Relationship(back_populates="song")
    schedules: List["Schedule"] = Relationship(back_populates="song")
