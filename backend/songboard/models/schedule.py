from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from songboard.models.song import Song


class Schedule(SQLModel, table=True):
    """A song assigned to a play slot. Scheduled songs cannot be withdrawn."""

    id: Optional[int] = Field(default=None, primary_key=True)
    song_id: int = Field(foreign_key="song.id", index=True)
    play_date: date
    sequence: int = Field(default=1)  # 1-based position within the day

    # Relationships
    song: "Song" = Relationship(back_populates="schedules")
