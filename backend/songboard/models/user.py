from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from songboard.models.song import Song


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

    @property
    def is_privileged(self) -> bool:
        """Privileged roles may act on submissions they do not own."""
        return self in (UserRole.ADMIN, UserRole.SUPER_ADMIN)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    role: UserRole = Field(default=UserRole.USER)
    auth_token: Optional[str] = Field(default=None, unique=True, index=True)  # Bearer token
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    songs: List["Song"] = Relationship(back_populates="requester")
