import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from songboard.auth import get_current_user
from songboard.database import get_session
from songboard.models.song import Song
from songboard.models.user import User
from songboard.services.cache_service import CacheService, get_cache_service
from songboard.services.quota import local_now
from songboard.services.withdrawal import SubmissionNotFound, WithdrawalError, withdraw_song

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_SONG_ID = 2**63 - 1  # BIGINT range


class SongCountResponse(BaseModel):
    count: int


class WithdrawRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Kept as text so an unparseable id reaches the handler instead of failing validation
    song_id: Optional[str] = Field(default=None, alias="songId")

    @field_validator("song_id", mode="before")
    @classmethod
    def normalize_song_id(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        if not v:  # None, 0, false
            return None
        return str(v)

    @classmethod
    def from_body(cls, body: Any) -> "WithdrawRequest":
        """Anything other than a JSON object carries no songId."""
        if not isinstance(body, dict):
            return cls()
        return cls.model_validate(body)

    def parsed_song_id(self) -> int:
        """Integer primary key, or SubmissionNotFound when the id cannot name a row."""
        try:
            value = int(self.song_id)
        except (TypeError, ValueError):
            raise SubmissionNotFound()
        if not 0 < value <= MAX_SONG_ID:
            raise SubmissionNotFound()
        return value


class WithdrawResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    song_id: int = Field(alias="songId")
    quota_returned: bool = Field(alias="quotaReturned")


@router.get("/songs/count", response_model=SongCountResponse)
def count_songs(
    semester: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
):
    """Count song submissions, optionally for one semester"""
    statement = select(func.count(Song.id))
    if semester:
        statement = statement.where(Song.semester == semester)

    try:
        count = session.exec(statement).one()
    except SQLAlchemyError:
        logger.exception("Error fetching song count (semester=%s)", semester)
        raise HTTPException(status_code=500, detail="Failed to fetch song count")

    return SongCountResponse(count=count)


@router.post("/songs/withdraw", response_model=WithdrawResponse)
def withdraw_submission(
    body: Any = Body(default=None),
    user: Optional[User] = Depends(get_current_user),
    session: Session = Depends(get_session),
    cache: CacheService = Depends(get_cache_service),
    now: datetime = Depends(local_now),
):
    """Withdraw the caller's own (or, for admins, any) unplayed, unscheduled submission"""
    if user is None:
        raise HTTPException(status_code=401, detail="Login required to withdraw a submission")

    payload = WithdrawRequest.from_body(body)
    if payload.song_id is None:
        raise HTTPException(status_code=400, detail="songId is required")

    try:
        result = withdraw_song(session, user, payload.parsed_song_id(), now)
    except WithdrawalError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except SQLAlchemyError:
        logger.exception("Failed to withdraw song %s", payload.song_id)
        raise HTTPException(status_code=500, detail="Failed to withdraw submission")

    # Deletion is committed; a cache failure is logged by the service and not surfaced
    cache.clear_songs_cache()

    return WithdrawResponse(
        message=result.message,
        song_id=result.song_id,
        quota_returned=result.quota_returned,
    )
