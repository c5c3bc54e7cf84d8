"""
Submission withdrawal.

Checks, in order: song exists, caller owns it (or holds a privileged role),
it has not been played, it is not scheduled. Then votes and song are deleted
in one transaction and the refund flag is computed from the current quota
window. Authentication and request validation happen in the route.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from songboard.models.schedule import Schedule
from songboard.models.song import Song
from songboard.models.system_settings import SystemSettings
from songboard.models.user import User, UserRole
from songboard.models.vote import Vote
from songboard.services.quota import QuotaLimits, is_quota_refundable

logger = logging.getLogger(__name__)

MSG_WITHDRAWN = "Submission withdrawn"
MSG_WITHDRAWN_QUOTA_RETURNED = "Submission withdrawn and submission quota returned"


class WithdrawalError(ValueError):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class WithdrawalBadRequest(WithdrawalError):
    status_code = 400


class SubmissionNotFound(WithdrawalError):
    status_code = 404

    def __init__(self, detail: str = "Song not found"):
        super().__init__(detail)


class WithdrawalForbidden(WithdrawalError):
    status_code = 403

    def __init__(self, detail: str = "You can only withdraw your own submissions"):
        super().__init__(detail)


@dataclass(frozen=True)
class WithdrawalResult:
    song_id: int
    quota_returned: bool

    @property
    def message(self) -> str:
        return MSG_WITHDRAWN_QUOTA_RETURNED if self.quota_returned else MSG_WITHDRAWN


def load_quota_limits(session: Session) -> QuotaLimits:
    """Read the settings row once for this request."""
    settings = session.exec(select(SystemSettings).order_by(SystemSettings.id)).first()
    return QuotaLimits.from_settings(settings)


def can_withdraw(user: User, song: Song) -> bool:
    return song.requester_id == user.id or UserRole(user.role).is_privileged


def withdraw_song(session: Session, user: User, song_id: int, now: datetime) -> WithdrawalResult:
    """
    Withdraw a song submission.

    Raises:
        SubmissionNotFound: song missing, or removed concurrently before the delete
        WithdrawalForbidden: caller is neither the requester nor privileged
        WithdrawalBadRequest: song already played or scheduled

    Database errors propagate after rollback; the caller maps them to 500.
    """
    song = session.get(Song, song_id)
    if song is None:
        raise SubmissionNotFound()

    if not can_withdraw(user, song):
        raise WithdrawalForbidden()

    if song.played:
        raise WithdrawalBadRequest("Cannot withdraw a played submission")

    schedule = session.exec(select(Schedule).where(Schedule.song_id == song_id)).first()
    if schedule is not None:
        raise WithdrawalBadRequest("Cannot withdraw a scheduled submission")

    limits = load_quota_limits(session)
    quota_returned = is_quota_refundable(song.created_at, limits, now)

    # Votes first (no cascade), song second; one commit for both
    try:
        session.execute(delete(Vote).where(Vote.song_id == song_id))
        deleted = session.execute(delete(Song).where(Song.id == song_id)).rowcount
        if deleted == 0:
            # Another request withdrew it between our read and delete
            session.rollback()
            raise SubmissionNotFound()
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise

    logger.info(
        "Song %d withdrawn by user %s (quota_returned=%s)",
        song_id,
        user.id,
        quota_returned,
    )
    return WithdrawalResult(song_id=song_id, quota_returned=quota_returned)
