from songboard.models.schedule import Schedule
from songboard.models.song import Song
from songboard.models.system_settings import SystemSettings
from songboard.models.user import User, UserRole
from songboard.models.vote import Vote

__all__ = [
    "User",
    "UserRole",
    "Song",
    "Schedule",
    "Vote",
    "SystemSettings",
]
