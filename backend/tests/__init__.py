# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from songboard.models.schedule import Schedule  # noqa: F401
from songboard.models.song import Song  # noqa: F401
from songboard.models.system_settings import SystemSettings  # noqa: F401
from songboard.models.user import User  # noqa: F401
from songboard.models.vote import Vote  # noqa: F401
