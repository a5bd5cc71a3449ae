# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from app.models.coach import Coach  # noqa: F401
from app.models.hub import Hub  # noqa: F401
from app.models.practice_schedule import PracticeSchedule  # noqa: F401
from app.models.rotation_block import RotationBlock  # noqa: F401
from app.models.rotation_event import RotationEvent  # noqa: F401
from app.models.rotation_grid_settings import RotationGridSettings  # noqa: F401
