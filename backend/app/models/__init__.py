from app.models.coach import Coach
from app.models.hub import Hub
from app.models.practice_schedule import PracticeSchedule
from app.models.rotation_block import RotationBlock
from app.models.rotation_event import DEFAULT_ROTATION_EVENTS, RotationEvent
from app.models.rotation_grid_settings import RotationGridSettings

__all__ = [
    "Hub",
    "Coach",
    "PracticeSchedule",
    "RotationEvent",
    "DEFAULT_ROTATION_EVENTS",
    "RotationBlock",
    "RotationGridSettings",
]
