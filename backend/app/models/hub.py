from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.coach import Coach
    from app.models.practice_schedule import PracticeSchedule
    from app.models.rotation_event import RotationEvent


class Hub(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    practice_schedules: List["PracticeSchedule"] = Relationship(back_populates="hub")
    rotation_events: List["RotationEvent"] = Relationship(back_populates="hub")
    coaches: List["Coach"] = Relationship(back_populates="hub")
