from datetime import time
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.hub import Hub


class PracticeSchedule(SQLModel, table=True):
    """One weekly practice slot for a level/group; the source of a day's active levels."""

    __tablename__ = "practice_schedule"

    id: Optional[int] = Field(default=None, primary_key=True)
    hub_id: int = Field(foreign_key="hub.id", index=True)
    level: str
    schedule_group: str = Field(default="A")
    group_label: Optional[str] = Field(default=None)
    day_of_week: int  # 0 = Sunday ... 6 = Saturday
    start_time: time
    end_time: time
    is_external_group: bool = Field(default=False)

    # Relationship
    hub: "Hub" = Relationship(back_populates="practice_schedules")
