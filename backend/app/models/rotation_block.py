from datetime import datetime, time
from typing import Optional

from sqlmodel import Field, SQLModel


class RotationBlock(SQLModel, table=True):
    """A scheduled event occupying [start_time, end_time) on one level's column."""

    __tablename__ = "rotation_block"

    id: Optional[int] = Field(default=None, primary_key=True)
    hub_id: int = Field(foreign_key="hub.id", index=True)
    day_of_week: int
    level: str
    schedule_group: str
    rotation_event_id: Optional[int] = Field(default=None, foreign_key="rotation_event.id")
    event_name: str
    start_time: time
    end_time: time
    color: str
    coach_id: Optional[int] = Field(default=None, foreign_key="coach.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
