from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import JSON
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, SQLModel


class RotationGridSettings(SQLModel, table=True):
    """Persisted column layout for one hub and day of week.

    column_order and combined_indices are stored exactly as the client sent
    them; they are only repaired on read, since the set of active levels for
    the day can change after the row was written.
    """

    __tablename__ = "rotation_grid_settings"
    __table_args__ = (SAUniqueConstraint("hub_id", "day_of_week", name="uq_grid_settings_hub_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    hub_id: int = Field(foreign_key="hub.id", index=True)
    day_of_week: int
    column_order: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    combined_indices: List[List[int]] = Field(default_factory=list, sa_column=Column(JSON))
    # "level|schedule_group" -> custom header text
    column_names: Optional[Dict[str, str]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
