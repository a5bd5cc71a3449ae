from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.hub import Hub


class RotationEvent(SQLModel, table=True):
    """Palette entry a coach picks before drag-selecting a block on the grid."""

    __tablename__ = "rotation_event"
    __table_args__ = (SAUniqueConstraint("hub_id", "name", name="uq_hub_rotation_event"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    hub_id: int = Field(foreign_key="hub.id", index=True)
    name: str
    color: str  # "#rrggbb"
    is_default: bool = Field(default=False)
    display_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationship
    hub: "Hub" = Relationship(back_populates="rotation_events")


# Seeded into a hub's palette the first time it is read empty
DEFAULT_ROTATION_EVENTS = [
    {"name": "Warmup", "color": "#f59e0b", "display_order": 0},
    {"name": "Vault", "color": "#ef4444", "display_order": 1},
    {"name": "Bars", "color": "#3b82f6", "display_order": 2},
    {"name": "Beam", "color": "#8b5cf6", "display_order": 3},
    {"name": "Floor", "color": "#10b981", "display_order": 4},
    {"name": "Conditioning", "color": "#64748b", "display_order": 5},
    {"name": "Flexibility", "color": "#ec4899", "display_order": 6},
]
