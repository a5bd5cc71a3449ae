from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.hub import Hub


class Coach(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    hub_id: int = Field(foreign_key="hub.id", index=True)
    full_name: str

    # Relationship
    hub: "Hub" = Relationship(back_populates="coaches")
