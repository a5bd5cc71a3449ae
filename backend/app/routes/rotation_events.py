import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session, func, select

from app.database import get_session
from app.models.rotation_event import DEFAULT_ROTATION_EVENTS, RotationEvent
from app.routes.hubs import get_hub_or_404

logger = logging.getLogger(__name__)

router = APIRouter()

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _validate_color(v: Optional[str]) -> Optional[str]:
    if v is not None and not HEX_COLOR.match(v):
        raise ValueError("color must be a hex value like #10b981")
    return v.lower() if v else v


class RotationEventCreate(BaseModel):
    name: str
    color: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return _validate_color(v)


class RotationEventUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    display_order: Optional[int] = None

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return _validate_color(v)


class RotationEventResponse(BaseModel):
    id: int
    hub_id: int
    name: str
    color: str
    is_default: bool
    display_order: int

    class Config:
        from_attributes = True


def seed_default_events(session: Session, hub_id: int) -> List[RotationEvent]:
    """Insert the default palette for a hub that has no events yet."""
    events = [
        RotationEvent(
            hub_id=hub_id,
            name=e["name"],
            color=e["color"],
            is_default=True,
            display_order=e["display_order"],
        )
        for e in DEFAULT_ROTATION_EVENTS
    ]
    for event in events:
        session.add(event)
    session.commit()
    for event in events:
        session.refresh(event)
    logger.info("Seeded %d default rotation events for hub %d", len(events), hub_id)
    return events


@router.get("/hubs/{hub_id}/rotation-events", response_model=List[RotationEventResponse])
def get_rotation_events(hub_id: int, session: Session = Depends(get_session)):
    """Get the event palette, seeding the defaults the first time"""
    get_hub_or_404(session, hub_id)
    events = session.exec(
        select(RotationEvent)
        .where(RotationEvent.hub_id == hub_id)
        .order_by(RotationEvent.display_order, RotationEvent.id)
    ).all()
    if not events:
        events = seed_default_events(session, hub_id)
    return events


@router.post("/hubs/{hub_id}/rotation-events", response_model=RotationEventResponse, status_code=201)
def create_rotation_event(hub_id: int, event_data: RotationEventCreate, session: Session = Depends(get_session)):
    """Add a custom event to the end of the palette"""
    get_hub_or_404(session, hub_id)

    duplicate = session.exec(
        select(RotationEvent).where(RotationEvent.hub_id == hub_id, RotationEvent.name == event_data.name)
    ).first()
    if duplicate:
        raise HTTPException(status_code=409, detail=f"Event '{event_data.name}' already exists")

    max_order = session.exec(
        select(func.max(RotationEvent.display_order)).where(RotationEvent.hub_id == hub_id)
    ).one()
    event = RotationEvent(
        hub_id=hub_id,
        name=event_data.name,
        color=event_data.color,
        is_default=False,
        display_order=(max_order + 1) if max_order is not None else 0,
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@router.put("/rotation-events/{event_id}", response_model=RotationEventResponse)
def update_rotation_event(event_id: int, event_data: RotationEventUpdate, session: Session = Depends(get_session)):
    event = session.get(RotationEvent, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Rotation event not found")

    update_dict = event_data.model_dump(exclude_unset=True)
    new_name = (update_dict.get("name") or "").strip()
    if new_name and new_name != event.name:
        duplicate = session.exec(
            select(RotationEvent).where(RotationEvent.hub_id == event.hub_id, RotationEvent.name == new_name)
        ).first()
        if duplicate:
            raise HTTPException(status_code=409, detail=f"Event '{new_name}' already exists")
        update_dict["name"] = new_name

    for field, value in update_dict.items():
        if value is not None:
            setattr(event, field, value)

    session.add(event)
    session.commit()
    session.refresh(event)

    return event
