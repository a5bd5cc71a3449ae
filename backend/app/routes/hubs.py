from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session, select

from app.database import get_session
from app.models.coach import Coach
from app.models.hub import Hub

router = APIRouter()


class HubCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()


class HubResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class CoachCreate(BaseModel):
    full_name: str

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if not v or not v.strip():
            raise ValueError("full_name must not be empty")
        return v.strip()


class CoachResponse(BaseModel):
    id: int
    hub_id: int
    full_name: str

    class Config:
        from_attributes = True


def get_hub_or_404(session: Session, hub_id: int) -> Hub:
    hub = session.get(Hub, hub_id)
    if not hub:
        raise HTTPException(status_code=404, detail="Hub not found")
    return hub


@router.post("/hubs", response_model=HubResponse, status_code=201)
def create_hub(hub_data: HubCreate, session: Session = Depends(get_session)):
    """Create a hub (club location)"""
    hub = Hub(name=hub_data.name)
    session.add(hub)
    session.commit()
    session.refresh(hub)
    return hub


@router.get("/hubs/{hub_id}", response_model=HubResponse)
def get_hub(hub_id: int, session: Session = Depends(get_session)):
    return get_hub_or_404(session, hub_id)


@router.get("/hubs/{hub_id}/coaches", response_model=List[CoachResponse])
def get_coaches(hub_id: int, session: Session = Depends(get_session)):
    """Coaches who can be assigned to rotation blocks, sorted by name"""
    get_hub_or_404(session, hub_id)
    coaches = session.exec(select(Coach).where(Coach.hub_id == hub_id)).all()
    return sorted(coaches, key=lambda c: c.full_name.lower())


@router.post("/hubs/{hub_id}/coaches", response_model=CoachResponse, status_code=201)
def create_coach(hub_id: int, coach_data: CoachCreate, session: Session = Depends(get_session)):
    get_hub_or_404(session, hub_id)
    coach = Coach(hub_id=hub_id, full_name=coach_data.full_name)
    session.add(coach)
    session.commit()
    session.refresh(coach)
    return coach
