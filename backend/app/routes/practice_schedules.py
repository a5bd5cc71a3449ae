from datetime import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, field_validator, model_validator
from sqlmodel import Session, select

from app.database import get_session
from app.models.practice_schedule import PracticeSchedule
from app.routes.hubs import get_hub_or_404
from app.services.data_store import SqlDataStore

router = APIRouter()

DAYS_OF_WEEK = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def day_of_week_path(day_of_week: int = Path(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")) -> int:
    return day_of_week


class PracticeScheduleCreate(BaseModel):
    level: str
    schedule_group: str = "A"
    group_label: Optional[str] = None
    days_of_week: List[int]
    start_time: time
    end_time: time
    is_external_group: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        if not v or not v.strip():
            raise ValueError("level must not be empty")
        return v.strip()

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v):
        if not v:
            raise ValueError("days_of_week must contain at least one day")
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("days_of_week entries must be between 0 and 6")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be greater than start_time")
        return self


class PracticeScheduleResponse(BaseModel):
    id: int
    hub_id: int
    level: str
    schedule_group: str
    group_label: Optional[str]
    day_of_week: int
    start_time: time
    end_time: time
    is_external_group: bool

    class Config:
        from_attributes = True


class ActiveLevelResponse(BaseModel):
    level: str
    schedule_group: str
    start_time: time
    end_time: time
    is_external_group: bool


@router.get("/hubs/{hub_id}/practice-schedules", response_model=List[PracticeScheduleResponse])
def get_practice_schedules(hub_id: int, session: Session = Depends(get_session)):
    """Get the weekly practice schedule for a hub"""
    get_hub_or_404(session, hub_id)
    return session.exec(
        select(PracticeSchedule)
        .where(PracticeSchedule.hub_id == hub_id)
        .order_by(PracticeSchedule.day_of_week, PracticeSchedule.start_time, PracticeSchedule.id)
    ).all()


@router.post("/hubs/{hub_id}/practice-schedules", response_model=List[PracticeScheduleResponse], status_code=201)
def create_practice_schedules(
    hub_id: int, schedule_data: PracticeScheduleCreate, session: Session = Depends(get_session)
):
    """Create one practice schedule row per selected day"""
    get_hub_or_404(session, hub_id)

    created = []
    for day in schedule_data.days_of_week:
        schedule = PracticeSchedule(
            hub_id=hub_id,
            level=schedule_data.level,
            schedule_group=schedule_data.schedule_group,
            group_label=(schedule_data.group_label or "").strip() or None,
            day_of_week=day,
            start_time=schedule_data.start_time,
            end_time=schedule_data.end_time,
            is_external_group=schedule_data.is_external_group,
        )
        session.add(schedule)
        created.append(schedule)

    session.commit()
    for schedule in created:
        session.refresh(schedule)
    return created


@router.delete("/practice-schedules/{schedule_id}")
def delete_practice_schedule(schedule_id: int, session: Session = Depends(get_session)):
    schedule = session.get(PracticeSchedule, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Practice schedule not found")

    session.delete(schedule)
    session.commit()

    return {"message": "Practice schedule deleted successfully"}


@router.get("/hubs/{hub_id}/days/{day_of_week}/active-levels", response_model=List[ActiveLevelResponse])
def get_active_levels(
    hub_id: int, day_of_week: int = Depends(day_of_week_path), session: Session = Depends(get_session)
):
    """Levels with practice on the given day, in original column order"""
    get_hub_or_404(session, hub_id)
    levels = SqlDataStore(session).list_active_levels(hub_id, day_of_week)
    return [
        ActiveLevelResponse(
            level=lvl.level,
            schedule_group=lvl.schedule_group,
            start_time=lvl.start_time,
            end_time=lvl.end_time,
            is_external_group=lvl.is_external_group,
        )
        for lvl in levels
    ]
