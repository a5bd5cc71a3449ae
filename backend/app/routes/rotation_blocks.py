from datetime import datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, model_validator
from sqlmodel import Session, select

from app.database import get_session
from app.models.coach import Coach
from app.models.rotation_block import RotationBlock
from app.models.rotation_event import RotationEvent
from app.routes.hubs import get_hub_or_404
from app.routes.practice_schedules import day_of_week_path
from app.services.block_selector import BlockIntervalSelector
from app.services.column_layout import LevelKey
from app.services.data_store import DataStoreError, RecordNotFound, SqlDataStore
from app.services.rotation_grid_session import load_day_state
from app.services.rotation_grid_view import build_display_groups
from app.utils.time_axis import format_clock_time, row_count, time_range

router = APIRouter()


class RotationBlockCreate(BaseModel):
    level: str
    schedule_group: str = "A"
    rotation_event_id: int
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def validate_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be greater than start_time")
        return self


class RotationBlockSelect(BaseModel):
    """A finished drag on the grid: column by display position, rows inclusive."""

    group_index: int
    start_row: int
    end_row: int
    rotation_event_id: int


class CoachAssignment(BaseModel):
    coach_id: Optional[int] = None


class RotationBlockResponse(BaseModel):
    id: int
    hub_id: int
    day_of_week: int
    level: str
    schedule_group: str
    rotation_event_id: Optional[int]
    event_name: str
    start_time: time
    end_time: time
    time_display: str
    color: str
    coach_id: Optional[int]
    coach_name: Optional[str] = None
    updated_at: datetime


def to_block_response(block: RotationBlock, coach_names: dict) -> RotationBlockResponse:
    return RotationBlockResponse(
        id=block.id,
        hub_id=block.hub_id,
        day_of_week=block.day_of_week,
        level=block.level,
        schedule_group=block.schedule_group,
        rotation_event_id=block.rotation_event_id,
        event_name=block.event_name,
        start_time=block.start_time,
        end_time=block.end_time,
        time_display=f"{format_clock_time(block.start_time)} - {format_clock_time(block.end_time)}",
        color=block.color,
        coach_id=block.coach_id,
        coach_name=coach_names.get(block.coach_id),
        updated_at=block.updated_at,
    )


def coach_names_for_hub(session: Session, hub_id: int) -> dict:
    coaches = session.exec(select(Coach).where(Coach.hub_id == hub_id)).all()
    return {c.id: c.full_name for c in coaches}


def get_event_or_404(session: Session, hub_id: int, event_id: int) -> RotationEvent:
    event = session.get(RotationEvent, event_id)
    if not event or event.hub_id != hub_id:
        raise HTTPException(status_code=404, detail="Rotation event not found")
    return event


def _create_block_or_error(store: SqlDataStore, session: Session, hub_id: int, day_of_week: int, **kwargs):
    try:
        block_id = store.create_block(hub_id, day_of_week, **kwargs)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataStoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_block_response(store.get_block(block_id), coach_names_for_hub(session, hub_id))


@router.get("/hubs/{hub_id}/days/{day_of_week}/rotation-blocks", response_model=List[RotationBlockResponse])
def get_rotation_blocks(
    hub_id: int, day_of_week: int = Depends(day_of_week_path), session: Session = Depends(get_session)
):
    """Get all rotation blocks for a day of week, ordered by start time"""
    get_hub_or_404(session, hub_id)
    blocks = SqlDataStore(session).list_blocks(hub_id, day_of_week)
    coach_names = coach_names_for_hub(session, hub_id)
    return [to_block_response(b, coach_names) for b in blocks]


@router.post(
    "/hubs/{hub_id}/days/{day_of_week}/rotation-blocks", response_model=RotationBlockResponse, status_code=201
)
def create_rotation_block(
    hub_id: int,
    block_data: RotationBlockCreate,
    day_of_week: int = Depends(day_of_week_path),
    session: Session = Depends(get_session),
):
    """Create a block from explicit times"""
    get_hub_or_404(session, hub_id)
    event = get_event_or_404(session, hub_id, block_data.rotation_event_id)
    return _create_block_or_error(
        SqlDataStore(session),
        session,
        hub_id,
        day_of_week,
        level_key=LevelKey(block_data.level, block_data.schedule_group),
        rotation_event_id=event.id,
        event_name=event.name,
        start_time=block_data.start_time,
        end_time=block_data.end_time,
        color=event.color,
    )


@router.post(
    "/hubs/{hub_id}/days/{day_of_week}/rotation-blocks/select",
    response_model=RotationBlockResponse,
    status_code=201,
)
def create_rotation_block_from_selection(
    hub_id: int,
    selection: RotationBlockSelect,
    day_of_week: int = Depends(day_of_week_path),
    session: Session = Depends(get_session),
):
    """
    Create a block from a drag selection on the grid.

    The drag is replayed through the selector row by row, as the pointer moved:
    it must start on an active cell, and rows outside the column's practice
    window are ignored, so the block keeps the last active extent reached on
    the way to end_row. Combined columns write to their primary level.
    """
    get_hub_or_404(session, hub_id)
    event = get_event_or_404(session, hub_id, selection.rotation_event_id)

    store = SqlDataStore(session)
    state = load_day_state(store, hub_id, day_of_week)
    if not state.levels:
        raise HTTPException(status_code=422, detail="No practice scheduled on this day")

    groups = build_display_groups(state.levels, state.layout, state.column_names)
    if not 0 <= selection.group_index < len(groups):
        raise HTTPException(status_code=422, detail=f"group_index {selection.group_index} is out of range")
    group = groups[selection.group_index]

    range_start, range_end = time_range(state.levels)
    selector = BlockIntervalSelector(range_start)
    if not selector.press(group, selection.start_row, event):
        raise HTTPException(status_code=422, detail="Selection must start on an active cell")
    # rows past the grid are never active, so the walk stops at its edges
    end_row = max(0, min(selection.end_row, row_count(range_start, range_end) - 1))
    step = 1 if end_row >= selection.start_row else -1
    for row in range(selection.start_row + step, end_row + step, step):
        selector.enter(group, row)
    request = selector.release()

    return _create_block_or_error(
        store,
        session,
        hub_id,
        day_of_week,
        level_key=LevelKey(request.level, request.schedule_group),
        rotation_event_id=request.rotation_event_id,
        event_name=request.event_name,
        start_time=request.start_time,
        end_time=request.end_time,
        color=request.color,
    )


@router.delete("/rotation-blocks/{block_id}")
def delete_rotation_block(block_id: int, session: Session = Depends(get_session)):
    try:
        SqlDataStore(session).delete_block(block_id)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Rotation block not found")

    return {"message": "Rotation block deleted successfully"}


@router.put("/rotation-blocks/{block_id}/coach", response_model=RotationBlockResponse)
def assign_block_coach(block_id: int, assignment: CoachAssignment, session: Session = Depends(get_session)):
    """Assign a coach to a block, or clear it with coach_id=null"""
    store = SqlDataStore(session)
    try:
        store.assign_coach(block_id, assignment.coach_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    block = store.get_block(block_id)
    return to_block_response(block, coach_names_for_hub(session, block.hub_id))
