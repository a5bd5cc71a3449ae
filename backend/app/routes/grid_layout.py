from datetime import time
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, model_validator
from sqlmodel import Session

from app.database import get_session
from app.routes.hubs import get_hub_or_404
from app.routes.practice_schedules import DAYS_OF_WEEK, day_of_week_path
from app.routes.rotation_blocks import RotationBlockResponse, coach_names_for_hub, to_block_response
from app.services.column_layout import ColumnLayout, sanitize
from app.services.data_store import DataStoreError, RecordNotFound, SqlDataStore
from app.services.layout_actions import Combine, Reorder, Split, reduce_layout
from app.services.rotation_grid_session import load_day_state
from app.services.rotation_grid_view import block_placement, build_grid_view

router = APIRouter()


class GridLayoutUpdate(BaseModel):
    column_order: List[int]
    combined_indices: List[List[int]] = []
    column_names: Optional[Dict[str, str]] = None


class GridLayoutAction(BaseModel):
    """combine/split take original indices (left, right); reorder takes display indices (dragged, target)."""

    action: Literal["combine", "split", "reorder"]
    left: Optional[int] = None
    right: Optional[int] = None
    dragged: Optional[int] = None
    target: Optional[int] = None

    @model_validator(mode="after")
    def validate_operands(self):
        if self.action == "reorder":
            if self.dragged is None or self.target is None:
                raise ValueError("reorder requires dragged and target")
        elif self.left is None or self.right is None:
            raise ValueError(f"{self.action} requires left and right")
        return self

    def to_action(self):
        if self.action == "combine":
            return Combine(self.left, self.right)
        if self.action == "split":
            return Split(self.left, self.right)
        return Reorder(self.dragged, self.target)


class GridLayoutResponse(BaseModel):
    hub_id: int
    day_of_week: int
    level_count: int
    column_order: List[int]
    combined_indices: List[List[int]]
    column_names: Dict[str, str]


class GridRowResponse(BaseModel):
    row: int
    time: time
    label: str
    is_hour: bool


class GridBlockResponse(RotationBlockResponse):
    top_row: int
    row_span: int


class GridLevelResponse(BaseModel):
    level: str
    schedule_group: str
    start_time: time
    end_time: time
    is_external_group: bool


class GridColumnResponse(BaseModel):
    group_index: int
    key: str
    label: str
    levels: List[GridLevelResponse]
    original_indices: List[int]
    display_indices: List[int]
    start_time: time
    end_time: time
    is_external: bool
    active_rows: List[bool]
    blocks: List[GridBlockResponse]


class GridBoundaryResponse(BaseModel):
    group_index: int
    left_original: int
    right_original: int
    is_combined: bool


class RotationGridResponse(BaseModel):
    hub_id: int
    day_of_week: int
    day_name: str
    range_start: Optional[time]
    range_end: Optional[time]
    layout: GridLayoutResponse
    rows: List[GridRowResponse]
    columns: List[GridColumnResponse]
    boundaries: List[GridBoundaryResponse]


def _layout_response(
    hub_id: int, day_of_week: int, level_count: int, layout: ColumnLayout, column_names: Dict[str, str]
) -> GridLayoutResponse:
    return GridLayoutResponse(
        hub_id=hub_id,
        day_of_week=day_of_week,
        level_count=level_count,
        column_order=layout.order_list(),
        combined_indices=layout.groups_list(),
        column_names=column_names,
    )


def _save_layout_or_error(
    store: SqlDataStore,
    hub_id: int,
    day_of_week: int,
    layout: ColumnLayout,
    column_names: Optional[Dict[str, str]] = None,
):
    try:
        return store.save_grid_layout(
            hub_id, day_of_week, layout.order_list(), layout.groups_list(), column_names
        )
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DataStoreError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/hubs/{hub_id}/days/{day_of_week}/grid-layout", response_model=GridLayoutResponse)
def get_grid_layout(
    hub_id: int, day_of_week: int = Depends(day_of_week_path), session: Session = Depends(get_session)
):
    """Get the column layout for a day, repaired against the current active levels"""
    get_hub_or_404(session, hub_id)
    state = load_day_state(SqlDataStore(session), hub_id, day_of_week)
    return _layout_response(hub_id, day_of_week, len(state.levels), state.layout, state.column_names)


@router.put("/hubs/{hub_id}/days/{day_of_week}/grid-layout", response_model=GridLayoutResponse)
def save_grid_layout(
    hub_id: int,
    layout_data: GridLayoutUpdate,
    day_of_week: int = Depends(day_of_week_path),
    session: Session = Depends(get_session),
):
    """
    Upsert the column layout for a day.

    The layout is sanitized before it is stored: an order that is not a
    permutation of the day's levels becomes the identity order, and combined
    groups lose out-of-range members.
    """
    get_hub_or_404(session, hub_id)
    store = SqlDataStore(session)
    count = len(store.list_active_levels(hub_id, day_of_week))
    layout = sanitize(ColumnLayout.from_lists(layout_data.column_order, layout_data.combined_indices), count)

    settings = _save_layout_or_error(store, hub_id, day_of_week, layout, layout_data.column_names)
    return _layout_response(hub_id, day_of_week, count, layout, dict(settings.column_names or {}))


@router.post("/hubs/{hub_id}/days/{day_of_week}/grid-layout/actions", response_model=GridLayoutResponse)
def apply_grid_layout_action(
    hub_id: int,
    action_data: GridLayoutAction,
    day_of_week: int = Depends(day_of_week_path),
    session: Session = Depends(get_session),
):
    """Apply one combine / split / reorder to the stored layout and save the result"""
    get_hub_or_404(session, hub_id)
    store = SqlDataStore(session)
    state = load_day_state(store, hub_id, day_of_week)
    count = len(state.levels)

    layout = reduce_layout(state.layout, action_data.to_action(), count)
    _save_layout_or_error(store, hub_id, day_of_week, layout)
    return _layout_response(hub_id, day_of_week, count, layout, state.column_names)


@router.get("/hubs/{hub_id}/days/{day_of_week}/rotation-grid", response_model=RotationGridResponse)
def get_rotation_grid(
    hub_id: int, day_of_week: int = Depends(day_of_week_path), session: Session = Depends(get_session)
):
    """
    Get the full rotation grid for a day in one call.

    Columns are display groups (combined groups collapsed into one column),
    each with its active rows and the blocks of its primary level placed on
    the 5-minute row axis. Read-only; returns empty rows/columns when nothing
    is scheduled that day.
    """
    get_hub_or_404(session, hub_id)
    store = SqlDataStore(session)
    state = load_day_state(store, hub_id, day_of_week)
    blocks = store.list_blocks(hub_id, day_of_week)
    view = build_grid_view(state.levels, state.layout, blocks, state.column_names)
    coach_names = coach_names_for_hub(session, hub_id)

    columns = []
    for group_index, column in enumerate(view.columns):
        group = column.group
        grid_blocks = []
        for block in column.blocks:
            top_row, row_span = block_placement(block, view.range_start)
            grid_blocks.append(
                GridBlockResponse(
                    **to_block_response(block, coach_names).model_dump(), top_row=top_row, row_span=row_span
                )
            )
        columns.append(
            GridColumnResponse(
                group_index=group_index,
                key=group.key,
                label=group.label,
                levels=[
                    GridLevelResponse(
                        level=lvl.level,
                        schedule_group=lvl.schedule_group,
                        start_time=lvl.start_time,
                        end_time=lvl.end_time,
                        is_external_group=lvl.is_external_group,
                    )
                    for lvl in group.levels
                ],
                original_indices=group.original_indices,
                display_indices=group.display_indices,
                start_time=group.start_time,
                end_time=group.end_time,
                is_external=group.is_external,
                active_rows=column.active_rows,
                blocks=grid_blocks,
            )
        )

    return RotationGridResponse(
        hub_id=hub_id,
        day_of_week=day_of_week,
        day_name=DAYS_OF_WEEK[day_of_week],
        range_start=view.range_start,
        range_end=view.range_end,
        layout=_layout_response(hub_id, day_of_week, len(state.levels), state.layout, state.column_names),
        rows=[GridRowResponse(row=r.row, time=r.time, label=r.label.label, is_hour=r.label.is_hour) for r in view.rows],
        columns=columns,
        boundaries=[
            GridBoundaryResponse(
                group_index=b.group_index,
                left_original=b.left_original,
                right_original=b.right_original,
                is_combined=b.is_combined,
            )
            for b in view.boundaries
        ],
    )
