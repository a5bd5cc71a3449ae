"""
Persistence collaborator for the rotation grid.

The grid core only talks to the DataStore protocol. SqlDataStore is the
SQLModel-backed implementation used by the API; tests and other bindings can
supply their own.
"""
import logging
from datetime import datetime, time
from typing import Dict, List, Optional, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models.coach import Coach
from app.models.hub import Hub
from app.models.practice_schedule import PracticeSchedule
from app.models.rotation_block import RotationBlock
from app.models.rotation_event import RotationEvent
from app.models.rotation_grid_settings import RotationGridSettings
from app.services.column_layout import ActiveLevel, LevelKey

logger = logging.getLogger(__name__)


class DataStoreError(Exception):
    """A persistence request failed."""


class RecordNotFound(DataStoreError):
    pass


class DataStore(Protocol):
    def get_grid_layout(self, hub_id: int, day_of_week: int) -> Optional[RotationGridSettings]: ...

    def save_grid_layout(
        self,
        hub_id: int,
        day_of_week: int,
        column_order: Sequence[int],
        combined_groups: Sequence[Sequence[int]],
        column_names: Optional[Dict[str, str]] = None,
    ) -> RotationGridSettings: ...

    def list_blocks(self, hub_id: int, day_of_week: int) -> List[RotationBlock]: ...

    def create_block(
        self,
        hub_id: int,
        day_of_week: int,
        level_key: LevelKey,
        rotation_event_id: Optional[int],
        event_name: str,
        start_time: time,
        end_time: time,
        color: str,
    ) -> int: ...

    def delete_block(self, block_id: int) -> None: ...

    def assign_coach(self, block_id: int, coach_id: Optional[int]) -> None: ...

    def list_active_levels(self, hub_id: int, day_of_week: int) -> List[ActiveLevel]: ...


def active_levels_from_schedules(schedules: Sequence[PracticeSchedule], day_of_week: int) -> List[ActiveLevel]:
    """
    Active levels for one day, one per (level, schedule_group).

    The first schedule seen for a key wins, so callers must pass schedules in a
    stable order; original column indices depend on it.
    """
    seen: Dict[LevelKey, ActiveLevel] = {}
    for schedule in schedules:
        if schedule.day_of_week != day_of_week:
            continue
        key = LevelKey(schedule.level, schedule.schedule_group)
        if key in seen:
            continue
        seen[key] = ActiveLevel(
            level=schedule.level,
            schedule_group=schedule.schedule_group,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            is_external_group=schedule.is_external_group,
        )
    return list(seen.values())


class SqlDataStore:
    def __init__(self, session: Session):
        self.session = session

    def _commit(self, what: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Failed to %s: %s", what, exc)
            raise DataStoreError(f"Failed to {what}") from exc

    def _require_hub(self, hub_id: int) -> Hub:
        hub = self.session.get(Hub, hub_id)
        if not hub:
            raise RecordNotFound(f"Hub {hub_id} not found")
        return hub

    # ------------------------------------------------------------------
    # Grid layout
    # ------------------------------------------------------------------

    def get_grid_layout(self, hub_id: int, day_of_week: int) -> Optional[RotationGridSettings]:
        return self.session.exec(
            select(RotationGridSettings).where(
                RotationGridSettings.hub_id == hub_id, RotationGridSettings.day_of_week == day_of_week
            )
        ).first()

    def save_grid_layout(
        self,
        hub_id: int,
        day_of_week: int,
        column_order: Sequence[int],
        combined_groups: Sequence[Sequence[int]],
        column_names: Optional[Dict[str, str]] = None,
    ) -> RotationGridSettings:
        """Upsert the layout row for (hub, day). column_names=None keeps the stored names."""
        self._require_hub(hub_id)
        settings = self.get_grid_layout(hub_id, day_of_week)
        if settings is None:
            settings = RotationGridSettings(hub_id=hub_id, day_of_week=day_of_week)

        # JSON columns: always assign fresh lists so the change is detected
        settings.column_order = list(column_order)
        settings.combined_indices = [list(g) for g in combined_groups]
        if column_names is not None:
            settings.column_names = dict(column_names)
        settings.updated_at = datetime.utcnow()

        self.session.add(settings)
        self._commit("save grid layout")
        self.session.refresh(settings)
        return settings

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def list_blocks(self, hub_id: int, day_of_week: int) -> List[RotationBlock]:
        return list(
            self.session.exec(
                select(RotationBlock)
                .where(RotationBlock.hub_id == hub_id, RotationBlock.day_of_week == day_of_week)
                .order_by(RotationBlock.start_time, RotationBlock.id)
            ).all()
        )

    def create_block(
        self,
        hub_id: int,
        day_of_week: int,
        level_key: LevelKey,
        rotation_event_id: Optional[int],
        event_name: str,
        start_time: time,
        end_time: time,
        color: str,
    ) -> int:
        self._require_hub(hub_id)
        if end_time <= start_time:
            raise DataStoreError("end_time must be greater than start_time")
        if rotation_event_id is not None:
            event = self.session.get(RotationEvent, rotation_event_id)
            if not event or event.hub_id != hub_id:
                raise RecordNotFound(f"Rotation event {rotation_event_id} not found")

        block = RotationBlock(
            hub_id=hub_id,
            day_of_week=day_of_week,
            level=level_key.level,
            schedule_group=level_key.schedule_group,
            rotation_event_id=rotation_event_id,
            event_name=event_name,
            start_time=start_time,
            end_time=end_time,
            color=color,
        )
        self.session.add(block)
        self._commit("create rotation block")
        self.session.refresh(block)
        return block.id

    def get_block(self, block_id: int) -> RotationBlock:
        block = self.session.get(RotationBlock, block_id)
        if not block:
            raise RecordNotFound(f"Rotation block {block_id} not found")
        return block

    def delete_block(self, block_id: int) -> None:
        block = self.get_block(block_id)
        self.session.delete(block)
        self._commit("delete rotation block")

    def assign_coach(self, block_id: int, coach_id: Optional[int]) -> None:
        block = self.get_block(block_id)
        if coach_id is not None:
            coach = self.session.get(Coach, coach_id)
            if not coach or coach.hub_id != block.hub_id:
                raise RecordNotFound(f"Coach {coach_id} not found")
        block.coach_id = coach_id
        block.updated_at = datetime.utcnow()
        self.session.add(block)
        self._commit("assign coach")

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def list_active_levels(self, hub_id: int, day_of_week: int) -> List[ActiveLevel]:
        schedules = self.session.exec(
            select(PracticeSchedule)
            .where(PracticeSchedule.hub_id == hub_id, PracticeSchedule.day_of_week == day_of_week)
            .order_by(PracticeSchedule.id)
        ).all()
        return active_levels_from_schedules(schedules, day_of_week)
