"""
Debounced, coalescing writer for grid layouts.

One pending slot per (hub_id, day_of_week):

- schedule() for a key that already has a pending save replaces the payload and
  restarts the quiet period, so intermediate layouts are never written
- keys are independent; switching days does not cancel the previous day's save
- the payload carries its own hub and day, captured when it was scheduled

Write failures are logged and dropped. The next edit schedules a fresh save.
With the default timer the writer runs on a timer thread, so it must not share
a database Session with the caller.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from app.config import LAYOUT_SAVE_DELAY_MS
from app.services.column_layout import ColumnLayout

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = LAYOUT_SAVE_DELAY_MS / 1000

LayoutKey = Tuple[int, int]


@dataclass(frozen=True)
class PendingLayoutSave:
    hub_id: int
    day_of_week: int
    layout: ColumnLayout
    column_names: Optional[Dict[str, str]] = None

    @property
    def key(self) -> LayoutKey:
        return (self.hub_id, self.day_of_week)


class Timer:
    """What the scheduler needs from a timer; threading.Timer fits."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


def _thread_timer(delay: float, callback: Callable[[], None]) -> Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class LayoutSaveScheduler:
    def __init__(
        self,
        writer: Callable[[PendingLayoutSave], None],
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        timer_factory: TimerFactory = _thread_timer,
    ):
        self._writer = writer
        self._delay = delay_seconds
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: Dict[LayoutKey, Tuple[PendingLayoutSave, Timer]] = {}

    def schedule(
        self,
        hub_id: int,
        day_of_week: int,
        layout: ColumnLayout,
        column_names: Optional[Dict[str, str]] = None,
    ) -> PendingLayoutSave:
        payload = PendingLayoutSave(
            hub_id=hub_id,
            day_of_week=day_of_week,
            layout=layout,
            column_names=dict(column_names) if column_names is not None else None,
        )
        timer = self._timer_factory(self._delay, lambda: self._fire(payload))
        with self._lock:
            previous = self._pending.get(payload.key)
            if previous is not None:
                previous[1].cancel()
            self._pending[payload.key] = (payload, timer)
        timer.start()
        return payload

    def pending(self, hub_id: int, day_of_week: int) -> Optional[PendingLayoutSave]:
        with self._lock:
            entry = self._pending.get((hub_id, day_of_week))
        return entry[0] if entry else None

    def pending_keys(self) -> List[LayoutKey]:
        with self._lock:
            return list(self._pending)

    def cancel(self, hub_id: int, day_of_week: int) -> bool:
        with self._lock:
            entry = self._pending.pop((hub_id, day_of_week), None)
        if entry is None:
            return False
        entry[1].cancel()
        return True

    def flush(self, hub_id: Optional[int] = None, day_of_week: Optional[int] = None) -> int:
        """Write pending saves now (all of them, or just one key). Returns how many were written."""
        with self._lock:
            if hub_id is None:
                keys = list(self._pending)
            else:
                keys = [k for k in self._pending if k == (hub_id, day_of_week)]
            entries = [self._pending.pop(k) for k in keys]

        for payload, timer in entries:
            timer.cancel()
            self._write(payload)
        return len(entries)

    def _fire(self, payload: PendingLayoutSave) -> None:
        with self._lock:
            entry = self._pending.get(payload.key)
            # A newer schedule() for this key superseded us
            if entry is None or entry[0] is not payload:
                return
            del self._pending[payload.key]
        self._write(payload)

    def _write(self, payload: PendingLayoutSave) -> None:
        try:
            self._writer(payload)
        except Exception:
            logger.exception(
                "Failed to save grid layout for hub %d day %d", payload.hub_id, payload.day_of_week
            )
