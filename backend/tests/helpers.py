from datetime import time

from app.services.column_layout import ActiveLevel


def t(value: str) -> time:
    """time from "HH:MM"."""
    hours, minutes = (int(p) for p in value.split(":"))
    return time(hours, minutes)


def level(name: str, start: str, end: str, group: str = "A", external: bool = False) -> ActiveLevel:
    return ActiveLevel(
        level=name,
        schedule_group=group,
        start_time=t(start),
        end_time=t(end),
        is_external_group=external,
    )
