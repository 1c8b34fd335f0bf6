from __future__ import annotations

import logging

from timetabler.schemas.settings import SLOT_MINUTES, minutes_to_time, parse_time_to_minutes
from timetabler.schemas.timetable import TimeSlot

logger = logging.getLogger(__name__)


def build_time_slots(start_time: str, end_time: str) -> list[TimeSlot]:
    """Split ``[start_time, end_time)`` into consecutive one-hour slots.

    A trailing partial hour is dropped. An empty list means the window is
    unusable (malformed, reversed, or shorter than one hour); callers report
    that as an invalid time range.
    """
    try:
        start = parse_time_to_minutes(start_time)
        end = parse_time_to_minutes(end_time)
    except (TypeError, ValueError):
        logger.warning("Rejected malformed time window %r-%r", start_time, end_time)
        return []

    slots: list[TimeSlot] = []
    current = start
    while current + SLOT_MINUTES <= end:
        slots.append(
            TimeSlot(
                id=len(slots) + 1,
                start_time=minutes_to_time(current),
                end_time=minutes_to_time(current + SLOT_MINUTES),
                duration=SLOT_MINUTES // 60,
            )
        )
        current += SLOT_MINUTES
    return slots
