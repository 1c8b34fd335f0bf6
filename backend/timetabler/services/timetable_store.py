from __future__ import annotations

import threading
from typing import Protocol

from timetabler.core.exceptions import ResourceNotFoundError
from timetabler.schemas.timetable import GenerateTimetableResponse


class TimetableStore(Protocol):
    """Persistence boundary for generated timetables; the scheduler never sees it."""

    def save(self, record: GenerateTimetableResponse) -> None: ...

    def get(self, timetable_id: str) -> GenerateTimetableResponse: ...

    def list(self) -> list[GenerateTimetableResponse]: ...

    def delete(self, timetable_id: str) -> None: ...


class InMemoryTimetableStore:
    def __init__(self) -> None:
        self._records: dict[str, GenerateTimetableResponse] = {}
        self._lock = threading.Lock()

    def save(self, record: GenerateTimetableResponse) -> None:
        with self._lock:
            self._records[record.id] = record

    def get(self, timetable_id: str) -> GenerateTimetableResponse:
        with self._lock:
            record = self._records.get(timetable_id)
        if record is None:
            raise ResourceNotFoundError("Timetable", timetable_id)
        return record

    def list(self) -> list[GenerateTimetableResponse]:
        with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda item: item.generated_at, reverse=True)

    def delete(self, timetable_id: str) -> None:
        with self._lock:
            if self._records.pop(timetable_id, None) is None:
                raise ResourceNotFoundError("Timetable", timetable_id)
