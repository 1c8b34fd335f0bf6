from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from timetabler.schemas.subject import SubjectPayload
from timetabler.schemas.timetable import Session, TimeSlot, Timetable


@dataclass
class SubjectProgress:
    required_lectures: int
    required_labs: int
    lectures_scheduled: int = 0
    labs_scheduled: int = 0

    @property
    def pending_lectures(self) -> int:
        return max(0, self.required_lectures - self.lectures_scheduled)

    @property
    def is_complete(self) -> bool:
        return (
            self.lectures_scheduled == self.required_lectures
            and self.labs_scheduled == self.required_labs
        )


@dataclass
class SchedulingState:
    """Occupancy and progress bookkeeping owned by a single generation call."""

    days: tuple[str, ...]
    slot_ids: tuple[int, ...]
    timetable: Timetable = field(default_factory=dict)
    faculty_by_slot: dict[str, dict[int, str | None]] = field(default_factory=dict)
    room_by_slot: dict[str, dict[int, str | None]] = field(default_factory=dict)
    progress_by_subject: dict[str, SubjectProgress] = field(default_factory=dict)
    active_subjects_by_day: dict[str, set[str]] = field(default_factory=dict)
    lab_days: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        subjects: Sequence[SubjectPayload],
        days: Sequence[str],
        time_slots: Sequence[TimeSlot],
    ) -> "SchedulingState":
        slot_ids = tuple(slot.id for slot in time_slots)
        state = cls(days=tuple(days), slot_ids=slot_ids)
        for day in state.days:
            state.timetable[day] = {slot_id: None for slot_id in slot_ids}
            state.faculty_by_slot[day] = {slot_id: None for slot_id in slot_ids}
            state.room_by_slot[day] = {slot_id: None for slot_id in slot_ids}
            state.active_subjects_by_day[day] = set()
            state.lab_days[day] = False
        for subject in subjects:
            state.progress_by_subject[subject.id] = SubjectProgress(
                required_lectures=subject.required_lectures,
                required_labs=subject.required_labs,
            )
        return state

    def is_cell_free(self, day: str, slot_id: int) -> bool:
        return self.timetable[day][slot_id] is None

    def is_faculty_free(self, day: str, slot_id: int, faculty: str) -> bool:
        return self.faculty_by_slot[day][slot_id] != faculty

    def is_room_free(self, day: str, slot_id: int, room: str) -> bool:
        return self.room_by_slot[day][slot_id] != room

    def is_slot_available(self, day: str, slot_id: int, *, faculty: str, room: str) -> bool:
        return (
            self.is_cell_free(day, slot_id)
            and self.is_faculty_free(day, slot_id, faculty)
            and self.is_room_free(day, slot_id, room)
        )

    def occupy(self, day: str, slot_id: int, session: Session) -> None:
        self.timetable[day][slot_id] = session
        self.faculty_by_slot[day][slot_id] = session.faculty
        self.room_by_slot[day][slot_id] = session.room

    def session_at(self, day: str, slot_id: int) -> Session | None:
        return self.timetable[day].get(slot_id)

    def progress(self, subject_id: str) -> SubjectProgress:
        return self.progress_by_subject[subject_id]

    def record_lecture(self, subject_id: str) -> None:
        self.progress_by_subject[subject_id].lectures_scheduled += 1

    def record_lab(self, subject_id: str) -> None:
        self.progress_by_subject[subject_id].labs_scheduled += 1

    def is_active_on(self, day: str, subject_id: str) -> bool:
        return subject_id in self.active_subjects_by_day[day]

    def mark_active(self, day: str, subject_id: str) -> None:
        self.active_subjects_by_day[day].add(subject_id)

    def has_lab_on(self, day: str) -> bool:
        return self.lab_days[day]

    def mark_lab_day(self, day: str) -> None:
        self.lab_days[day] = True
