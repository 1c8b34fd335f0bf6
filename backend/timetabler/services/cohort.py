from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from timetabler.core.exceptions import InvalidTimeRangeError, NoEligibleRoomsError, NoSubjectsForCriteriaError
from timetabler.schemas.room import RoomPayload
from timetabler.schemas.subject import SubjectPayload
from timetabler.schemas.timetable import TimeSlot
from timetabler.services.time_grid import build_time_slots

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CohortInputs:
    subjects: tuple[SubjectPayload, ...]
    rooms: tuple[RoomPayload, ...]
    time_slots: tuple[TimeSlot, ...]


def filter_subjects_for_cohort(
    subjects: Sequence[SubjectPayload],
    *,
    course: str,
    department: str,
    semester: str,
) -> list[SubjectPayload]:
    return [
        subject
        for subject in subjects
        if subject.matches_cohort(course=course, department=department, semester=semester)
    ]


def eligible_rooms(rooms: Sequence[RoomPayload], student_count: int) -> list[RoomPayload]:
    return [room for room in rooms if room.fits(student_count)]


def prepare_cohort_inputs(
    *,
    subjects: Sequence[SubjectPayload],
    rooms: Sequence[RoomPayload],
    course: str,
    department: str,
    semester: str,
    student_count: int,
    start_time: str,
    end_time: str,
) -> CohortInputs:
    """Select the cohort's subjects, the rooms that seat it, and the day's slots.

    Checks run in the order a caller reports them: subjects, then rooms,
    then the time window.
    """
    cohort_subjects = filter_subjects_for_cohort(
        subjects, course=course, department=department, semester=semester
    )
    logger.debug(
        "Filtered %s of %s subjects for %s/%s/%s",
        len(cohort_subjects),
        len(subjects),
        course,
        department,
        semester,
    )
    if not cohort_subjects:
        raise NoSubjectsForCriteriaError(
            {"course": course, "department": department, "semester": semester}
        )

    cohort_rooms = eligible_rooms(rooms, student_count)
    if not cohort_rooms:
        raise NoEligibleRoomsError(student_count)

    time_slots = build_time_slots(start_time, end_time)
    if not time_slots:
        raise InvalidTimeRangeError(start_time, end_time)

    return CohortInputs(
        subjects=tuple(cohort_subjects),
        rooms=tuple(cohort_rooms),
        time_slots=tuple(time_slots),
    )
