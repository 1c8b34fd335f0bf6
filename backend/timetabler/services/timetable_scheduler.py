from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from timetabler.core.exceptions import (
    ConfigurationError,
    IncompleteScheduleError,
    InvalidTimeRangeError,
    LabUnschedulableError,
    LectureUnschedulableError,
    NoEligibleRoomsError,
    NoSubjectsForCriteriaError,
    SchedulerError,
)
from timetabler.schemas.room import RoomPayload
from timetabler.schemas.settings import WORKING_DAYS
from timetabler.schemas.subject import SubjectPayload
from timetabler.schemas.timetable import Session, SlotPosition, SubjectSummary, TimeSlot, Timetable
from timetabler.services.scheduling_state import SchedulingState
from timetabler.services.shuffle import make_rng, shuffled

DEFAULT_MAX_LECTURE_PASSES = 3

logger = logging.getLogger(__name__)


def block_position(index: int, length: int) -> SlotPosition:
    if index == 0:
        return "first"
    if index == length - 1:
        return "last"
    return "middle"


class TimetableScheduler:
    """Greedy randomized weekly scheduler for a single cohort.

    Labs are placed first because they need contiguous free blocks, then
    lectures are spread over up to ``max_lecture_passes`` reshuffled passes.
    Every failure raises a :class:`SchedulerError` subclass naming the
    subject; nothing partial is ever returned.
    """

    def __init__(
        self,
        *,
        subjects: Sequence[SubjectPayload],
        rooms: Sequence[RoomPayload],
        working_days: Sequence[str] = WORKING_DAYS,
        time_slots: Sequence[TimeSlot],
        student_count: int,
        max_lecture_passes: int = DEFAULT_MAX_LECTURE_PASSES,
        rng: random.Random | None = None,
    ) -> None:
        if max_lecture_passes < 1:
            raise ConfigurationError("max_lecture_passes must be at least 1")
        if not subjects:
            raise NoSubjectsForCriteriaError()
        self.subjects = list(subjects)
        self.subjects_by_id = {subject.id: subject for subject in self.subjects}
        if len(self.subjects_by_id) != len(self.subjects):
            raise SchedulerError(message="Duplicate subject ids supplied for timetable generation")

        self.student_count = student_count
        self.rooms = [room for room in rooms if room.fits(student_count)]
        if not self.rooms:
            raise NoEligibleRoomsError(student_count)

        self.time_slots = sorted(time_slots, key=lambda slot: slot.id)
        if not self.time_slots:
            raise InvalidTimeRangeError()
        self.working_days = tuple(working_days)
        if not self.working_days:
            raise SchedulerError(message="No active working days configured for timetable generation")

        self.max_lecture_passes = max_lecture_passes
        self.random = rng if rng is not None else make_rng()
        self.lab_room = next((room for room in self.rooms if room.is_lab_suitable), self.rooms[0])
        self.lecture_room = next((room for room in self.rooms if room.is_lecture_suitable), self.rooms[0])
        self.state = SchedulingState.create(
            subjects=self.subjects,
            days=self.working_days,
            time_slots=self.time_slots,
        )

    def run(self) -> Timetable:
        self._place_labs()
        self._place_lectures()
        self._validate()
        logger.info(
            "Generated timetable for %s subjects across %s days x %s slots",
            len(self.subjects),
            len(self.working_days),
            len(self.time_slots),
        )
        return self.state.timetable

    def _build_session(
        self,
        subject: SubjectPayload,
        room: RoomPayload,
        slots: Sequence[TimeSlot],
        *,
        is_lab: bool,
        position: SlotPosition | None = None,
    ) -> Session:
        return Session(
            subject_id=subject.id,
            subject=subject.name,
            code=subject.code,
            faculty=subject.assigned_faculty,
            room=room.number,
            type="Lab" if is_lab else "Lecture",
            duration=len(slots),
            start_time=slots[0].start_time,
            end_time=slots[-1].end_time,
            slot_position=position,
        )

    # Lab pass

    def _lab_block_candidates(self, duration: int) -> list[list[TimeSlot]]:
        # The day's first slot never starts a lab.
        blocks: list[list[TimeSlot]] = []
        for start_index in range(1, len(self.time_slots) - duration + 1):
            blocks.append(self.time_slots[start_index : start_index + duration])
        return blocks

    def _block_is_free(self, day: str, block: Sequence[TimeSlot], subject: SubjectPayload, room: RoomPayload) -> bool:
        return all(
            self.state.is_slot_available(day, slot.id, faculty=subject.assigned_faculty, room=room.number)
            for slot in block
        )

    def _try_place_lab(self, subject: SubjectPayload) -> bool:
        duration = subject.lab_duration
        room = self.lab_room
        for day in shuffled(self.working_days, self.random):
            if self.state.has_lab_on(day):
                continue
            for block in self._lab_block_candidates(duration):
                if not self._block_is_free(day, block, subject, room):
                    continue
                for index, slot in enumerate(block):
                    session = self._build_session(
                        subject,
                        room,
                        block,
                        is_lab=True,
                        position=block_position(index, len(block)),
                    )
                    self.state.occupy(day, slot.id, session)
                self.state.mark_lab_day(day)
                self.state.mark_active(day, subject.id)
                self.state.record_lab(subject.id)
                logger.debug(
                    "Placed %s-hour lab for %s on %s from slot %s",
                    duration,
                    subject.code,
                    day,
                    block[0].id,
                )
                return True
        return False

    def _place_labs(self) -> None:
        lab_subjects = shuffled(
            (subject for subject in self.subjects if subject.required_labs > 0),
            self.random,
        )
        for subject in lab_subjects:
            for _ in range(subject.required_labs):
                if not self._try_place_lab(subject):
                    logger.warning(
                        "Cannot place %s-hour lab for %s (%s)",
                        subject.lab_duration,
                        subject.name,
                        subject.id,
                    )
                    raise LabUnschedulableError(subject.id, subject.name, subject.lab_duration)

    # Lecture pass

    def _is_back_to_back(self, day: str, slot_index: int, subject_id: str) -> bool:
        neighbours = []
        if slot_index > 0:
            neighbours.append(self.time_slots[slot_index - 1])
        if slot_index < len(self.time_slots) - 1:
            neighbours.append(self.time_slots[slot_index + 1])
        for slot in neighbours:
            session = self.state.session_at(day, slot.id)
            if session is not None and session.subject_id == subject_id:
                return True
        return False

    def _try_place_lecture(self, subject: SubjectPayload, *, allow_back_to_back: bool) -> bool:
        room = self.lecture_room
        for day in shuffled(self.working_days, self.random):
            if self.state.is_active_on(day, subject.id):
                continue
            for slot_index in shuffled(range(len(self.time_slots)), self.random):
                slot = self.time_slots[slot_index]
                if not self.state.is_slot_available(
                    day, slot.id, faculty=subject.assigned_faculty, room=room.number
                ):
                    continue
                if not allow_back_to_back and self._is_back_to_back(day, slot_index, subject.id):
                    continue
                self.state.occupy(day, slot.id, self._build_session(subject, room, [slot], is_lab=False))
                self.state.mark_active(day, subject.id)
                self.state.record_lecture(subject.id)
                return True
        return False

    def _place_lectures(self) -> None:
        for pass_number in range(1, self.max_lecture_passes + 1):
            logger.info("Lecture scheduling pass %s/%s", pass_number, self.max_lecture_passes)
            pending = shuffled(
                (subject for subject in self.subjects if self.state.progress(subject.id).pending_lectures > 0),
                self.random,
            )
            if not pending:
                logger.info("All lectures scheduled before pass %s", pass_number)
                return

            progress_made = False
            for subject in pending:
                lectures_to_schedule = self.state.progress(subject.id).pending_lectures
                for lecture_index in range(lectures_to_schedule):
                    # Adjacent lectures of one subject are accepted only for its last outstanding unit.
                    is_final_unit = lecture_index == lectures_to_schedule - 1
                    if self._try_place_lecture(subject, allow_back_to_back=is_final_unit):
                        progress_made = True
                        continue
                    if pass_number == self.max_lecture_passes:
                        lecture_number = self.state.progress(subject.id).lectures_scheduled + 1
                        logger.warning(
                            "Could not schedule lecture %s for %s even after %s passes",
                            lecture_number,
                            subject.name,
                            self.max_lecture_passes,
                        )
                        raise LectureUnschedulableError(
                            subject.id,
                            subject.name,
                            lecture_number,
                            self.max_lecture_passes,
                        )

            if not progress_made:
                logger.debug("No progress in lecture pass %s", pass_number)

    # Validation

    def _validate(self) -> None:
        for subject in self.subjects:
            progress = self.state.progress(subject.id)
            if progress.is_complete:
                continue
            raise IncompleteScheduleError(
                subject.id,
                subject.name,
                required_lectures=progress.required_lectures,
                required_labs=progress.required_labs,
                scheduled_lectures=progress.lectures_scheduled,
                scheduled_labs=progress.labs_scheduled,
            )


def generate(
    subjects: Sequence[SubjectPayload],
    rooms: Sequence[RoomPayload],
    working_days: Sequence[str],
    time_slots: Sequence[TimeSlot],
    student_count: int,
    *,
    max_lecture_passes: int = DEFAULT_MAX_LECTURE_PASSES,
    random_seed: int | None = None,
    rng: random.Random | None = None,
) -> Timetable:
    """Build a conflict-free weekly timetable or raise a :class:`SchedulerError`.

    ``random_seed`` (or an explicit ``rng``) fixes every shuffle, so a seeded
    call is reproducible. Rooms smaller than ``student_count`` are ignored.
    """
    scheduler = TimetableScheduler(
        subjects=subjects,
        rooms=rooms,
        working_days=working_days,
        time_slots=time_slots,
        student_count=student_count,
        max_lecture_passes=max_lecture_passes,
        rng=rng if rng is not None else make_rng(random_seed),
    )
    return scheduler.run()


def summarize_subjects(subjects: Sequence[SubjectPayload], timetable: Timetable) -> list[SubjectSummary]:
    lectures: dict[str, int] = {subject.id: 0 for subject in subjects}
    labs: dict[str, int] = {subject.id: 0 for subject in subjects}
    for day_slots in timetable.values():
        for session in day_slots.values():
            if session is None or session.subject_id not in lectures:
                continue
            if not session.is_lab:
                lectures[session.subject_id] += 1
            elif session.slot_position == "first":
                labs[session.subject_id] += 1
    return [
        SubjectSummary(
            subject_id=subject.id,
            subject=subject.name,
            code=subject.code,
            faculty=subject.assigned_faculty,
            lecture_hours=subject.lecture_hours,
            lab_hours=subject.lab_hours,
            total_hours=subject.total_hours or 0,
            lectures_scheduled=lectures[subject.id],
            labs_scheduled=labs[subject.id],
        )
        for subject in subjects
    ]
