from collections import defaultdict
from typing import Dict, List, Sequence, Set

from timetabler.schemas.conflict import ConflictDetail, ConflictReport
from timetabler.schemas.settings import parse_time_to_minutes
from timetabler.schemas.timetable import Session, TimeSlot, Timetable


class ConflictService:
    """Re-checks a finished timetable against the hard placement rules.

    The scheduler never consults this; it exists so a generated (or
    externally edited) timetable can be audited independently.
    ``reference_timetables`` are other cohorts' timetables drawing on the same
    faculty and rooms; overlaps with them are reported, never prevented.
    """

    def __init__(
        self,
        timetable: Timetable,
        time_slots: Sequence[TimeSlot],
        reference_timetables: Sequence[Timetable] = (),
    ):
        self.timetable = timetable
        self.reference_timetables = list(reference_timetables)
        self.slot_ids: List[int] = [slot.id for slot in sorted(time_slots, key=lambda slot: slot.id)]

    def detect_conflicts(self) -> ConflictReport:
        conflicts: List[ConflictDetail] = []
        for day, cells in self.timetable.items():
            conflicts.extend(self._resource_conflicts(day))
            conflicts.extend(self._lab_conflicts(day, cells))
            conflicts.extend(self._subject_day_conflicts(day, cells))
        return ConflictReport(conflicts=conflicts)

    def _session_windows(self, timetable: Timetable, day: str) -> List[tuple]:
        # Lab cells repeat the whole block's times, so only the block's first cell is counted.
        windows: List[tuple] = []
        for slot_id, session in timetable.get(day, {}).items():
            if session is None or (session.is_lab and session.slot_position != "first"):
                continue
            windows.append((
                parse_time_to_minutes(session.start_time),
                parse_time_to_minutes(session.end_time),
                slot_id,
                session,
            ))
        return windows

    def _resource_conflicts(self, day: str) -> List[ConflictDetail]:
        conflicts: List[ConflictDetail] = []
        own = self._session_windows(self.timetable, day)
        others = [window for ref in self.reference_timetables for window in self._session_windows(ref, day)]

        pairs = [(own[i], own[j]) for i in range(len(own)) for j in range(i + 1, len(own))]
        pairs.extend((mine, other) for mine in own for other in others)
        for (start1, end1, slot1, s1), (start2, end2, _, s2) in pairs:
            if max(start1, start2) >= min(end1, end2):
                continue
            if s1.faculty == s2.faculty:
                conflicts.append(ConflictDetail(
                    id=f"fac-{day}-{slot1}-{s2.subject_id}",
                    conflict_type="faculty_conflict",
                    description=f"Faculty overlap for {s1.faculty}: {s1.code} and {s2.code}",
                    severity="hard",
                    day=day,
                    affected_slots=[slot1],
                ))
            if s1.room == s2.room:
                conflicts.append(ConflictDetail(
                    id=f"room-{day}-{slot1}-{s2.subject_id}",
                    conflict_type="room_conflict",
                    description=f"Room overlap in {s1.room}: {s1.code} and {s2.code}",
                    severity="hard",
                    day=day,
                    affected_slots=[slot1],
                ))
        return conflicts

    def _lab_blocks(self, cells: Dict[int, Session | None]) -> List[List[int]]:
        blocks: List[List[int]] = []
        current: List[int] = []
        for slot_id in self.slot_ids:
            session = cells.get(slot_id)
            if session is None or not session.is_lab:
                if current:
                    blocks.append(current)
                    current = []
                continue
            if session.slot_position == "first" and current:
                blocks.append(current)
                current = []
            current.append(slot_id)
            if session.slot_position == "last" or session.duration == 1:
                blocks.append(current)
                current = []
        if current:
            blocks.append(current)
        return blocks

    def _lab_conflicts(self, day: str, cells: Dict[int, Session | None]) -> List[ConflictDetail]:
        conflicts: List[ConflictDetail] = []
        blocks = self._lab_blocks(cells)
        if len(blocks) > 1:
            conflicts.append(ConflictDetail(
                id=f"labs-{day}",
                conflict_type="lab_day_overflow",
                description=f"{len(blocks)} lab blocks scheduled on {day}",
                severity="hard",
                day=day,
                affected_slots=[block[0] for block in blocks],
            ))
        for block in blocks:
            first = cells[block[0]]
            if self.slot_ids and block[0] == self.slot_ids[0]:
                conflicts.append(ConflictDetail(
                    id=f"lab-first-{day}",
                    conflict_type="lab_first_slot",
                    description=f"Lab for {first.subject} starts in the first slot of {day}",
                    severity="hard",
                    day=day,
                    affected_slots=block,
                ))
            positions = [cells[slot_id].slot_position for slot_id in block]
            same_session = {(cells[slot_id].subject_id, cells[slot_id].room) for slot_id in block}
            if len(block) != first.duration or positions[0] != "first" or len(same_session) != 1:
                conflicts.append(ConflictDetail(
                    id=f"lab-block-{day}-{block[0]}",
                    conflict_type="broken_lab_block",
                    description=f"Lab block for {first.subject} on {day} is not a contiguous {first.duration}-hour block",
                    severity="hard",
                    day=day,
                    affected_slots=block,
                ))
        return conflicts

    def _subject_day_conflicts(self, day: str, cells: Dict[int, Session | None]) -> List[ConflictDetail]:
        # A subject may occupy several cells on one day only as a single lab block.
        placements: Dict[str, Set[str]] = defaultdict(set)
        slots_by_subject: Dict[str, List[int]] = defaultdict(list)
        for slot_id in self.slot_ids:
            session = cells.get(slot_id)
            if session is None:
                continue
            slots_by_subject[session.subject_id].append(slot_id)
            if session.is_lab:
                placements[session.subject_id].add("lab")
            else:
                placements[session.subject_id].add(f"lecture-{slot_id}")

        conflicts: List[ConflictDetail] = []
        for subject_id, kinds in placements.items():
            if len(kinds) > 1:
                conflicts.append(ConflictDetail(
                    id=f"subj-{day}-{subject_id}",
                    conflict_type="subject_repeated_day",
                    description=f"Subject {subject_id} is scheduled more than once on {day}",
                    severity="hard",
                    day=day,
                    affected_slots=slots_by_subject[subject_id],
                ))
        return conflicts
