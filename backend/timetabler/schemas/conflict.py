from pydantic import BaseModel
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "room_conflict",
        "faculty_conflict",
        "lab_day_overflow",
        "lab_first_slot",
        "subject_repeated_day",
        "broken_lab_block",
    ]
    description: str
    severity: Literal["hard", "soft"]
    day: str
    affected_slots: List[int]  # Slot ids on `day` involved in the conflict

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]

    @property
    def hard_conflicts(self) -> int:
        return sum(1 for item in self.conflicts if item.severity == "hard")
