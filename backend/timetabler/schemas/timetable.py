from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from timetabler.schemas.room import RoomPayload
from timetabler.schemas.settings import TIME_PATTERN, parse_time_to_minutes
from timetabler.schemas.subject import SubjectPayload

SessionType = Literal["Lecture", "Lab"]
SlotPosition = Literal["first", "middle", "last"]


class TimeSlot(BaseModel):
    model_config = {"frozen": True}

    id: int = Field(ge=1)
    start_time: str
    end_time: str
    duration: int = 1


class Session(BaseModel):
    subject_id: str
    subject: str
    code: str
    faculty: str
    room: str
    type: SessionType
    duration: int = Field(ge=1)
    start_time: str
    end_time: str
    slot_position: SlotPosition | None = None

    @property
    def is_lab(self) -> bool:
        return self.type == "Lab"


# Day -> slot id -> session (None for a free cell). Every day and slot id is present.
Timetable = dict[str, dict[int, Session | None]]


class SubjectSummary(BaseModel):
    subject_id: str
    subject: str
    code: str
    faculty: str
    lecture_hours: int
    lab_hours: int
    total_hours: int
    lectures_scheduled: int
    labs_scheduled: int


class GenerateTimetableRequest(BaseModel):
    course: str = Field(min_length=1, max_length=200)
    department: str = Field(min_length=1, max_length=200)
    semester: str = Field(min_length=1, max_length=50)
    students: int = Field(ge=1, le=5000)
    start_time: str
    end_time: str
    subjects: list[SubjectPayload] = Field(default_factory=list, max_length=500)
    rooms: list[RoomPayload] = Field(default_factory=list, max_length=500)
    random_seed: int | None = Field(default=None, ge=0, le=2_000_000_000)
    persist: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "GenerateTimetableRequest":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class GenerateTimetableResponse(BaseModel):
    id: str
    course: str
    department: str
    semester: str
    students: int
    start_time: str
    end_time: str
    time_slots: list[TimeSlot]
    timetable: dict[str, dict[int, Session | None]]
    subject_summary: list[SubjectSummary] = Field(default_factory=list)
    generated_at: datetime
    runtime_ms: int
    saved: bool = False


class SavedTimetableOut(BaseModel):
    id: str
    course: str
    department: str
    semester: str
    students: int
    start_time: str
    end_time: str
    generated_at: datetime
