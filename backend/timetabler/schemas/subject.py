from __future__ import annotations

import math

from pydantic import BaseModel, Field, model_validator


class SubjectPayload(BaseModel):
    model_config = {"populate_by_name": True}

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    course: str = Field(default="", max_length=200)
    department: str = Field(default="", max_length=200)
    semester: str = Field(default="", max_length=50)
    lecture_hours: int = Field(default=0, alias="lectureHours", ge=0, le=40)
    lab_hours: int = Field(default=0, alias="labHours", ge=0, le=40)
    lab_duration: int = Field(default=0, alias="labDuration", ge=0, le=12)
    total_hours: int | None = Field(default=None, alias="totalHours", ge=0, le=80)
    assigned_faculty: str = Field(alias="assignedFaculty", min_length=1, max_length=200)

    @model_validator(mode="after")
    def validate_lab_split(self) -> "SubjectPayload":
        if self.lab_hours == 0 and self.lab_duration > 0:
            raise ValueError("labDuration should be 0 when there are no lab hours")
        if self.lab_hours > 0 and self.lab_duration == 0:
            raise ValueError("labDuration must be specified when there are lab hours")
        if self.total_hours is None:
            self.total_hours = self.lecture_hours + self.lab_hours
        return self

    @property
    def required_labs(self) -> int:
        if self.lab_hours <= 0 or self.lab_duration <= 0:
            return 0
        return math.ceil(self.lab_hours / self.lab_duration)

    @property
    def required_lectures(self) -> int:
        return self.lecture_hours

    def matches_cohort(self, *, course: str, department: str, semester: str) -> bool:
        return self.course == course and self.department == department and self.semester == semester
