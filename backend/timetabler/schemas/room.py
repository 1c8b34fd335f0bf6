from __future__ import annotations

from pydantic import BaseModel, Field

LAB_ROOM_MARKERS = ("lab", "computer")
LECTURE_ROOM_MARKERS = ("lecture", "hall")


class RoomPayload(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    number: str = Field(min_length=1, max_length=100)
    type: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1, le=5000)
    building: str | None = Field(default=None, max_length=200)
    floor: str | None = Field(default=None, max_length=50)
    equipment: str | None = Field(default=None, max_length=500)

    def _type_contains(self, markers: tuple[str, ...]) -> bool:
        normalized = self.type.lower()
        return any(marker in normalized for marker in markers)

    @property
    def is_lab_suitable(self) -> bool:
        return self._type_contains(LAB_ROOM_MARKERS)

    @property
    def is_lecture_suitable(self) -> bool:
        return self._type_contains(LECTURE_ROOM_MARKERS)

    def fits(self, student_count: int) -> bool:
        return self.capacity >= student_count
