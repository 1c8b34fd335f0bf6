from fastapi import APIRouter, Depends, status

from timetabler.api.deps import get_timetable_store
from timetabler.schemas.conflict import ConflictReport
from timetabler.schemas.timetable import GenerateTimetableResponse, SavedTimetableOut
from timetabler.services.conflict_service import ConflictService
from timetabler.services.timetable_store import TimetableStore

router = APIRouter()


@router.get("", response_model=list[SavedTimetableOut])
def list_timetables(store: TimetableStore = Depends(get_timetable_store)) -> list[SavedTimetableOut]:
    return [SavedTimetableOut.model_validate(record.model_dump()) for record in store.list()]


@router.get("/{timetable_id}", response_model=GenerateTimetableResponse)
def get_timetable(timetable_id: str, store: TimetableStore = Depends(get_timetable_store)) -> GenerateTimetableResponse:
    return store.get(timetable_id)


@router.get("/{timetable_id}/conflicts", response_model=ConflictReport)
def get_timetable_conflicts(
    timetable_id: str,
    store: TimetableStore = Depends(get_timetable_store),
) -> ConflictReport:
    record = store.get(timetable_id)
    cohort = (record.course, record.department, record.semester)
    others = [
        item.timetable
        for item in store.list()
        if item.id != timetable_id and (item.course, item.department, item.semester) != cohort
    ]
    return ConflictService(record.timetable, record.time_slots, reference_timetables=others).detect_conflicts()


@router.delete("/{timetable_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_timetable(timetable_id: str, store: TimetableStore = Depends(get_timetable_store)) -> None:
    store.delete(timetable_id)
