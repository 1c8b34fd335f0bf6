from datetime import datetime, timezone
import logging
from time import perf_counter
import uuid

from fastapi import APIRouter, Depends

from timetabler.api.deps import get_app_settings, get_timetable_store
from timetabler.core.config import Settings
from timetabler.core.exceptions import InvalidTimeRangeError
from timetabler.schemas.settings import WORKING_DAYS, parse_time_to_minutes
from timetabler.schemas.timetable import GenerateTimetableRequest, GenerateTimetableResponse
from timetabler.services.cohort import prepare_cohort_inputs
from timetabler.services.timetable_scheduler import generate, summarize_subjects
from timetabler.services.timetable_store import TimetableStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/timetable/generate", response_model=GenerateTimetableResponse)
def generate_timetable(
    payload: GenerateTimetableRequest,
    settings: Settings = Depends(get_app_settings),
    store: TimetableStore = Depends(get_timetable_store),
) -> GenerateTimetableResponse:
    window_minutes = parse_time_to_minutes(payload.end_time) - parse_time_to_minutes(payload.start_time)
    if window_minutes < settings.minimum_window_hours * 60:
        raise InvalidTimeRangeError(
            payload.start_time,
            payload.end_time,
            message=f"College timing should be at least {settings.minimum_window_hours} hours",
        )

    started = perf_counter()
    inputs = prepare_cohort_inputs(
        subjects=payload.subjects,
        rooms=payload.rooms,
        course=payload.course,
        department=payload.department,
        semester=payload.semester,
        student_count=payload.students,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    seed = payload.random_seed if payload.random_seed is not None else settings.default_random_seed
    timetable = generate(
        inputs.subjects,
        inputs.rooms,
        WORKING_DAYS,
        inputs.time_slots,
        payload.students,
        max_lecture_passes=settings.max_lecture_passes,
        random_seed=seed,
    )
    runtime_ms = int((perf_counter() - started) * 1000)

    response = GenerateTimetableResponse(
        id=str(uuid.uuid4()),
        course=payload.course,
        department=payload.department,
        semester=payload.semester,
        students=payload.students,
        start_time=payload.start_time,
        end_time=payload.end_time,
        time_slots=list(inputs.time_slots),
        timetable=timetable,
        subject_summary=summarize_subjects(inputs.subjects, timetable),
        generated_at=datetime.now(timezone.utc),
        runtime_ms=runtime_ms,
        saved=payload.persist,
    )
    if payload.persist:
        store.save(response)
    logger.info(
        "Generated timetable %s for %s/%s/%s in %sms",
        response.id,
        payload.course,
        payload.department,
        payload.semester,
        runtime_ms,
    )
    return response
