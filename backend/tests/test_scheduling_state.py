from timetabler.schemas.subject import SubjectPayload
from timetabler.schemas.timetable import Session
from timetabler.services.scheduling_state import SchedulingState
from timetabler.services.time_grid import build_time_slots


def make_state():
    subjects = [
        SubjectPayload(id="s-1", name="Networks", code="CS401", assigned_faculty="Dr. Rao", lecture_hours=3, lab_hours=3, lab_duration=2),
        SubjectPayload(id="s-2", name="Maths", code="MA101", assigned_faculty="Dr. Iyer", lecture_hours=4),
    ]
    return SchedulingState.create(
        subjects=subjects,
        days=("Monday", "Tuesday"),
        time_slots=build_time_slots("09:00", "12:00"),
    )


def make_session(**overrides):
    values = {
        "subject_id": "s-1",
        "subject": "Networks",
        "code": "CS401",
        "faculty": "Dr. Rao",
        "room": "L-01",
        "type": "Lecture",
        "duration": 1,
        "start_time": "10:00",
        "end_time": "11:00",
    }
    values.update(overrides)
    return Session(**values)


def test_fresh_state_is_empty():
    state = make_state()
    assert state.timetable == {
        "Monday": {1: None, 2: None, 3: None},
        "Tuesday": {1: None, 2: None, 3: None},
    }
    assert not state.has_lab_on("Monday")
    assert not state.is_active_on("Monday", "s-1")
    progress = state.progress("s-1")
    assert (progress.required_lectures, progress.required_labs) == (3, 2)
    assert progress.pending_lectures == 3
    assert not progress.is_complete


def test_occupy_marks_cell_faculty_and_room():
    state = make_state()
    session = make_session()
    state.occupy("Monday", 2, session)

    assert state.session_at("Monday", 2) == session
    assert not state.is_cell_free("Monday", 2)
    assert not state.is_faculty_free("Monday", 2, "Dr. Rao")
    assert state.is_faculty_free("Monday", 2, "Dr. Iyer")
    assert not state.is_room_free("Monday", 2, "L-01")
    assert state.is_room_free("Monday", 2, "H-01")
    assert not state.is_slot_available("Monday", 2, faculty="Dr. Iyer", room="H-01")
    assert state.is_slot_available("Tuesday", 2, faculty="Dr. Rao", room="L-01")


def test_progress_and_day_flags():
    state = make_state()
    state.record_lecture("s-2")
    state.record_lab("s-1")
    state.mark_active("Tuesday", "s-1")
    state.mark_lab_day("Tuesday")

    assert state.progress("s-2").lectures_scheduled == 1
    assert state.progress("s-2").pending_lectures == 3
    assert state.progress("s-1").labs_scheduled == 1
    assert state.is_active_on("Tuesday", "s-1")
    assert not state.is_active_on("Monday", "s-1")
    assert state.has_lab_on("Tuesday")
    assert not state.has_lab_on("Monday")


def test_states_do_not_share_bookkeeping():
    first = make_state()
    second = make_state()
    first.occupy("Monday", 1, make_session())
    first.mark_lab_day("Monday")
    assert second.is_cell_free("Monday", 1)
    assert not second.has_lab_on("Monday")
