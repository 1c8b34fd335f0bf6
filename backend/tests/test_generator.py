def subject_record(subject_id, *, lectures, lab_hours=0, lab_duration=0, semester="5", faculty="Prof A"):
    return {
        "id": subject_id,
        "name": f"Subject {subject_id}",
        "code": subject_id.upper(),
        "course": "BTech",
        "department": "CSE",
        "semester": semester,
        "lectureHours": lectures,
        "labHours": lab_hours,
        "labDuration": lab_duration,
        "assignedFaculty": faculty,
    }


ROOMS = [
    {"id": "r-1", "number": "H-101", "type": "Lecture Hall", "capacity": 60, "building": "Main", "floor": "1"},
    {"id": "r-2", "number": "CL-1", "type": "Computer Lab", "capacity": 60, "building": "Main", "floor": "2"},
    {"id": "r-3", "number": "S-9", "type": "Seminar", "capacity": 20, "building": "Annex", "floor": "G"},
]


def generation_payload(**overrides):
    payload = {
        "course": "BTech",
        "department": "CSE",
        "semester": "5",
        "students": 45,
        "start_time": "09:00",
        "end_time": "16:00",
        "random_seed": 7,
        "subjects": [
            subject_record("os", lectures=3, lab_hours=2, lab_duration=2, faculty="Prof A"),
            subject_record("dbms", lectures=4, faculty="Prof B"),
            subject_record("cn", lectures=2, lab_hours=1, lab_duration=1, faculty="Prof C"),
            subject_record("old", lectures=5, semester="3", faculty="Prof D"),
        ],
        "rooms": ROOMS,
    }
    payload.update(overrides)
    return payload


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_timetable_for_cohort(client):
    response = client.post("/api/timetable/generate", json=generation_payload())
    assert response.status_code == 200
    body = response.json()

    assert body["saved"] is True
    assert [slot["start_time"] for slot in body["time_slots"]] == [
        "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00",
    ]
    assert list(body["timetable"]) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

    summary = {item["subject_id"]: item for item in body["subject_summary"]}
    assert set(summary) == {"os", "dbms", "cn"}
    assert summary["os"]["lectures_scheduled"] == 3
    assert summary["os"]["labs_scheduled"] == 1
    assert summary["dbms"]["lectures_scheduled"] == 4
    assert summary["cn"]["labs_scheduled"] == 1

    sessions = [cell for cells in body["timetable"].values() for cell in cells.values() if cell]
    assert all(cell["subject_id"] != "old" for cell in sessions)
    assert all(cell["room"] != "S-9" for cell in sessions)
    lab_starts = [cell for cell in sessions if cell["type"] == "Lab" and cell["slot_position"] == "first"]
    assert len(lab_starts) == 2


def test_seeded_requests_repeat(client):
    first = client.post("/api/timetable/generate", json=generation_payload(persist=False)).json()
    second = client.post("/api/timetable/generate", json=generation_payload(persist=False)).json()
    assert first["timetable"] == second["timetable"]
    assert first["id"] != second["id"]


def test_unknown_cohort_returns_scheduler_error(client):
    response = client.post("/api/timetable/generate", json=generation_payload(semester="8"))
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "No subjects found for BTech - CSE - 8"
    assert body["details"]["kind"] == "no_subjects_for_criteria"


def test_oversized_cohort_has_no_rooms(client):
    response = client.post("/api/timetable/generate", json=generation_payload(students=500))
    assert response.status_code == 400
    assert response.json()["details"]["kind"] == "no_eligible_rooms"


def test_unplaceable_lectures_are_rejected_without_saving(client, store):
    payload = generation_payload(subjects=[subject_record("physics", lectures=6)])
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 400
    details = response.json()["details"]
    assert details["kind"] == "lecture_unschedulable"
    assert details["subject_id"] == "physics"
    assert store.list() == []


def test_reversed_window_is_a_validation_error(client):
    response = client.post("/api/timetable/generate", json=generation_payload(start_time="12:00", end_time="09:00"))
    assert response.status_code == 422


def test_short_window_is_rejected(client):
    response = client.post("/api/timetable/generate", json=generation_payload(start_time="09:00", end_time="10:30"))
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "College timing should be at least 2 hours"
    assert body["details"] == {"kind": "invalid_time_range", "start_time": "09:00", "end_time": "10:30"}


def test_invalid_subject_record_is_a_validation_error(client):
    bad_subject = subject_record("os", lectures=2, lab_hours=2, lab_duration=0)
    response = client.post("/api/timetable/generate", json=generation_payload(subjects=[bad_subject]))
    assert response.status_code == 422


def test_saved_timetables_roundtrip(client):
    created = client.post("/api/timetable/generate", json=generation_payload()).json()
    client.post("/api/timetable/generate", json=generation_payload(persist=False))

    listing = client.get("/api/timetables")
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()] == [created["id"]]

    fetched = client.get(f"/api/timetables/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["timetable"] == created["timetable"]

    deleted = client.delete(f"/api/timetables/{created['id']}")
    assert deleted.status_code == 204
    assert client.get(f"/api/timetables/{created['id']}").status_code == 404
    assert client.delete(f"/api/timetables/{created['id']}").status_code == 404


def test_conflicts_across_saved_cohorts(client):
    first = client.post("/api/timetable/generate", json=generation_payload()).json()
    report = client.get(f"/api/timetables/{first['id']}/conflicts")
    assert report.status_code == 200
    assert report.json() == {"conflicts": []}

    # Same rooms, faculty and seed for another semester double-books everything.
    other_subjects = [
        {**item, "semester": "7"} for item in generation_payload()["subjects"] if item["semester"] == "5"
    ]
    client.post("/api/timetable/generate", json=generation_payload(semester="7", subjects=other_subjects))
    report = client.get(f"/api/timetables/{first['id']}/conflicts").json()
    kinds = {item["conflict_type"] for item in report["conflicts"]}
    assert kinds == {"faculty_conflict", "room_conflict"}


def test_missing_timetable_conflicts_is_404(client):
    response = client.get("/api/timetables/nope/conflicts")
    assert response.status_code == 404
    assert response.json()["message"] == "Timetable with id nope not found"


def test_regenerated_cohort_is_not_its_own_conflict(client):
    client.post("/api/timetable/generate", json=generation_payload(random_seed=1))
    second = client.post("/api/timetable/generate", json=generation_payload(random_seed=2)).json()

    report = client.get(f"/api/timetables/{second['id']}/conflicts")
    assert report.status_code == 200
    assert report.json() == {"conflicts": []}
