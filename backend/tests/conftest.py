import pytest
from fastapi.testclient import TestClient #fake http client that calls the FastAPI routes without running a server.

from timetabler.api.deps import get_timetable_store
from timetabler.main import app
from timetabler.services.timetable_store import InMemoryTimetableStore


@pytest.fixture()
def store():
    return InMemoryTimetableStore()


@pytest.fixture() #test client
def client(store): #fake http client bound to an isolated store
    app.dependency_overrides[get_timetable_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
