from functools import lru_cache

from timetabler.core.config import Settings, get_settings
from timetabler.services.timetable_store import InMemoryTimetableStore, TimetableStore


@lru_cache
def _default_store() -> InMemoryTimetableStore:
    return InMemoryTimetableStore()


def get_timetable_store() -> TimetableStore:
    return _default_store()


def get_app_settings() -> Settings:
    return get_settings()
