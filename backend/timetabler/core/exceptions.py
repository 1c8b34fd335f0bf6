class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when a timetable cannot be generated for the given inputs.

    ``kind`` names the failure category so callers can branch on it without
    matching on message text; it is also echoed into ``details``.
    """
    kind = "scheduler_error"

    def __init__(self, message: str, details: dict = None, status_code: int = 400):
        details = {"kind": self.kind, **(details or {})}
        super().__init__(message, status_code=status_code, details=details)

class InvalidTimeRangeError(SchedulerError):
    """The working window is too short or yields no full one-hour slot."""
    kind = "invalid_time_range"

    def __init__(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
        message: str = "Invalid time range provided",
    ):
        super().__init__(
            message,
            details={"start_time": start_time, "end_time": end_time},
        )

class NoEligibleRoomsError(SchedulerError):
    kind = "no_eligible_rooms"

    def __init__(self, student_count: int):
        super().__init__(
            f"No rooms available with capacity for {student_count} students",
            details={"student_count": student_count},
        )

class NoSubjectsForCriteriaError(SchedulerError):
    kind = "no_subjects_for_criteria"

    def __init__(self, criteria: dict | None = None):
        criteria = criteria or {}
        if criteria:
            label = " - ".join(str(value) for value in criteria.values())
            message = f"No subjects found for {label}"
        else:
            message = "No subjects supplied for timetable generation"
        super().__init__(message, details={"criteria": criteria})

class LabUnschedulableError(SchedulerError):
    kind = "lab_unschedulable"

    def __init__(self, subject_id: str, subject_name: str, duration: int):
        super().__init__(
            f'Cannot schedule {duration}-hour lab for subject "{subject_name}". '
            "Not enough consecutive slots or room conflicts.",
            details={"subject_id": subject_id, "subject": subject_name, "duration": duration},
        )

class LectureUnschedulableError(SchedulerError):
    kind = "lecture_unschedulable"

    def __init__(self, subject_id: str, subject_name: str, lecture_number: int, attempts: int):
        super().__init__(
            f'Cannot schedule lecture {lecture_number} for subject "{subject_name}" after {attempts} attempts. '
            "Consider adjusting lab schedules or time slots.",
            details={
                "subject_id": subject_id,
                "subject": subject_name,
                "lecture_number": lecture_number,
                "attempts": attempts,
            },
        )

class IncompleteScheduleError(SchedulerError):
    """Counters disagree with requirements after both passes reported success."""
    kind = "incomplete_schedule"

    def __init__(
        self,
        subject_id: str,
        subject_name: str,
        *,
        required_lectures: int,
        required_labs: int,
        scheduled_lectures: int,
        scheduled_labs: int,
    ):
        super().__init__(
            f'Incomplete scheduling for "{subject_name}". '
            f"Required: {required_lectures} lectures, {required_labs} labs. "
            f"Scheduled: {scheduled_lectures} lectures, {scheduled_labs} labs.",
            details={
                "subject_id": subject_id,
                "subject": subject_name,
                "required_lectures": required_lectures,
                "required_labs": required_labs,
                "scheduled_lectures": scheduled_lectures,
                "scheduled_labs": scheduled_labs,
            },
            status_code=500,
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
