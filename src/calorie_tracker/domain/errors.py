"""Error taxonomy shared by services and the HTTP layer."""


class CalorieTrackerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, object] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidProfile(CalorieTrackerError):
    """Profile attributes are missing or non-positive."""

    status_code = 422

    def __init__(self, message: str = "Fill all fields", field: str | None = None):
        super().__init__(message, {"field": field} if field else None)


class InvalidGoal(CalorieTrackerError):
    """Goal does not describe a weight loss with a positive daily deficit."""

    status_code = 422

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, {"field": field} if field else None)


class EstimationFailure(CalorieTrackerError):
    """Estimation service output could not be turned into a log entry."""

    status_code = 502

    def __init__(self, message: str, text: str | None = None):
        super().__init__(message, {"text": text} if text is not None else None)


class DataAccessFailure(CalorieTrackerError):
    """Document store read or write failed."""

    status_code = 503

    def __init__(self, operation: str, cause: Exception | None = None):
        message = f"Data store {operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, {"operation": operation})


class EntryNotFound(CalorieTrackerError):
    """Requested log entry does not exist for the user."""

    status_code = 404

    def __init__(self, entry_id: object):
        super().__init__(f"Entry '{entry_id}' not found", {"id": str(entry_id)})
