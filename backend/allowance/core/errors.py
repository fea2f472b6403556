"""Error taxonomy for tracker operations.

Every error carries a short snake_case ``code`` that is safe to hand back to
a client as-is (``date_invalid``, ``log_date_taken``, ...).
"""


class TrackerError(Exception):
    code = "tracker_error"

    def __init__(self, code: str | None = None, message: str | None = None):
        if code is not None:
            self.code = code
        super().__init__(message or self.code)


class ValidationError(TrackerError):
    """Bad or missing user input. State is left untouched."""

    code = "invalid_input"


class NotFoundError(TrackerError):
    """The referenced entity does not exist in the tracker."""

    code = "not_found"


class PersistenceError(TrackerError):
    """Loading or saving the tracker document failed.

    The in-memory aggregate stays authoritative; the change is applied
    locally but not yet durable.
    """

    code = "persistence_failed"
