"""
Application-layer exceptions.

These exceptions are used across application and infrastructure layers.
"""


class ActiveWorkoutError(Exception):
    """Base class for active workout failures."""

    pass


class NoActiveUserError(ActiveWorkoutError):
    """An operation that needs a signed-in user was called without one."""

    def __init__(self, message: str = "No signed-in user available"):
        super().__init__(message)


class WorkoutUnavailableError(ActiveWorkoutError):
    """A workout session could not be created or loaded remotely.

    Raised by start operations; the caller decides how to surface it.
    """

    pass


class SessionPersistenceError(Exception):
    """The persistence backend rejected a session write.

    Raised by repository adapters so callers can tell a rejected write
    from an empty result.
    """

    pass
