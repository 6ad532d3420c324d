"""Error types raised by collaborators and handled by services."""


class SunRayError(Exception):
    """Base class for recoverable exposure-tracking errors."""


class PermissionDeniedError(SunRayError):
    """Position or health-record authorization was refused."""


class DataUnavailableError(SunRayError):
    """Weather or geocode data could not be obtained."""


class PersistenceError(SunRayError):
    """Settings or history could not be read or written."""


class HealthStoreWriteError(SunRayError):
    """An exposure could not be written to the health-record store."""
