class RegistryError(Exception):
    """Base exception for uploaded-file registry errors."""


class FileNotFoundInRegistryError(RegistryError):
    """Raised when a file id is not (or no longer) registered."""


class FileInFlightError(RegistryError):
    """Raised when removing a file that is uploading or processing."""


class InvalidTransitionError(RegistryError):
    """Raised when a status change would break the lifecycle order."""


class SessionClosedError(Exception):
    """Raised when using an upload session after teardown."""
