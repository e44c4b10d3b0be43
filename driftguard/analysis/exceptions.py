class AnalysisServiceError(Exception):
    """Raised when an external analysis service call fails."""


class AnalysisNetworkError(AnalysisServiceError):
    """Raised when the service could not be reached."""


class AnalysisPayloadError(AnalysisServiceError):
    """Raised when a service response does not match the expected shape."""
