class IngestionError(Exception):
    """Raised when a channel cannot produce file references."""


class InvalidUrlError(IngestionError):
    """Raised when a URL cannot be imported."""


class UnknownCloudProviderError(IngestionError):
    """Raised when a cloud provider name is not recognized."""
