class TransferError(Exception):
    """Raised when a file cannot be transferred (network, permission, unreadable)."""
