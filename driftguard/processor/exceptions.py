from enum import Enum


class ErrorKind(str, Enum):
    TRANSFER_FAILURE = "TransferFailure"
    FORMAT_UNRECOGNIZED = "FormatUnrecognized"
    SCHEMA_MISMATCH = "SchemaMismatch"
    NO_ACTIVE_MODEL = "NoActiveModel"
    ANALYSIS_SERVICE_FAILURE = "AnalysisServiceFailure"


class PipelineError(Exception):
    """Base exception for everything that resolves a single file to FAILED."""

    kind: ErrorKind


class TransferFailureError(PipelineError):
    """Raised when a file's bytes could not be transferred."""

    kind = ErrorKind.TRANSFER_FAILURE


class FormatUnrecognizedError(PipelineError):
    """Raised when a file's format is unsupported or its content does not match it."""

    kind = ErrorKind.FORMAT_UNRECOGNIZED


class SchemaMismatchError(PipelineError):
    """Raised when a dataset does not fit the active model's input features."""

    kind = ErrorKind.SCHEMA_MISMATCH


class NoActiveModelError(PipelineError):
    """Raised when a dataset arrives before any model is registered."""

    kind = ErrorKind.NO_ACTIVE_MODEL


class AnalysisServiceFailureError(PipelineError):
    """Raised when registration, drift, synthesis or validation calls fail."""

    kind = ErrorKind.ANALYSIS_SERVICE_FAILURE
