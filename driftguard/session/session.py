import threading
from dataclasses import dataclass

from driftguard.analysis.models import DriftResult, MLModel, Patch
from driftguard.ingestion.models import UploadMethod
from driftguard.session.exceptions import SessionClosedError
from driftguard.session.progress import ProgressSnapshot, compute_overall_progress
from driftguard.session.projector import ResultProjection, project
from driftguard.session.registry import UploadedFileRegistry


@dataclass(frozen=True)
class SessionResult:
    """The latest completed result set, always replaced as a whole."""

    processed_model: MLModel | None = None
    detected_drift: DriftResult | None = None
    synthesized_patch: Patch | None = None


class UploadSession:
    """State of one upload workflow, from start to teardown.

    Owned by a single orchestrator and passed explicitly to whatever needs it.
    """

    def __init__(self, registry: UploadedFileRegistry | None = None) -> None:
        self.registry = registry if registry is not None else UploadedFileRegistry()
        self.selected_method: UploadMethod | None = None
        self._result = SessionResult()
        self._active_model: MLModel | None = None
        self._error: str | None = None
        self._success_message: str | None = None
        self._progress = ProgressSnapshot()
        self._lock = threading.Lock()
        self._closed = False
        self.registry.subscribe(self._recompute_progress)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def result(self) -> SessionResult:
        return self._result

    @property
    def active_model(self) -> MLModel | None:
        """The model datasets are compared against: the latest one registered."""
        return self._active_model

    @property
    def progress(self) -> ProgressSnapshot:
        return self._progress

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def success_message(self) -> str | None:
        return self._success_message

    def projection(self) -> ResultProjection:
        return project(self._result)

    def ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Upload session has been torn down")

    def record_model_registered(self, model: MLModel) -> None:
        """Make model active and start a fresh result set for it."""
        with self._lock:
            self._active_model = model
            self._result = SessionResult(processed_model=model)

    def record_drift_report(
        self,
        model: MLModel,
        drift: DriftResult,
        patch: Patch | None,
    ) -> None:
        with self._lock:
            self._result = SessionResult(
                processed_model=model,
                detected_drift=drift,
                synthesized_patch=patch,
            )

    def set_error(self, message: str) -> None:
        with self._lock:
            self._error = message
            self._success_message = None

    def set_success(self, message: str) -> None:
        with self._lock:
            self._success_message = message
            self._error = None

    def dismiss_messages(self) -> None:
        with self._lock:
            self._error = None
            self._success_message = None

    def teardown(self) -> None:
        """Drop every file record and result. The session cannot be reused."""
        with self._lock:
            self._closed = True
            self.selected_method = None
            self._result = SessionResult()
            self._active_model = None
            self._error = None
            self._success_message = None
        self.registry.clear()

    def _recompute_progress(self) -> None:
        self._progress = compute_overall_progress(self.registry.list())
