import pytest

from driftguard.analysis.models import MLModel
from driftguard.ingestion.models import FileReference, UploadMethod
from driftguard.processor.models import FileStatus
from driftguard.session.exceptions import SessionClosedError
from driftguard.session.projector import Empty, FullReport, ModelRegistered
from driftguard.session.session import UploadSession


def _ref(name: str) -> FileReference:
    return FileReference(name=name, location=f"/data/{name}", source=UploadMethod.LOCAL_FILE)


class TestResults:
    def test_starts_empty(self) -> None:
        session = UploadSession()
        assert session.projection() == Empty()
        assert session.active_model is None

    def test_model_registration_starts_fresh_result(self, model: MLModel, services) -> None:
        session = UploadSession()
        drift = services.drift_detector.analyze.return_value
        session.record_model_registered(model)
        session.record_drift_report(model, drift, None)

        session.record_model_registered(model)

        assert session.projection() == ModelRegistered(model=model)
        assert session.active_model == model

    def test_drift_report_keeps_active_model(self, model: MLModel, services) -> None:
        session = UploadSession()
        newer = MLModel(
            id="model-2",
            name="newer",
            version="2.0.0",
            input_features=model.input_features,
            output_labels=model.output_labels,
        )
        session.record_model_registered(newer)

        session.record_drift_report(model, services.drift_detector.analyze.return_value, None)

        assert session.active_model == newer
        projection = session.projection()
        assert isinstance(projection, FullReport)
        assert projection.model == model


class TestMessages:
    def test_error_replaces_success(self) -> None:
        session = UploadSession()
        session.set_success("done")
        session.set_error("boom")
        assert session.error == "boom"
        assert session.success_message is None

    def test_success_replaces_error(self) -> None:
        session = UploadSession()
        session.set_error("boom")
        session.set_success("done")
        assert session.error is None
        assert session.success_message == "done"

    def test_dismiss_leaves_files_alone(self) -> None:
        session = UploadSession()
        file_id = session.registry.register(_ref("model.tflite"))
        session.set_error("boom")

        session.dismiss_messages()

        assert session.error is None
        assert session.success_message is None
        assert session.registry.get(file_id).status is FileStatus.QUEUED


class TestProgress:
    def test_recomputed_on_registry_mutation(self) -> None:
        session = UploadSession()
        file_id = session.registry.register(_ref("data.csv"))
        assert session.progress.value == 0.0

        session.registry.update_status(file_id, FileStatus.UPLOADING)
        assert 0.0 < session.progress.value < 1.0

        session.registry.update_status(file_id, FileStatus.FAILED)
        assert session.progress.value == 1.0


class TestTeardown:
    def test_clears_everything(self, model: MLModel) -> None:
        session = UploadSession()
        session.selected_method = UploadMethod.URL_IMPORT
        session.registry.register(_ref("model.tflite"))
        session.record_model_registered(model)
        session.set_success("done")

        session.teardown()

        assert session.closed is True
        assert session.selected_method is None
        assert session.registry.list() == []
        assert session.projection() == Empty()
        assert session.active_model is None
        assert session.success_message is None
        assert session.progress.value == 0.0

    def test_closed_session_rejects_use(self) -> None:
        session = UploadSession()
        session.teardown()
        with pytest.raises(SessionClosedError):
            session.ensure_open()
