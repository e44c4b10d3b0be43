from driftguard.analysis.models import DriftResult, MLModel, Patch
from driftguard.session.projector import Empty, FullReport, ModelRegistered, project
from driftguard.session.session import SessionResult


class TestProject:
    def test_empty_without_model(self) -> None:
        assert project(SessionResult()) == Empty()

    def test_model_registered_without_drift(self, model: MLModel) -> None:
        assert project(SessionResult(processed_model=model)) == ModelRegistered(model=model)

    def test_full_report_with_patch(self, model: MLModel, services) -> None:
        drift: DriftResult = services.drift_detector.analyze.return_value
        patch: Patch = services.patch_synthesizer.synthesize.return_value

        projection = project(
            SessionResult(processed_model=model, detected_drift=drift, synthesized_patch=patch)
        )

        assert projection == FullReport(model=model, drift_result=drift, patch=patch)

    def test_full_report_without_patch(self, model: MLModel, services) -> None:
        drift: DriftResult = services.drift_detector.analyze.return_value

        projection = project(SessionResult(processed_model=model, detected_drift=drift))

        assert isinstance(projection, FullReport)
        assert projection.patch is None

    def test_drift_without_model_is_empty(self, services) -> None:
        drift: DriftResult = services.drift_detector.analyze.return_value
        assert project(SessionResult(detected_drift=drift)) == Empty()
