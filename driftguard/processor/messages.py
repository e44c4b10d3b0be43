"""User-facing summaries shown as the session's success message."""

from driftguard.analysis.models import DriftResult, MLModel, Patch


def model_registered_message(model: MLModel) -> str:
    return "\n".join(
        [
            "Model registered successfully!",
            "",
            f"Model: {model.name}",
            f"Version: {model.version}",
            f"Input features: {len(model.input_features)}",
            f"Output labels: {len(model.output_labels)}",
            "",
            "Next: upload a dataset (.csv, .json, .txt) to run drift detection.",
        ]
    )


def drift_report_message(
    model: MLModel,
    drift: DriftResult,
    patch: Patch | None,
    data_points: int,
) -> str:
    lines = [
        "Processing complete!",
        "",
        f"Model: {model.name}",
        f"Data points: {data_points}",
        "",
    ]
    if drift.is_drift_detected:
        lines += [
            "Drift detected!",
            f"  Score: {drift.drift_score:.3f}",
            f"  Type: {drift.drift_type.value}",
        ]
        if patch is not None:
            safety = patch.validation_result.safety_score if patch.validation_result else 0.0
            lines += [
                "",
                "Patch synthesized!",
                f"  Type: {patch.patch_type.value}",
                f"  Safety: {safety:.2f}",
            ]
        else:
            lines += ["", "No corrective patch available."]
    else:
        lines += ["No drift detected", "  Model is performing well!"]
    return "\n".join(lines)
