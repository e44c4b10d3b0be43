from pathlib import Path

import pytest

from driftguard.database.repositories.model_repository import ModelRepository, PostgresModelRegistry
from driftguard.parsing.models import ParsedModel


def _parsed(name: str) -> ParsedModel:
    return ParsedModel(
        name=name,
        version="1.0.0",
        framework="ONNX",
        format="onnx",
        input_features=("feature_0", "feature_1"),
        output_labels=("class_0", "class_1"),
        path=Path(f"/tmp/{name}.onnx"),
        size_bytes=42,
    )


@pytest.mark.integration
class TestModelRepository:
    def test_insert_active_round_trip(self, db_conn, clean_models: list[str]) -> None:
        record = ModelRepository().insert_active(_parsed("first"))
        clean_models.append(record.id)

        with db_conn.cursor() as cur:
            cur.execute(
                "SELECT input_features, is_active FROM ml_models WHERE id = %s::uuid",
                (record.id,),
            )
            features, is_active = cur.fetchone()
        assert features == ["feature_0", "feature_1"]
        assert is_active is True
        assert record.created_at is not None

    def test_only_newest_model_is_active(self, db_conn, clean_models: list[str]) -> None:
        repo = ModelRepository()
        first = repo.insert_active(_parsed("first"))
        second = repo.insert_active(_parsed("second"))
        clean_models.extend([first.id, second.id])

        with db_conn.cursor() as cur:
            cur.execute(
                "SELECT id::text, is_active FROM ml_models WHERE id = ANY(%s::uuid[])",
                ([first.id, second.id],),
            )
            rows = dict(cur.fetchall())
        assert rows == {first.id: False, second.id: True}


@pytest.mark.integration
class TestPostgresModelRegistry:
    @pytest.mark.asyncio
    async def test_register_returns_active_model(self, db_conn, clean_models: list[str]) -> None:
        registry = PostgresModelRegistry(ModelRepository())

        model = await registry.register(_parsed("served"))
        clean_models.append(model.id)

        assert model.is_active is True
        assert model.input_features == ("feature_0", "feature_1")
        assert model.framework == "ONNX"
