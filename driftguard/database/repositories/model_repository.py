import asyncio
import uuid

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from driftguard.analysis.base import BaseModelRegistry
from driftguard.analysis.exceptions import AnalysisServiceError
from driftguard.analysis.models import MLModel
from driftguard.database.connection import get_connection
from driftguard.database.models import ModelRecord
from driftguard.parsing.models import ParsedModel


class ModelRepository:
    """Database operations for the ml_models table."""

    def insert_active(self, parsed: ParsedModel) -> ModelRecord:
        """Insert a model as the only active one.

        The previously active model is deactivated in the same transaction.
        """
        model_id = str(uuid.uuid4())
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("UPDATE ml_models SET is_active = FALSE WHERE is_active")
                cur.execute(
                    """
                    INSERT INTO ml_models
                    (id, name, version, framework, input_features, output_labels, is_active)
                    VALUES (%s::uuid, %s, %s, %s, %s, %s, TRUE)
                    RETURNING created_at
                    """,
                    (
                        model_id,
                        parsed.name,
                        parsed.version,
                        parsed.framework,
                        Jsonb(list(parsed.input_features)),
                        Jsonb(list(parsed.output_labels)),
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        return ModelRecord(
            id=model_id,
            name=parsed.name,
            version=parsed.version,
            framework=parsed.framework,
            input_features=list(parsed.input_features),
            output_labels=list(parsed.output_labels),
            is_active=True,
            created_at=row["created_at"] if row else None,
        )


class PostgresModelRegistry(BaseModelRegistry):
    """Model registry backed by the ml_models table."""

    def __init__(self, repository: ModelRepository) -> None:
        self._repository = repository

    async def register(self, parsed_model: ParsedModel) -> MLModel:
        try:
            record = await asyncio.to_thread(self._repository.insert_active, parsed_model)
        except Exception as exc:
            raise AnalysisServiceError(f"Model registration failed: {exc}") from exc
        return MLModel(
            id=record.id,
            name=record.name,
            version=record.version,
            input_features=tuple(record.input_features),
            output_labels=tuple(record.output_labels),
            framework=record.framework,
            is_active=record.is_active,
        )
