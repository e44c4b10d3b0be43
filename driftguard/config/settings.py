from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", protected_namespaces=())

    app_env: str = "dev"
    log_level: str = "INFO"

    max_concurrent_transfers: int = 3
    transfer_chunk_size_bytes: int = 64 * 1024
    staging_dir: Path = Path("/tmp/driftguard/staging")
    url_import_timeout_seconds: int = 60

    cloud_storage_provider: str = "example"

    analysis_provider: str = "example"
    analysis_base_url: str = ""
    analysis_timeout_seconds: int = 30

    model_registry_backend: str = "memory"
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "driftguard"
    db_username: str = "driftguard"
    db_password: str = "secret"
    db_pool_max_size: int = 5

    patch_synthesis_min_drift_score: float = 0.3
    default_model_input_features: int = 4
