from driftguard.analysis.base import AnalysisServices, BaseModelRegistry
from driftguard.analysis.example_adapters import (
    ExampleDriftDetector,
    ExamplePatchSynthesizer,
    ExamplePatchValidator,
    InMemoryModelRegistry,
)
from driftguard.analysis.http_adapters import (
    HttpDriftDetector,
    HttpModelRegistry,
    HttpPatchSynthesizer,
    HttpPatchValidator,
)
from driftguard.analysis.http_client import AnalysisHttpClient
from driftguard.config.settings import Settings
from driftguard.database.repositories.model_repository import ModelRepository, PostgresModelRegistry


class AnalysisServicesFactory:
    """Creates the configured analysis collaborators."""

    PROVIDERS = ("example", "http")
    REGISTRY_BACKENDS = ("memory", "postgres", "http")

    @classmethod
    def create(cls, settings: Settings) -> AnalysisServices:
        provider = settings.analysis_provider.lower()
        if provider == "example":
            services = AnalysisServices(
                model_registry=InMemoryModelRegistry(),
                drift_detector=ExampleDriftDetector(),
                patch_synthesizer=ExamplePatchSynthesizer(),
                patch_validator=ExamplePatchValidator(),
            )
        elif provider == "http":
            client = cls._http_client(settings)
            services = AnalysisServices(
                model_registry=HttpModelRegistry(client),
                drift_detector=HttpDriftDetector(client),
                patch_synthesizer=HttpPatchSynthesizer(client),
                patch_validator=HttpPatchValidator(client),
            )
        else:
            raise ValueError(
                f"Unknown analysis provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        return AnalysisServices(
            model_registry=cls._model_registry(settings, services.model_registry),
            drift_detector=services.drift_detector,
            patch_synthesizer=services.patch_synthesizer,
            patch_validator=services.patch_validator,
        )

    @classmethod
    def _model_registry(
        cls,
        settings: Settings,
        provider_registry: BaseModelRegistry,
    ) -> BaseModelRegistry:
        backend = settings.model_registry_backend.lower()
        if backend == "memory":
            if isinstance(provider_registry, InMemoryModelRegistry):
                return provider_registry
            return InMemoryModelRegistry()
        if backend == "postgres":
            return PostgresModelRegistry(ModelRepository())
        if backend == "http":
            if isinstance(provider_registry, HttpModelRegistry):
                return provider_registry
            return HttpModelRegistry(cls._http_client(settings))
        raise ValueError(
            f"Unknown model registry backend '{backend}'. "
            f"Choose from: {list(cls.REGISTRY_BACKENDS)}"
        )

    @classmethod
    def _http_client(cls, settings: Settings) -> AnalysisHttpClient:
        return AnalysisHttpClient(
            base_url=settings.analysis_base_url.strip(),
            timeout_seconds=settings.analysis_timeout_seconds,
        )
