"""
Analysis orchestration: analyze a surface, reconcile it against prior
artifacts, persist the result.

One orchestrator owns one artifact registry, built when the orchestrator is
constructed and never refreshed during its lifetime.
"""

import logging
from typing import List, Optional

from pagegen.models.artifacts import (
    Artifact,
    ArtifactKind,
    BatchResult,
    GenerationRequest,
    SurfaceResult,
)
from pagegen.services.ai.llm_provider import LLMProvider
from pagegen.services.ai.provider_factory import create_llm_provider
from pagegen.services.artifact_registry import ArtifactRegistry
from pagegen.services.artifact_store import ArtifactStore
from pagegen.services.artifact_synthesizer import ArtifactSynthesizer
from pagegen.services.browser_manager import BrowserManager
from pagegen.services.reconciler import ArtifactReconciler
from pagegen.services.surface_analyzer import SurfaceAnalyzer
from pagegen.utils.config import Settings

logger = logging.getLogger(__name__)


class SurfaceAnalysisError(Exception):
    """Single failure report for one surface."""

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"Analysis of {url} failed: {cause}")


class AnalysisOrchestrator:
    """Coordinates analysis, reconciliation and persistence."""

    def __init__(
        self,
        settings: Settings,
        browser: BrowserManager,
        analyzer: SurfaceAnalyzer,
        synthesizer: ArtifactSynthesizer,
        reconciler: ArtifactReconciler,
        store: ArtifactStore,
    ):
        self.settings = settings
        self.browser = browser
        self.analyzer = analyzer
        self.synthesizer = synthesizer
        self.reconciler = reconciler
        self.store = store

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: Optional[LLMProvider] = None,
        browser: Optional[BrowserManager] = None,
    ) -> "AnalysisOrchestrator":
        """Wire every collaborator from settings."""
        store = ArtifactStore(settings)
        registry = ArtifactRegistry.scan(store, settings.REGISTRY_EXCLUDE_MARKER)
        synthesizer = ArtifactSynthesizer(provider or create_llm_provider(settings.ai_config()))
        return cls(
            settings=settings,
            browser=browser or BrowserManager(settings),
            analyzer=SurfaceAnalyzer(),
            synthesizer=synthesizer,
            reconciler=ArtifactReconciler(registry, synthesizer, store),
            store=store,
        )

    @property
    def registry(self) -> ArtifactRegistry:
        return self.reconciler.registry

    async def analyze(self, url: str) -> SurfaceResult:
        """
        Analyze one surface and persist its artifacts.

        The browser session is released before generation starts, so every
        failure is reported after the session is gone.

        Raises:
            SurfaceAnalysisError: Wrapping the first extraction, generation or
                persistence fault
        """
        logger.info(f"Analyzing {url}...")
        try:
            async with self.browser.open_surface(url) as page:
                analysis = await self.analyzer.analyze(page)

            result = await self.reconciler.reconcile(analysis)
            written = self.store.save_all(result.artifacts)
        except Exception as e:
            logger.error(f"Analysis of {url} failed: {e}")
            raise SurfaceAnalysisError(url, e) from e

        logger.info(f"{result.action.value.capitalize()}d {result.page_name}: {len(written)} artifacts written")
        return SurfaceResult(
            url=url,
            action=result.action,
            page_name=result.page_name,
            written=written,
            delta=result.delta,
            analysis=analysis,
        )

    async def batch(self, urls: List[str], continue_on_error: Optional[bool] = None) -> BatchResult:
        """
        Analyze surfaces one after another.

        By default the first failure aborts the batch; with
        ``continue_on_error`` the failure is recorded and the next surface
        is analyzed.
        """
        if continue_on_error is None:
            continue_on_error = self.settings.BATCH_CONTINUE_ON_ERROR

        logger.info(f"Analyzing {len(urls)} URLs...")
        batch = BatchResult()
        for url in urls:
            try:
                batch.results.append(await self.analyze(url))
            except SurfaceAnalysisError as e:
                if not continue_on_error:
                    raise
                batch.results.append(SurfaceResult(url=url, success=False, error=str(e)))

        logger.info(f"Batch finished: {len(batch.results) - len(batch.failed)}/{len(urls)} succeeded")
        return batch

    async def generate(
        self,
        kind: ArtifactKind,
        request: GenerationRequest,
        output: Optional[str] = None
    ) -> Artifact:
        """Generate a single artifact, writing it when an output path is given."""
        artifact = await self.synthesizer.synthesize(kind, request, output)
        if output:
            self.store.save(artifact)
        return artifact

    async def model_available(self) -> bool:
        """Whether the text-generation backend answers right now."""
        provider = self.synthesizer.provider
        available = await provider.is_available()
        if not available:
            logger.warning(f"Text generation model {provider.model_name} is not reachable")
        return available

    async def close(self) -> None:
        await self.browser.close()
        await self.synthesizer.provider.close()
