"""
Reconciliation of a fresh analysis against prior artifacts.

Decides between creating a full artifact set and updating an existing one,
then generates every needed artifact concurrently. Nothing is written here:
the caller persists the returned artifacts only once the whole batch
succeeded.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from pagegen.models.analysis import PageAnalysis
from pagegen.models.artifacts import (
    Artifact,
    ArtifactKind,
    ExistingArtifact,
    GenerationRequest,
    ReconcileAction,
    ReconcileResult,
)
from pagegen.services.artifact_registry import ArtifactRegistry, compute_delta
from pagegen.services.artifact_store import ArtifactStore
from pagegen.services.artifact_synthesizer import ArtifactSynthesizer
from pagegen.services.surface_analyzer import derive_page_actions, generate_scenarios

logger = logging.getLogger(__name__)

GenerationJob = Tuple[ArtifactKind, GenerationRequest, str]


def _workflows(analysis: PageAnalysis) -> list:
    return [workflow.model_dump() for workflow in analysis.workflows]


def build_page_object_request(analysis: PageAnalysis, class_name: str) -> GenerationRequest:
    return GenerationRequest(
        class_name=class_name,
        url=analysis.url,
        elements=",".join(analysis.element_names),
        actions=derive_page_actions(analysis.controls),
        platform=",".join(analysis.platform),
        business_logic=",".join(tag.value for tag in analysis.business_logic),
    )


def build_updated_page_object_request(analysis: PageAnalysis, existing: ExistingArtifact) -> GenerationRequest:
    return GenerationRequest(
        class_name=existing.name,
        url=analysis.url,
        elements=",".join(analysis.element_names),
        actions=derive_page_actions(analysis.controls),
        existing_content=existing.content,
    )


def build_test_request(analysis: PageAnalysis, created: bool) -> GenerationRequest:
    return GenerationRequest(
        feature_description=(
            f"Complete testing of {analysis.title}" if created else f"Testing {analysis.title}"
        ),
        url=analysis.url,
        elements=",".join(analysis.element_names),
        workflows=_workflows(analysis),
        platform=",".join(analysis.platform) if created else None,
    )


def build_feature_request(analysis: PageAnalysis, created: bool) -> GenerationRequest:
    return GenerationRequest(
        feature=analysis.title,
        workflows=_workflows(analysis),
        user_story=(
            f"As a user, I want to interact with {analysis.title}" if created else None
        ),
        scenarios=generate_scenarios(analysis.workflows),
    )


def build_steps_request(analysis: PageAnalysis) -> GenerationRequest:
    return GenerationRequest(
        feature=analysis.title,
        workflows=_workflows(analysis),
        scenarios=generate_scenarios(analysis.workflows),
    )


class ArtifactReconciler:
    """Plans and generates the artifact set for an analysis."""

    def __init__(
        self,
        registry: ArtifactRegistry,
        synthesizer: ArtifactSynthesizer,
        store: ArtifactStore
    ):
        self.registry = registry
        self.synthesizer = synthesizer
        self.store = store

    def find_existing(self, analysis: PageAnalysis) -> Optional[ExistingArtifact]:
        return self.registry.find_existing(analysis)

    async def reconcile(self, analysis: PageAnalysis) -> ReconcileResult:
        """
        Create or update the artifacts for an analysis.

        Raises:
            ArtifactGenerationError: From the first failed generation; no
                artifacts are returned for the batch
        """
        existing = self.find_existing(analysis)
        if existing is None:
            return await self.create(analysis)
        return await self.update(analysis, existing)

    async def create(self, analysis: PageAnalysis) -> ReconcileResult:
        """Generate all four kinds fresh, named after the analysis."""
        name = analysis.page_name
        logger.info(f"Creating new artifacts for {analysis.title or analysis.url} as {name}")

        jobs: List[GenerationJob] = [
            (ArtifactKind.PAGE_OBJECT, build_page_object_request(analysis, name),
             self.store.target_path(ArtifactKind.PAGE_OBJECT, name)),
            (ArtifactKind.TEST, build_test_request(analysis, created=True),
             self.store.target_path(ArtifactKind.TEST, name)),
            (ArtifactKind.FEATURE, build_feature_request(analysis, created=True),
             self.store.target_path(ArtifactKind.FEATURE, name)),
            (ArtifactKind.STEPS, build_steps_request(analysis),
             self.store.target_path(ArtifactKind.STEPS, name)),
        ]
        artifacts = await self._generate_all(jobs)

        return ReconcileResult(
            action=ReconcileAction.CREATE,
            page_name=name,
            artifacts=artifacts,
        )

    async def update(self, analysis: PageAnalysis, existing: ExistingArtifact) -> ReconcileResult:
        """
        Extend an existing artifact set.

        The page object is regenerated with the full element set, at its
        existing path, only when some control names are new to it. Tests,
        features and steps are always regenerated under the existing name.
        """
        delta = compute_delta(existing, analysis)
        name = existing.name
        logger.info(f"Updating existing page: {name} ({len(delta)} new elements)")

        jobs: List[GenerationJob] = []
        if delta:
            jobs.append((
                ArtifactKind.PAGE_OBJECT,
                build_updated_page_object_request(analysis, existing),
                existing.path,
            ))
        jobs.extend([
            (ArtifactKind.TEST, build_test_request(analysis, created=False),
             self.store.target_path(ArtifactKind.TEST, name)),
            (ArtifactKind.FEATURE, build_feature_request(analysis, created=False),
             self.store.target_path(ArtifactKind.FEATURE, name)),
            (ArtifactKind.STEPS, build_steps_request(analysis),
             self.store.target_path(ArtifactKind.STEPS, name)),
        ])
        artifacts = await self._generate_all(jobs)

        return ReconcileResult(
            action=ReconcileAction.UPDATE,
            page_name=name,
            artifacts=artifacts,
            delta=delta,
            existing_path=existing.path,
        )

    async def _generate_all(self, jobs: List[GenerationJob]) -> List[Artifact]:
        """Run generations concurrently; the first failure cancels the rest."""
        tasks = [
            asyncio.ensure_future(self.synthesizer.synthesize(kind, request, path))
            for kind, request, path in jobs
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
