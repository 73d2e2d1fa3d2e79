"""Services for the page generation agent."""

from pagegen.services.artifact_registry import ArtifactRegistry
from pagegen.services.artifact_store import ArtifactStore
from pagegen.services.artifact_synthesizer import (
    ArtifactGenerationError,
    ArtifactSynthesizer,
    ArtifactValidationError,
)
from pagegen.services.browser_manager import BrowserManager
from pagegen.services.locator_resolver import (
    ElementNotFoundError,
    LocatorKind,
    LocatorResolver,
    SmartInteractor,
)
from pagegen.services.orchestrator import AnalysisOrchestrator, SurfaceAnalysisError
from pagegen.services.reconciler import ArtifactReconciler
from pagegen.services.surface_analyzer import SurfaceAnalyzer

__all__ = [
    "AnalysisOrchestrator",
    "ArtifactGenerationError",
    "ArtifactReconciler",
    "ArtifactRegistry",
    "ArtifactStore",
    "ArtifactSynthesizer",
    "ArtifactValidationError",
    "BrowserManager",
    "ElementNotFoundError",
    "LocatorKind",
    "LocatorResolver",
    "SmartInteractor",
    "SurfaceAnalysisError",
    "SurfaceAnalyzer",
]
