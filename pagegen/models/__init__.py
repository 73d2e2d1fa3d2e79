"""Data models for the page generation agent."""

from pagegen.models.analysis import (
    BusinessLogicTag,
    ControlCategory,
    ControlDescriptor,
    PageAnalysis,
    Workflow,
)
from pagegen.models.artifacts import (
    Artifact,
    ArtifactKind,
    BatchResult,
    ExistingArtifact,
    GenerationRequest,
    ReconcileAction,
    ReconcileResult,
    SurfaceResult,
)
from pagegen.models.ai_config import AIConfig

__all__ = [
    'AIConfig',
    'Artifact',
    'ArtifactKind',
    'BatchResult',
    'BusinessLogicTag',
    'ControlCategory',
    'ControlDescriptor',
    'ExistingArtifact',
    'GenerationRequest',
    'PageAnalysis',
    'ReconcileAction',
    'ReconcileResult',
    'SurfaceResult',
    'Workflow',
]
