"""Models for generated artifacts and reconciliation outcomes."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from pagegen.models.analysis import PageAnalysis


class ArtifactKind(str, Enum):
    """The four generated output types."""
    PAGE_OBJECT = "page-object"
    TEST = "test"
    FEATURE = "feature"
    STEPS = "steps"


class ReconcileAction(str, Enum):
    """Outcome of matching an analysis against prior artifacts."""
    CREATE = "create"
    UPDATE = "update"


class GenerationRequest(BaseModel):
    """Named inputs handed to the text-generation collaborator.

    List-valued inputs that the generated code consumes as names
    (elements, actions, platform, business logic, scenarios) travel as
    comma-joined strings; workflows travel as structured objects.
    """
    class_name: Optional[str] = None
    url: Optional[str] = None
    elements: Optional[str] = None
    actions: Optional[str] = None
    platform: Optional[str] = None
    business_logic: Optional[str] = None
    feature: Optional[str] = None
    feature_description: Optional[str] = None
    user_story: Optional[str] = None
    workflows: Optional[List[Dict[str, Any]]] = None
    scenarios: Optional[str] = None
    existing_content: Optional[str] = None

    def to_prompt_input(self) -> str:
        """JSON form embedded in the generation instruction."""
        return self.model_dump_json(exclude_none=True)


class Artifact(BaseModel):
    """A generated, validated text artifact."""
    kind: ArtifactKind = Field(..., description="Artifact kind")
    content: str = Field(..., description="Generated text")
    path: Optional[str] = Field(None, description="Target path relative to the output root")
    created_at: datetime = Field(..., description="Creation time (UTC)")
    content_hash: str = Field(..., min_length=16, max_length=16, description="Truncated SHA-256")

    @property
    def timestamp(self) -> str:
        return self.created_at.isoformat()


class ExistingArtifact(BaseModel):
    """A previously generated page artifact found on disk."""
    name: str = Field(..., description="Artifact (class) name, file stem")
    path: str = Field(..., description="Path relative to the output root")
    content: str = Field(default="", description="Stored content")


class ReconcileResult(BaseModel):
    """Artifacts to persist for one analysis."""
    action: ReconcileAction
    page_name: str = Field(..., description="Name the artifacts are scoped under")
    artifacts: List[Artifact] = Field(default_factory=list)
    delta: List[str] = Field(
        default_factory=list,
        description="Control names missing from the existing page artifact"
    )
    existing_path: Optional[str] = None

    def artifact(self, kind: ArtifactKind) -> Optional[Artifact]:
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None


class SurfaceResult(BaseModel):
    """Outcome of analyzing and persisting one surface."""
    url: str
    success: bool = True
    action: Optional[ReconcileAction] = None
    page_name: Optional[str] = None
    written: List[str] = Field(default_factory=list, description="Persisted paths")
    delta: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    analysis: Optional[PageAnalysis] = None


class BatchResult(BaseModel):
    """Outcome of a sequential multi-surface run."""
    results: List[SurfaceResult] = Field(default_factory=list)

    @property
    def failed(self) -> List[SurfaceResult]:
        return [result for result in self.results if not result.success]
