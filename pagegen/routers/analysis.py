"""
Analysis and generation endpoints.

- POST /analyze - Analyze one URL and create/update its artifacts
- POST /analyze/batch - Analyze several URLs sequentially
- POST /generate/{kind} - Generate a single artifact
- GET /artifacts/registry - List indexed prior page artifacts
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from pagegen.models.artifacts import (
    Artifact,
    ArtifactKind,
    BatchResult,
    GenerationRequest,
    SurfaceResult,
)
from pagegen.services.artifact_synthesizer import ArtifactGenerationError
from pagegen.services.orchestrator import AnalysisOrchestrator, SurfaceAnalysisError

logger = logging.getLogger(__name__)
router = APIRouter()


class AnalyzeRequest(BaseModel):
    url: str = Field(..., min_length=1, description="Address of the surface to analyze")


class BatchRequest(BaseModel):
    urls: List[str] = Field(..., min_length=1, description="Addresses, analyzed in order")
    continue_on_error: Optional[bool] = Field(
        None,
        description="Override BATCH_CONTINUE_ON_ERROR for this batch"
    )


class GenerateRequest(BaseModel):
    request: GenerationRequest = Field(default_factory=GenerationRequest)
    output: Optional[str] = Field(None, description="Relative path to write the artifact to")


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    return request.app.state.orchestrator


@router.post("/analyze", response_model=SurfaceResult)
async def analyze(body: AnalyzeRequest, orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Analyze a URL and create or update its artifacts."""
    try:
        return await orchestrator.analyze(body.url)
    except SurfaceAnalysisError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/analyze/batch", response_model=BatchResult)
async def analyze_batch(body: BatchRequest, orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Analyze URLs one after another."""
    try:
        return await orchestrator.batch(body.urls, continue_on_error=body.continue_on_error)
    except SurfaceAnalysisError as e:
        raise HTTPException(status_code=502, detail=f"Batch aborted: {e}")


@router.post("/generate/{kind}", response_model=Artifact)
async def generate(
    kind: ArtifactKind,
    body: GenerateRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)
):
    """Generate one artifact of the given kind."""
    try:
        return await orchestrator.generate(kind, body.request, body.output)
    except ArtifactGenerationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/artifacts/registry")
async def list_registry(orchestrator: AnalysisOrchestrator = Depends(get_orchestrator)):
    """Prior page artifacts indexed at startup."""
    registry = orchestrator.registry
    return {
        "count": len(registry),
        "artifacts": [
            {"name": name, "path": registry.get(name).path}
            for name in registry.names()
        ]
    }
