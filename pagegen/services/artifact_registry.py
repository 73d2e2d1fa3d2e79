"""
Registry of previously generated page artifacts.

Built once from disk; lookups never touch the filesystem again. Matching is
deliberately permissive so that re-analyzing a page extends its existing
artifact rather than producing a duplicate.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse

from pagegen.models.analysis import PageAnalysis
from pagegen.models.artifacts import ExistingArtifact
from pagegen.services.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


def url_matches(artifact: ExistingArtifact, url: str) -> bool:
    """Content mentions the full address or its (non-root) path."""
    if url and url in artifact.content:
        return True
    path = urlparse(url).path
    return bool(path) and path != "/" and path in artifact.content


def title_matches(artifact: ExistingArtifact, title: str) -> bool:
    """Artifact name contains the first title token, case-insensitively."""
    token = (title or "").lower().split(" ")[0]
    return bool(token) and token in artifact.name.lower()


def matches_analysis(artifact: ExistingArtifact, analysis: PageAnalysis) -> bool:
    """
    Either predicate alone is enough.

    This is a loose heuristic and remains an open question: short first
    title tokens collide across unrelated pages ("Home Depot" matches
    HomePage). The only narrowing is that an empty title token and a bare
    "/" path never count, since either would match every artifact.
    """
    return url_matches(artifact, analysis.url) or title_matches(artifact, analysis.title)


def compute_delta(artifact: ExistingArtifact, analysis: PageAnalysis) -> List[str]:
    """Control names that do not appear anywhere in the artifact's content."""
    return [
        name for name in analysis.element_names
        if name not in artifact.content
    ]


class ArtifactRegistry:
    """Immutable index of prior page artifacts, keyed by name."""

    def __init__(self, artifacts: List[ExistingArtifact]):
        self._artifacts: Dict[str, ExistingArtifact] = {}
        for artifact in artifacts:
            self._artifacts.setdefault(artifact.name, artifact)

    @classmethod
    def scan(cls, store: ArtifactStore, exclude_marker: Optional[str] = None) -> "ArtifactRegistry":
        """Index every page object under the store's page-object directory."""
        artifacts = []
        for relative_path in store.list_page_objects():
            name = Path(relative_path).stem
            if exclude_marker and exclude_marker in Path(relative_path).name:
                continue
            artifacts.append(ExistingArtifact(
                name=name,
                path=relative_path,
                content=store.read_text(relative_path) or "",
            ))

        logger.info(f"Indexed {len(artifacts)} existing page artifacts")
        return cls(artifacts)

    def __len__(self) -> int:
        return len(self._artifacts)

    def __contains__(self, name: str) -> bool:
        return name in self._artifacts

    def get(self, name: str) -> Optional[ExistingArtifact]:
        return self._artifacts.get(name)

    def names(self) -> List[str]:
        return list(self._artifacts)

    def find_existing(self, analysis: PageAnalysis) -> Optional[ExistingArtifact]:
        """First indexed artifact matching the analysis by address or title."""
        for artifact in self._artifacts.values():
            if matches_analysis(artifact, analysis):
                logger.debug(f"Analysis of {analysis.url} matches existing artifact {artifact.name}")
                return artifact
        return None
