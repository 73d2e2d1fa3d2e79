"""
Artifact storage for generated page objects, tests, features and steps.

Paths handed in and out are relative to the output root.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from pagegen.models.artifacts import Artifact, ArtifactKind
from pagegen.utils.config import Settings

logger = logging.getLogger(__name__)


class ArtifactStore:
    """Reads and writes artifacts under the configured output root."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.base_path = settings.output_root

    def target_path(self, kind: ArtifactKind, page_name: str) -> str:
        """
        Conventional location for an artifact of a page.

        Page objects keep the page name as their file stem; tests,
        features and steps use the lower-cased name.
        """
        directory = self.settings.artifact_directory(kind)
        lower = page_name.lower()
        file_name = {
            ArtifactKind.PAGE_OBJECT: f"{page_name}.js",
            ArtifactKind.TEST: f"{lower}.spec.js",
            ArtifactKind.FEATURE: f"{lower}.feature",
            ArtifactKind.STEPS: f"{lower}.step.js",
        }[kind]
        return str(Path(directory) / file_name)

    def _resolve(self, relative_path: str) -> Path:
        """Absolute path for a relative artifact path, confined to the root."""
        full_path = self.base_path / relative_path
        try:
            full_path.resolve().relative_to(self.base_path.resolve())
        except ValueError:
            logger.error(f"Path traversal attempt: {relative_path}")
            raise ValueError(f"Artifact path escapes output root: {relative_path}")
        return full_path

    def write_text(self, relative_path: str, content: str) -> Path:
        """Write text, creating parent directories as needed."""
        file_path = self._resolve(relative_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        logger.info(f"Saved artifact: {relative_path} ({len(content)} chars)")
        return file_path

    def read_text(self, relative_path: str) -> Optional[str]:
        """Text of an artifact, or None if it does not exist."""
        file_path = self._resolve(relative_path)
        if not file_path.is_file():
            return None
        return file_path.read_text(encoding="utf-8")

    def save(self, artifact: Artifact) -> str:
        if not artifact.path:
            raise ValueError(f"Artifact of kind {artifact.kind.value} has no target path")
        self.write_text(artifact.path, artifact.content)
        return artifact.path

    def save_all(self, artifacts: List[Artifact]) -> List[str]:
        """
        Write a set of artifacts as a unit.

        Every target is checked before anything is written. If a write
        fails, files written so far are restored to their previous content
        (or removed when they did not exist) and the error is re-raised.
        """
        for artifact in artifacts:
            if not artifact.path:
                raise ValueError(f"Artifact of kind {artifact.kind.value} has no target path")
            self._resolve(artifact.path)

        previous: Dict[str, Optional[str]] = {}
        try:
            for artifact in artifacts:
                previous[artifact.path] = self.read_text(artifact.path)
                self.write_text(artifact.path, artifact.content)
        except OSError:
            self._restore(previous)
            raise
        return [artifact.path for artifact in artifacts]

    def _restore(self, previous: Dict[str, Optional[str]]) -> None:
        for relative_path, content in previous.items():
            file_path = self._resolve(relative_path)
            if content is None:
                if file_path.is_file():
                    file_path.unlink()
            else:
                file_path.write_text(content, encoding="utf-8")
            logger.warning(f"Rolled back artifact: {relative_path}")

    def list_page_objects(self) -> List[str]:
        """Relative paths of prior page objects, sorted by file name."""
        directory = self.base_path / self.settings.PAGE_OBJECTS_DIR
        if not directory.is_dir():
            return []

        return [
            str(Path(self.settings.PAGE_OBJECTS_DIR) / file_path.name)
            for file_path in sorted(directory.iterdir(), key=lambda p: p.name)
            if file_path.is_file() and file_path.suffix == ".js"
        ]
