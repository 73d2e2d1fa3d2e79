"""Pytest fixtures for page generation agent tests."""

from pathlib import Path

import pytest

from pagegen.models.analysis import ControlCategory, ControlDescriptor
from pagegen.services.artifact_store import ArtifactStore
from pagegen.utils.config import Settings
from tests.fakes import FakeProvider


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings writing artifacts into a temporary output root."""
    return Settings(
        _env_file=None,
        OUTPUT_ROOT=str(tmp_path),
        AI_MODEL_TYPE="llama",
        BATCH_CONTINUE_ON_ERROR=False,
    )


@pytest.fixture
def store(settings: Settings) -> ArtifactStore:
    return ArtifactStore(settings)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_control():
    """Build a descriptor with just a category and a name."""
    def _make(category: ControlCategory, name: str, **fields) -> ControlDescriptor:
        return ControlDescriptor(category=category, derived_name=name, locator_hint=f"#{name}", **fields)
    return _make
