"""
Artifact synthesis.

Turns a generation request into a validated text artifact with one call to
the text-generation provider. Validation is structural only: the cleaned
response must be non-empty and contain every marker required for its kind.
"""

import hashlib
import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pagegen.models.artifacts import Artifact, ArtifactKind, GenerationRequest
from pagegen.services.ai.llm_provider import LLMProvider
from pagegen.utils.logging import redact_dict

logger = logging.getLogger(__name__)

HASH_LENGTH = 16

KIND_DESCRIPTIONS: Dict[ArtifactKind, str] = {
    ArtifactKind.PAGE_OBJECT: "Page Object class",
    ArtifactKind.TEST: "Playwright test file",
    ArtifactKind.FEATURE: "Gherkin feature file",
    ArtifactKind.STEPS: "Cucumber step definitions",
}

REQUIRED_MARKERS: Dict[ArtifactKind, List[str]] = {
    ArtifactKind.PAGE_OBJECT: ["class", "constructor"],
    ArtifactKind.TEST: ["import", "test("],
    ArtifactKind.FEATURE: ["Feature:", "Scenario"],
    ArtifactKind.STEPS: ["Given", "When", "Then"],
}

PROMPT_TEMPLATE = """Generate {type} with these requirements:
- Use Page Object Model patterns
- Follow naming conventions (btn, input, dropdown)
- Include proper error handling and logging
- Add comprehensive assertions and validations
- Use existing BasePage and PageObjectManager patterns

Input: {input}
Generate ONLY the complete {type} content."""

# A language tag only counts as one when the fence line ends right after it.
CODE_FENCE = re.compile(r"```[\w+-]*[ \t]*(?=\r?\n|$)|```")


class ArtifactGenerationError(Exception):
    """Raised when an artifact could not be generated."""

    def __init__(self, kind: ArtifactKind, message: str):
        self.kind = kind
        super().__init__(f"{KIND_DESCRIPTIONS[kind]} generation failed: {message}")


class ArtifactValidationError(ArtifactGenerationError):
    """Raised when generated content fails the structural check."""

    def __init__(self, kind: ArtifactKind, missing: List[str]):
        self.missing = missing
        if missing:
            message = f"Generated {KIND_DESCRIPTIONS[kind]} missing: {', '.join(missing)}"
        else:
            message = "Generated content is empty"
        super().__init__(kind, message)


def build_prompt(kind: ArtifactKind, request: GenerationRequest) -> str:
    return PROMPT_TEMPLATE.format(
        type=KIND_DESCRIPTIONS[kind],
        input=request.to_prompt_input(),
    )


def clean_content(text: str) -> str:
    """Remove code fences and surrounding whitespace."""
    return CODE_FENCE.sub("", text or "").strip()


def missing_markers(kind: ArtifactKind, content: str) -> List[str]:
    return [marker for marker in REQUIRED_MARKERS[kind] if marker not in content]


def validate_content(kind: ArtifactKind, content: str) -> None:
    """
    Raises:
        ArtifactValidationError: If content is empty or lacks required markers
    """
    if not content.strip():
        raise ArtifactValidationError(kind, [])
    missing = missing_markers(kind, content)
    if missing:
        raise ArtifactValidationError(kind, missing)


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:HASH_LENGTH]


class ArtifactSynthesizer:
    """Generates and validates artifacts through a text-generation provider."""

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    async def synthesize(
        self,
        kind: ArtifactKind,
        request: GenerationRequest,
        target_path: Optional[str] = None
    ) -> Artifact:
        """
        Generate one artifact.

        Args:
            kind: Artifact kind to produce
            request: Named inputs for the generation instruction
            target_path: Where the artifact is meant to be written

        Returns:
            Validated artifact with timestamp and content hash

        Raises:
            ArtifactValidationError: If the response is empty or malformed
            ArtifactGenerationError: If the provider call failed
        """
        prompt = build_prompt(kind, request)
        logger.debug(
            f"{KIND_DESCRIPTIONS[kind]} request: "
            f"{redact_dict(request.model_dump(exclude_none=True, exclude={'existing_content'}))}"
        )
        logger.info(f"Generating {KIND_DESCRIPTIONS[kind]}" + (f" for {target_path}" if target_path else ""))

        try:
            response = await self.provider.generate_text(prompt)
        except Exception as e:
            raise ArtifactGenerationError(kind, str(e)) from e

        content = clean_content(response)
        validate_content(kind, content)

        artifact = Artifact(
            kind=kind,
            content=content,
            path=target_path,
            created_at=datetime.now(timezone.utc),
            content_hash=content_hash(content),
        )
        logger.info(f"Generated {KIND_DESCRIPTIONS[kind]} ({len(content)} chars, hash {artifact.content_hash})")
        return artifact

    async def generate_page_object(self, request: GenerationRequest, target_path: Optional[str] = None) -> Artifact:
        return await self.synthesize(ArtifactKind.PAGE_OBJECT, request, target_path)

    async def generate_test(self, request: GenerationRequest, target_path: Optional[str] = None) -> Artifact:
        return await self.synthesize(ArtifactKind.TEST, request, target_path)

    async def generate_feature(self, request: GenerationRequest, target_path: Optional[str] = None) -> Artifact:
        return await self.synthesize(ArtifactKind.FEATURE, request, target_path)

    async def generate_steps(self, request: GenerationRequest, target_path: Optional[str] = None) -> Artifact:
        return await self.synthesize(ArtifactKind.STEPS, request, target_path)
