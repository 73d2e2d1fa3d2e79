"""Tests for artifact synthesis and validation."""

import asyncio
import hashlib
import json

import pytest

from pagegen.models.artifacts import ArtifactKind, GenerationRequest
from pagegen.services.artifact_synthesizer import (
    REQUIRED_MARKERS,
    ArtifactGenerationError,
    ArtifactSynthesizer,
    ArtifactValidationError,
    build_prompt,
    clean_content,
    validate_content,
)
from tests.fakes import FakeProvider

FEATURE_REQUEST = GenerationRequest(feature="Checkout", scenarios="Complete purchase flow")


class TestCleanContent:
    """Tests for code-fence removal."""

    def test_strips_language_fences(self):
        """Opening fences with a language tag and closing fences are removed."""
        text = "```gherkin\nFeature: Cart\n```\n"

        assert clean_content(text) == "Feature: Cart"

    def test_strips_every_fence(self):
        """Fences in the middle of a response are removed too."""
        text = "```js\nclass A {}\n```\n```typescript\nconstructor\n```"

        assert "```" not in clean_content(text)

    def test_fence_without_line_break_keeps_code(self):
        """A word glued to a fence on the same line is code, not a language tag."""
        text = "```class A { constructor() {} }```"

        assert clean_content(text) == "class A { constructor() {} }"

    def test_tag_followed_by_end_of_text(self):
        """A tagged fence at the very end is removed whole."""
        assert clean_content("Feature: Cart\n```gherkin") == "Feature: Cart"

    def test_none_becomes_empty(self):
        """A missing response cleans to an empty string."""
        assert clean_content(None) == ""


class TestValidateContent:
    """Tests for the structural check."""

    @pytest.mark.parametrize("kind", list(ArtifactKind))
    def test_every_kind_has_markers(self, kind):
        """Each kind declares at least one required marker."""
        assert REQUIRED_MARKERS[kind]

    def test_feature_without_scenario_names_the_marker(self):
        """A long feature without scenarios is still rejected."""
        content = "Feature: Checkout\n" + "  Some narrative text.\n" * 200

        with pytest.raises(ArtifactValidationError) as exc_info:
            validate_content(ArtifactKind.FEATURE, content)

        assert exc_info.value.missing == ["Scenario"]
        assert "Scenario" in str(exc_info.value)

    def test_empty_content(self):
        """Whitespace-only content is rejected as empty."""
        with pytest.raises(ArtifactValidationError) as exc_info:
            validate_content(ArtifactKind.STEPS, "   \n")

        assert "empty" in str(exc_info.value)

    def test_reports_all_missing_markers(self):
        """Every absent marker is listed, in declaration order."""
        with pytest.raises(ArtifactValidationError) as exc_info:
            validate_content(ArtifactKind.STEPS, "When the user clicks")

        assert exc_info.value.missing == ["Given", "Then"]

    def test_markers_are_case_sensitive(self):
        """Lower-case keywords do not satisfy the check."""
        with pytest.raises(ArtifactValidationError):
            validate_content(ArtifactKind.FEATURE, "feature: x\nscenario: y")


class TestBuildPrompt:
    """Tests for the generation instruction."""

    def test_prompt_names_kind_and_embeds_inputs(self):
        """The kind description and JSON inputs appear in the prompt."""
        prompt = build_prompt(ArtifactKind.FEATURE, FEATURE_REQUEST)
        embedded = prompt.split("Input: ", 1)[1].split("\n", 1)[0]

        assert prompt.startswith("Generate Gherkin feature file with these requirements:")
        assert prompt.rstrip().endswith("Generate ONLY the complete Gherkin feature file content.")
        assert json.loads(embedded) == {"feature": "Checkout", "scenarios": "Complete purchase flow"}


class TestArtifactSynthesizer:
    """Tests for ArtifactSynthesizer."""

    def test_synthesize_returns_validated_artifact(self):
        """Content is cleaned and stamped with a 16-character hash."""
        provider = FakeProvider()
        synthesizer = ArtifactSynthesizer(provider)

        artifact = asyncio.run(
            synthesizer.synthesize(ArtifactKind.FEATURE, FEATURE_REQUEST, "Features/checkoutpage.feature")
        )

        assert artifact.content.startswith("Feature: Generated")
        assert "```" not in artifact.content
        assert artifact.content_hash == hashlib.sha256(artifact.content.encode("utf-8")).hexdigest()[:16]
        assert artifact.path == "Features/checkoutpage.feature"
        assert artifact.timestamp == artifact.created_at.isoformat()

    def test_one_provider_call_per_artifact(self):
        """A single request results in exactly one provider call."""
        provider = FakeProvider()
        synthesizer = ArtifactSynthesizer(provider)

        asyncio.run(synthesizer.generate_page_object(GenerationRequest(class_name="CheckoutPage")))

        assert provider.kinds_requested == ["Page Object class"]

    def test_single_line_fenced_page_object_is_valid(self):
        """Code on the fence line survives cleaning and passes validation."""
        provider = FakeProvider(responses={"Page Object class": "```class A { constructor() {} }```"})
        synthesizer = ArtifactSynthesizer(provider)

        artifact = asyncio.run(synthesizer.generate_page_object(GenerationRequest(class_name="A")))

        assert artifact.content == "class A { constructor() {} }"

    def test_invalid_response_is_not_retried(self):
        """A malformed response fails once without a second call."""
        provider = FakeProvider(responses={"Gherkin feature file": "Feature: Checkout only"})
        synthesizer = ArtifactSynthesizer(provider)

        with pytest.raises(ArtifactValidationError) as exc_info:
            asyncio.run(synthesizer.generate_feature(FEATURE_REQUEST))

        assert exc_info.value.kind == ArtifactKind.FEATURE
        assert len(provider.prompts) == 1

    def test_provider_failure_is_wrapped(self):
        """Provider errors surface as generation errors with the cause chained."""
        cause = ConnectionError("connection refused")
        provider = FakeProvider(responses={"Playwright test file": cause})
        synthesizer = ArtifactSynthesizer(provider)

        with pytest.raises(ArtifactGenerationError) as exc_info:
            asyncio.run(synthesizer.generate_test(GenerationRequest(url="https://x/")))

        assert exc_info.value.__cause__ is cause
        assert "Playwright test file generation failed" in str(exc_info.value)
        assert not isinstance(exc_info.value, ArtifactValidationError)
