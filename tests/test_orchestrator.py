"""End-to-end tests for analysis orchestration."""

import asyncio
import json
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError

from pagegen.models.artifacts import ArtifactKind, GenerationRequest, ReconcileAction
from pagegen.services.artifact_synthesizer import ArtifactGenerationError
from pagegen.services.orchestrator import AnalysisOrchestrator, SurfaceAnalysisError
from tests.fakes import FakeBrowser, FakePage, FakeProvider, checkout_page

CHECKOUT = "https://x/checkout"
PRIOR_CHECKOUT = (
    "export default class CheckoutPage extends BasePage {\n"
    "  constructor(page) { this.btnLogin; this.btnAddToCart; this.inputEmail; this.inputPassword; }\n"
    "}\n"
)
PRIOR_CHECKOUT_WITHOUT_CART = (
    "export default class CheckoutPage extends BasePage {\n"
    "  constructor(page) { this.btnLogin; this.inputEmail; this.inputPassword; }\n"
    "}\n"
)


def orchestrator_for(settings, pages, provider=None, navigation_errors=None):
    browser = FakeBrowser(pages, navigation_errors)
    orchestrator = AnalysisOrchestrator.from_settings(settings, provider=provider or FakeProvider(), browser=browser)
    return orchestrator, browser


class TestAnalyze:
    """Tests for single-surface analysis."""

    def test_new_page_creates_four_files(self, settings, tmp_path: Path):
        """A page with no prior artifact produces all four files."""
        orchestrator, browser = orchestrator_for(settings, {CHECKOUT: checkout_page()})

        result = asyncio.run(orchestrator.analyze(CHECKOUT))

        assert result.success
        assert result.action == ReconcileAction.CREATE
        assert result.page_name == "CheckoutPage"
        assert (tmp_path / "pageObjects" / "CheckoutPage.js").read_text().startswith("import BasePage")
        assert (tmp_path / "tests" / "checkoutpage.spec.js").is_file()
        assert (tmp_path / "Features" / "checkoutpage.feature").is_file()
        assert (tmp_path / "Features" / "step_definitions" / "checkoutpage.step.js").is_file()
        assert browser.released == [CHECKOUT]

    def test_known_page_keeps_page_object(self, settings, store, tmp_path: Path):
        """Re-analysis with no new controls leaves the page object untouched."""
        store.write_text("pageObjects/CheckoutPage.js", PRIOR_CHECKOUT)
        provider = FakeProvider()
        orchestrator, _ = orchestrator_for(settings, {CHECKOUT: checkout_page()}, provider)

        result = asyncio.run(orchestrator.analyze(CHECKOUT))

        assert result.action == ReconcileAction.UPDATE
        assert result.delta == []
        assert len(result.written) == 3
        assert (tmp_path / "pageObjects" / "CheckoutPage.js").read_text() == PRIOR_CHECKOUT
        assert "Page Object class" not in provider.kinds_requested

    def test_known_page_with_new_control_rewrites_page_object(self, settings, store, tmp_path: Path):
        """A control missing from the prior page object regenerates it in place."""
        store.write_text("pageObjects/CheckoutPage.js", PRIOR_CHECKOUT_WITHOUT_CART)
        provider = FakeProvider()
        orchestrator, _ = orchestrator_for(settings, {CHECKOUT: checkout_page()}, provider)

        result = asyncio.run(orchestrator.analyze(CHECKOUT))
        page_prompt = provider.prompt_for("Page Object class")
        page_request = json.loads(page_prompt.split("Input: ", 1)[1].split("\n", 1)[0])

        assert result.action == ReconcileAction.UPDATE
        assert result.delta == ["btnAddToCart"]
        assert len(result.written) == 4
        assert "pageObjects/CheckoutPage.js" in result.written
        assert page_request["elements"] == "btnLogin,btnAddToCart,inputEmail,inputPassword"
        assert page_request["existing_content"] == PRIOR_CHECKOUT_WITHOUT_CART
        assert (tmp_path / "pageObjects" / "CheckoutPage.js").read_text().startswith("import BasePage")

    def test_failed_write_removes_new_files(self, settings, tmp_path: Path):
        """When one target cannot be written, files written before it are removed."""
        (tmp_path / "Features" / "checkoutpage.feature").mkdir(parents=True)
        orchestrator, _ = orchestrator_for(settings, {CHECKOUT: checkout_page()})

        with pytest.raises(SurfaceAnalysisError) as exc_info:
            asyncio.run(orchestrator.analyze(CHECKOUT))

        assert isinstance(exc_info.value.cause, OSError)
        assert not (tmp_path / "pageObjects" / "CheckoutPage.js").exists()
        assert not (tmp_path / "tests" / "checkoutpage.spec.js").exists()
        assert not (tmp_path / "Features" / "step_definitions" / "checkoutpage.step.js").exists()

    def test_failed_write_restores_prior_page_object(self, settings, store, tmp_path: Path):
        """A page object rewritten before a failed write gets its old content back."""
        store.write_text("pageObjects/CheckoutPage.js", PRIOR_CHECKOUT_WITHOUT_CART)
        (tmp_path / "Features" / "checkoutpage.feature").mkdir(parents=True)
        orchestrator, _ = orchestrator_for(settings, {CHECKOUT: checkout_page()})

        with pytest.raises(SurfaceAnalysisError):
            asyncio.run(orchestrator.analyze(CHECKOUT))

        assert (tmp_path / "pageObjects" / "CheckoutPage.js").read_text() == PRIOR_CHECKOUT_WITHOUT_CART
        assert not (tmp_path / "tests" / "checkoutpage.spec.js").exists()

    def test_generation_failure_writes_nothing(self, settings, tmp_path: Path):
        """A failed kind leaves the output root empty and the session released."""
        provider = FakeProvider(responses={"Gherkin feature file": "Feature: Checkout"})
        orchestrator, browser = orchestrator_for(settings, {CHECKOUT: checkout_page()}, provider)

        with pytest.raises(SurfaceAnalysisError) as exc_info:
            asyncio.run(orchestrator.analyze(CHECKOUT))

        assert isinstance(exc_info.value.cause, ArtifactGenerationError)
        assert "Scenario" in str(exc_info.value)
        assert list(tmp_path.iterdir()) == []
        assert browser.released == [CHECKOUT]

    def test_extraction_fault_is_wrapped(self, settings):
        """A page fault surfaces as one analysis error after release."""
        fault = PlaywrightError("Execution context was destroyed")
        page = FakePage(url=CHECKOUT, evaluate_error=fault)
        orchestrator, browser = orchestrator_for(settings, {CHECKOUT: page})

        with pytest.raises(SurfaceAnalysisError) as exc_info:
            asyncio.run(orchestrator.analyze(CHECKOUT))

        assert exc_info.value.cause is fault
        assert exc_info.value.url == CHECKOUT
        assert browser.released == [CHECKOUT]

    def test_navigation_fault_is_wrapped(self, settings):
        """Navigation errors are reported the same way."""
        fault = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        orchestrator, browser = orchestrator_for(settings, {}, navigation_errors={CHECKOUT: fault})

        with pytest.raises(SurfaceAnalysisError):
            asyncio.run(orchestrator.analyze(CHECKOUT))

        assert browser.released == [CHECKOUT]


class TestBatch:
    """Tests for sequential multi-surface runs."""

    URLS = ["https://x/checkout", "https://x/broken", "https://x/login"]

    def _pages(self):
        return {
            self.URLS[0]: checkout_page(),
            self.URLS[1]: FakePage(url=self.URLS[1], evaluate_error=PlaywrightError("crashed")),
            self.URLS[2]: FakePage(title="Login", url=self.URLS[2]),
        }

    def test_first_failure_aborts(self, settings):
        """By default later surfaces are not attempted."""
        orchestrator, browser = orchestrator_for(settings, self._pages())

        with pytest.raises(SurfaceAnalysisError):
            asyncio.run(orchestrator.batch(self.URLS))

        assert browser.opened == self.URLS[:2]

    def test_continue_on_error_records_failure(self, settings):
        """With continue-on-error the failure is recorded and the batch goes on."""
        orchestrator, browser = orchestrator_for(settings, self._pages())

        batch = asyncio.run(orchestrator.batch(self.URLS, continue_on_error=True))

        assert browser.opened == self.URLS
        assert [r.success for r in batch.results] == [True, False, True]
        assert batch.failed[0].url == self.URLS[1]
        assert "crashed" in batch.failed[0].error

    def test_continue_on_error_from_settings(self, settings):
        """The setting supplies the default mode."""
        settings.BATCH_CONTINUE_ON_ERROR = True
        orchestrator, _ = orchestrator_for(settings, self._pages())

        batch = asyncio.run(orchestrator.batch(self.URLS))

        assert len(batch.results) == 3


class TestGenerate:
    """Tests for single-artifact generation."""

    def test_generate_with_output_writes_file(self, settings, tmp_path: Path):
        """An output path persists the artifact under the output root."""
        orchestrator, _ = orchestrator_for(settings, {})

        artifact = asyncio.run(orchestrator.generate(
            ArtifactKind.FEATURE, GenerationRequest(feature="Search"), "Features/search.feature"
        ))

        assert (tmp_path / "Features" / "search.feature").read_text() == artifact.content

    def test_generate_without_output_writes_nothing(self, settings, tmp_path: Path):
        """Without an output path the artifact is only returned."""
        orchestrator, _ = orchestrator_for(settings, {})

        artifact = asyncio.run(orchestrator.generate(ArtifactKind.STEPS, GenerationRequest(feature="Search")))

        assert artifact.path is None
        assert list(tmp_path.iterdir()) == []

    def test_close_releases_collaborators(self, settings):
        """Closing stops the browser and the provider."""
        provider = FakeProvider()
        orchestrator, browser = orchestrator_for(settings, {}, provider)

        asyncio.run(orchestrator.close())

        assert browser.closed
        assert provider.closed
