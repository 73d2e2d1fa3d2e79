"""
Surface analysis: extract, classify and name the controls of a loaded page,
then infer platform hints, business-logic tags and candidate workflows.

The DOM pass runs in the page (one ``evaluate`` per concern) and returns raw
attribute records; naming, tagging and workflow rules are applied here so
they stay deterministic and testable without a browser.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Sequence, Tuple
from urllib.parse import urlparse

from playwright.async_api import Page

from pagegen.models.analysis import (
    BusinessLogicTag,
    ControlCategory,
    ControlDescriptor,
    PageAnalysis,
    Workflow,
)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 20

NAME_PREFIXES: Dict[ControlCategory, str] = {
    ControlCategory.BUTTON: "btn",
    ControlCategory.INPUT: "input",
    ControlCategory.DROPDOWN: "dropdown",
    ControlCategory.LINK: "lnk",
    ControlCategory.TABLE: "tbl",
}

DEFAULT_NAME_WORDS: Dict[ControlCategory, str] = {
    ControlCategory.BUTTON: "Button",
    ControlCategory.INPUT: "Input",
    ControlCategory.DROPDOWN: "Select",
    ControlCategory.LINK: "Link",
    ControlCategory.TABLE: "Data",
}

EXTRACTION_SCRIPT = """
() => {
  const describe = (el) => ({
    tag: el.tagName.toLowerCase(),
    id: el.id || '',
    name: el.getAttribute('name') || '',
    className: el.getAttribute('class') || '',
    ariaLabel: el.getAttribute('aria-label') || '',
  });
  const text = (el) => (el.textContent || '').trim();

  const buttons = Array.from(document.querySelectorAll(
    'button, input[type="button"], input[type="submit"], [role="button"]'
  )).map(el => ({ ...describe(el), text: text(el), value: el.value || '' }));

  const inputs = Array.from(document.querySelectorAll('input, textarea')).map(el => ({
    ...describe(el),
    placeholder: el.getAttribute('placeholder') || '',
    inputType: el.type || '',
    required: !!el.required,
  }));

  const dropdowns = Array.from(document.querySelectorAll(
    'select, [role="combobox"], [role="listbox"]'
  )).map(el => ({
    ...describe(el),
    options: Array.from(el.options || []).map(opt => (opt.text || '').trim()),
  }));

  const links = Array.from(document.querySelectorAll('a[href]')).map(el => ({
    ...describe(el), text: text(el), href: el.href,
  }));

  const tables = Array.from(document.querySelectorAll('table, [role="table"]')).map(el => ({
    ...describe(el),
    headers: Array.from(el.querySelectorAll('th')).map(th => (th.textContent || '').trim()),
  }));

  return { button: buttons, input: inputs, dropdown: dropdowns, link: links, table: tables };
}
"""

# Indicator table; result order follows this order.
PLATFORM_INDICATORS: Tuple[Tuple[str, str], ...] = (
    ("react", "!!(window.React || document.querySelector('[data-reactroot]'))"),
    ("angular", "!!(window.angular || document.querySelector('[ng-app]'))"),
    ("vue", "!!(window.Vue || document.querySelector('[data-v-app]'))"),
    ("jquery", "!!(window.jQuery || window.$)"),
    ("bootstrap", "!!document.querySelector('.container, .row, [class*=\"col-\"]')"),
    ("material", "!!document.querySelector('[class*=\"mat-\"], [class*=\"mdc-\"]')"),
    ("ecommerce", "!!document.querySelector('.cart, .checkout, .product')"),
    ("form", "!!document.querySelector('form')"),
    ("dashboard", "!!document.querySelector('.dashboard, .sidebar, .nav')"),
)

PLATFORM_SCRIPT = "() => ({" + ", ".join(
    f"{key}: {expression}" for key, expression in PLATFORM_INDICATORS
) + "})"


def sanitize(text: str) -> str:
    """Strip everything except ASCII letters and digits."""
    return re.sub(r"[^a-zA-Z0-9]", "", text or "")


def derive_name(category: ControlCategory, source: str) -> str:
    """
    Build a category-prefixed identifier for a control.

    The source text is reduced to alphanumerics and cut to 20 characters;
    when nothing survives, the category's default word is used instead.
    """
    core = sanitize(source)[:MAX_NAME_LENGTH] or DEFAULT_NAME_WORDS[category]
    return f"{NAME_PREFIXES[category]}{core}"


def best_selector(record: Dict[str, Any]) -> str:
    """Selector hint: id, then name attribute, then first class, then tag."""
    if record.get("id"):
        return f"#{record['id']}"
    if record.get("name"):
        return f'[name="{record["name"]}"]'
    class_tokens = (record.get("className") or "").split()
    if class_tokens:
        return f".{class_tokens[0]}"
    return record.get("tag") or "*"


def derive_action(text: str) -> str:
    """Action hint for a button label."""
    lower = text.lower()
    if "login" in lower or "sign in" in lower:
        return "login"
    if "submit" in lower or "send" in lower:
        return "submit"
    if "search" in lower:
        return "search"
    return "click"


def derive_validation(input_type: str, required: bool) -> str:
    """Validation class for an input."""
    if input_type == "email":
        return "email format"
    if input_type == "password":
        return "password strength"
    if required:
        return "required field"
    return "standard validation"


def _first_present(record: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return ""


def build_button(record: Dict[str, Any]) -> ControlDescriptor:
    text = _first_present(record, "text", "value", "ariaLabel")
    return ControlDescriptor(
        category=ControlCategory.BUTTON,
        raw_text=text,
        derived_name=derive_name(ControlCategory.BUTTON, text),
        locator_hint=best_selector(record),
        action=derive_action(text),
    )


def build_input(record: Dict[str, Any]) -> ControlDescriptor:
    label = _first_present(record, "name", "placeholder", "id", "ariaLabel")
    input_type = record.get("inputType") or ""
    return ControlDescriptor(
        category=ControlCategory.INPUT,
        raw_text=label,
        derived_name=derive_name(ControlCategory.INPUT, label),
        locator_hint=best_selector(record),
        input_type=input_type,
        validation=derive_validation(input_type, bool(record.get("required"))),
    )


def build_dropdown(record: Dict[str, Any]) -> ControlDescriptor:
    label = _first_present(record, "name", "id", "ariaLabel")
    return ControlDescriptor(
        category=ControlCategory.DROPDOWN,
        raw_text=label,
        derived_name=derive_name(ControlCategory.DROPDOWN, label),
        locator_hint=best_selector(record),
        options=list(record.get("options") or []),
    )


def build_link(record: Dict[str, Any]) -> ControlDescriptor:
    text = record.get("text") or ""
    return ControlDescriptor(
        category=ControlCategory.LINK,
        raw_text=text,
        derived_name=derive_name(ControlCategory.LINK, text),
        locator_hint=best_selector(record),
        href=record.get("href"),
    )


def build_table(record: Dict[str, Any]) -> ControlDescriptor:
    table_id = record.get("id") or ""
    return ControlDescriptor(
        category=ControlCategory.TABLE,
        raw_text=table_id,
        derived_name=derive_name(ControlCategory.TABLE, table_id),
        locator_hint=best_selector(record),
        headers=[header for header in (record.get("headers") or []) if header],
    )


def _is_link_candidate(record: Dict[str, Any]) -> bool:
    """Links need visible text and must not be script pseudo-links."""
    text = record.get("text") or ""
    return bool(text) and "javascript:" not in text


BUILDERS: Tuple[Tuple[ControlCategory, Callable[[Dict[str, Any]], ControlDescriptor]], ...] = (
    (ControlCategory.BUTTON, build_button),
    (ControlCategory.INPUT, build_input),
    (ControlCategory.DROPDOWN, build_dropdown),
    (ControlCategory.LINK, build_link),
    (ControlCategory.TABLE, build_table),
)


def build_descriptors(raw: Dict[str, List[Dict[str, Any]]]) -> List[ControlDescriptor]:
    """Turn raw per-category records into descriptors, button → table order."""
    controls = []
    for category, builder in BUILDERS:
        for record in raw.get(category.value) or []:
            if category == ControlCategory.LINK and not _is_link_candidate(record):
                continue
            controls.append(builder(record))
    return controls


def _name_contains(controls: Sequence[ControlDescriptor], *needles: str) -> bool:
    return any(
        needle in control.derived_name.lower()
        for control in controls
        for needle in needles
    )


def _count(controls: Sequence[ControlDescriptor], category: ControlCategory) -> int:
    return sum(1 for control in controls if control.category == category)


BUSINESS_LOGIC_RULES: Tuple[Tuple[BusinessLogicTag, Callable[[Sequence[ControlDescriptor]], bool]], ...] = (
    (BusinessLogicTag.AUTHENTICATION,
     lambda controls: _name_contains(controls, "login", "password", "email")),
    (BusinessLogicTag.COMMERCE,
     lambda controls: _name_contains(controls, "cart", "buy", "checkout")),
    (BusinessLogicTag.FORMS,
     lambda controls: _count(controls, ControlCategory.INPUT) > 2),
    (BusinessLogicTag.NAVIGATION,
     lambda controls: _count(controls, ControlCategory.LINK) > 3),
    (BusinessLogicTag.DATA_DISPLAY,
     lambda controls: _count(controls, ControlCategory.TABLE) > 0),
    (BusinessLogicTag.SEARCH,
     lambda controls: _name_contains(controls, "search")
     or any(control.input_type == "search" for control in controls)),
)


def analyze_business_logic(controls: Sequence[ControlDescriptor]) -> List[BusinessLogicTag]:
    """Tags whose predicate holds, in declaration order."""
    return [tag for tag, predicate in BUSINESS_LOGIC_RULES if predicate(controls)]


AUTHENTICATION_WORKFLOW = Workflow(
    name="Authentication",
    steps=["Enter credentials", "Submit form", "Verify redirect"],
    positive_case="Valid login with correct credentials",
    negative_case="Invalid credentials, empty fields, SQL injection",
)

FORM_SUBMISSION_WORKFLOW = Workflow(
    name="Form Submission",
    steps=["Fill required fields", "Validate inputs", "Submit form"],
    positive_case="Valid data submission",
    negative_case="Invalid data, missing required fields, boundary values",
)

SHOPPING_WORKFLOW = Workflow(
    name="Shopping",
    steps=["Add to cart", "View cart", "Checkout", "Payment"],
    positive_case="Complete purchase flow",
    negative_case="Empty cart, invalid payment, out of stock",
)

WORKFLOW_RULES: Tuple[Tuple[Workflow, Callable[[Sequence[ControlDescriptor]], bool]], ...] = (
    (AUTHENTICATION_WORKFLOW,
     lambda controls: _name_contains(controls, "email") and _name_contains(controls, "password")),
    (FORM_SUBMISSION_WORKFLOW,
     lambda controls: _count(controls, ControlCategory.INPUT) > 0),
    (SHOPPING_WORKFLOW,
     lambda controls: _name_contains(controls, "cart")),
)


def identify_workflows(controls: Sequence[ControlDescriptor]) -> List[Workflow]:
    """Workflows whose rule matches, in rule declaration order."""
    return [
        workflow.model_copy(deep=True)
        for workflow, rule in WORKFLOW_RULES
        if rule(controls)
    ]


def generate_page_name(title: str, url: str) -> str:
    """
    Page name from the first title token, else the first path segment,
    else "Home", suffixed with "Page".
    """
    title_part = sanitize((title or "").split(" ")[0])
    if title_part:
        return f"{title_part}Page"

    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    path_part = sanitize(segments[0]) if segments else ""
    return f"{path_part or 'Home'}Page"


def derive_page_actions(controls: Sequence[ControlDescriptor]) -> str:
    """Comma-joined page-object method names for the control set."""
    actions = ["navigate", "waitForLoad"]
    verbs = {
        ControlCategory.BUTTON: "click",
        ControlCategory.INPUT: "fill",
        ControlCategory.DROPDOWN: "select",
    }
    for control in controls:
        verb = verbs.get(control.category)
        if verb:
            suffix = control.derived_name[len(NAME_PREFIXES[control.category]):]
            actions.append(f"{verb}{suffix}")
    return ",".join(actions)


def generate_scenarios(workflows: Sequence[Workflow]) -> str:
    """Positive then negative case of every workflow, comma-joined."""
    scenarios = []
    for workflow in workflows:
        scenarios.append(workflow.positive_case)
        scenarios.append(workflow.negative_case)
    return ", ".join(scenarios)


class SurfaceAnalyzer:
    """Builds a PageAnalysis from an open page."""

    async def analyze(self, page: Page) -> PageAnalysis:
        """
        Analyze the page currently loaded in the session.

        The page must already be navigated; title and address are read
        as-is. Faults raised by the page propagate unchanged.
        """
        raw = await page.evaluate(EXTRACTION_SCRIPT)
        controls = build_descriptors(raw)

        title = await page.title()
        url = page.url
        platform = await self.detect_platform(page)
        business_logic = analyze_business_logic(controls)
        workflows = identify_workflows(controls)

        analysis = PageAnalysis(
            url=url,
            title=title,
            controls=controls,
            platform=platform,
            business_logic=business_logic,
            workflows=workflows,
            page_name=generate_page_name(title, url),
        )

        counts = {
            category.value: len(analysis.controls_of(category))
            for category in ControlCategory
        }
        logger.info(
            f"Analyzed {url} as {analysis.page_name}: controls={counts}, "
            f"platform={platform}, workflows={[w.name for w in workflows]}"
        )
        return analysis

    async def detect_platform(self, page: Page) -> List[str]:
        """Indicators that hold on the page, in indicator-table order."""
        flags = await page.evaluate(PLATFORM_SCRIPT)
        return [key for key, _ in PLATFORM_INDICATORS if flags.get(key)]
