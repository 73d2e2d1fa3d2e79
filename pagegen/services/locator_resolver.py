"""
Strategy-ordered element resolution.

A cue (button text, field label, dropdown name) is resolved against the
current page by walking a fixed, ordered table of lookup strategies. Semantic
signals (roles, labels) come before attribute and free-text scraping, so the
first strategy that matches anything wins and the first element it matched
is returned.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from playwright.async_api import Error as PlaywrightError, Locator, Page

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY_TIMEOUT_MS = 2000


class ElementNotFoundError(Exception):
    """Raised when every lookup strategy for a cue came back empty."""

    def __init__(self, cue: str, kind: "LocatorKind"):
        self.cue = cue
        self.kind = kind
        super().__init__(f'Could not find {kind.description} for "{cue}" on page')


class LocatorKind(str, Enum):
    """What sort of control a cue refers to."""
    GENERIC = "generic"
    INPUT_FIELD = "inputField"
    DROPDOWN = "dropdown"

    @property
    def description(self) -> str:
        return {
            LocatorKind.GENERIC: "element",
            LocatorKind.INPUT_FIELD: "input field",
            LocatorKind.DROPDOWN: "dropdown",
        }[self]


class StrategyType(str, Enum):
    """Lookup primitive a strategy is evaluated with."""
    ROLE = "role"
    LABEL = "label"
    PLACEHOLDER = "placeholder"
    CSS = "css"


@dataclass(frozen=True)
class LookupStrategy:
    """Pure description of one lookup.

    ``template`` is a CSS selector with ``{cue}`` placeholders, ``role`` an
    ARIA role, and ``tag`` narrows a label lookup to one element type.
    """
    type: StrategyType
    role: Optional[str] = None
    template: Optional[str] = None
    tag: Optional[str] = None

    def describe(self) -> str:
        if self.type == StrategyType.ROLE:
            return f"role={self.role}"
        if self.type == StrategyType.CSS:
            return f"css={self.template}"
        if self.tag:
            return f"{self.type.value}[{self.tag}]"
        return self.type.value


def _role(role: str) -> LookupStrategy:
    return LookupStrategy(StrategyType.ROLE, role=role)


def _css(template: str) -> LookupStrategy:
    return LookupStrategy(StrategyType.CSS, template=template)


LABEL = LookupStrategy(StrategyType.LABEL)
PLACEHOLDER = LookupStrategy(StrategyType.PLACEHOLDER)

STRATEGIES: Dict[LocatorKind, Tuple[LookupStrategy, ...]] = {
    LocatorKind.GENERIC: (
        # Buttons
        _role("button"),
        _css('button:has-text("{cue}")'),
        _css('input[type="submit"][value*="{cue}" i]'),
        _css('input[type="button"][value*="{cue}" i]'),
        _css('[role="button"]:has-text("{cue}")'),
        # Inputs
        LABEL,
        PLACEHOLDER,
        _css('input[name*="{cue}" i]'),
        _css('input[id*="{cue}" i]'),
        _css('textarea[name*="{cue}" i]'),
        # Links
        _role("link"),
        _css('a:has-text("{cue}")'),
        # Free text, innermost element first, then accessible attributes
        _css('*:has-text("{cue}"):not(:has(*:has-text("{cue}")))'),
        _css('[aria-label*="{cue}" i]'),
        _css('[title*="{cue}" i]'),
        _css('[alt*="{cue}" i]'),
    ),
    LocatorKind.INPUT_FIELD: (
        LABEL,
        PLACEHOLDER,
        _css('input[name*="{cue}" i]'),
        _css('input[id*="{cue}" i]'),
        _css('textarea[name*="{cue}" i]'),
        _css('input[type="text"][placeholder*="{cue}" i]'),
        _css('input[type="email"][placeholder*="{cue}" i]'),
        _css('input[type="password"][placeholder*="{cue}" i]'),
    ),
    LocatorKind.DROPDOWN: (
        _css('select[name*="{cue}" i]'),
        _css('select[id*="{cue}" i]'),
        LookupStrategy(StrategyType.LABEL, tag="select"),
        _css('[role="combobox"][aria-label*="{cue}" i]'),
        _css('[role="listbox"][aria-label*="{cue}" i]'),
    ),
}


def escape_css_string(value: str) -> str:
    """Escape a value for use inside a double-quoted CSS string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def cue_pattern(cue: str) -> "re.Pattern[str]":
    """Case-insensitive literal pattern for accessible-name matching."""
    return re.compile(re.escape(cue), re.IGNORECASE)


class LocatorResolver:
    """Resolves cues to element handles using the ordered strategy table."""

    def __init__(self, page: Page, timeout_ms: int = DEFAULT_STRATEGY_TIMEOUT_MS):
        self.page = page
        self.timeout_ms = timeout_ms

    def build_locator(self, strategy: LookupStrategy, cue: str) -> Locator:
        """Translate a strategy description into a Playwright locator."""
        if strategy.type == StrategyType.ROLE:
            return self.page.get_by_role(strategy.role, name=cue_pattern(cue))

        if strategy.type == StrategyType.LABEL:
            locator = self.page.get_by_label(cue_pattern(cue))
            if strategy.tag:
                locator = locator.and_(self.page.locator(strategy.tag))
            return locator

        if strategy.type == StrategyType.PLACEHOLDER:
            return self.page.get_by_placeholder(cue_pattern(cue))

        selector = strategy.template.replace("{cue}", escape_css_string(cue))
        return self.page.locator(selector)

    async def try_strategy(self, strategy: LookupStrategy, cue: str) -> Optional[Locator]:
        """
        Evaluate a single strategy with a bounded wait.

        Returns:
            The first matched element, or None when the strategy matched
            nothing, timed out, or was rejected by the engine.
        """
        try:
            locator = self.build_locator(strategy, cue)
            await locator.first.wait_for(state="attached", timeout=self.timeout_ms)
            count = await locator.count()
        except PlaywrightError as e:
            logger.debug(f"Strategy {strategy.describe()} found nothing for '{cue}': {e}")
            return None

        if count > 0:
            return locator.first
        return None

    async def resolve(self, cue: str, kind: LocatorKind = LocatorKind.GENERIC) -> Locator:
        """
        Resolve a cue to a single element.

        Args:
            cue: Human-readable text identifying the control
            kind: Which strategy table to walk

        Returns:
            First element matched by the first non-empty strategy

        Raises:
            ElementNotFoundError: If every strategy came back empty
        """
        for index, strategy in enumerate(STRATEGIES[kind]):
            element = await self.try_strategy(strategy, cue)
            if element is not None:
                logger.info(
                    f"Resolved {kind.description} '{cue}' via strategy "
                    f"#{index + 1} ({strategy.describe()})"
                )
                return element

        logger.warning(f"No strategy matched {kind.description} '{cue}'")
        raise ElementNotFoundError(cue, kind)

    async def find_element(self, cue: str) -> Locator:
        return await self.resolve(cue, LocatorKind.GENERIC)

    async def find_input_field(self, cue: str) -> Locator:
        return await self.resolve(cue, LocatorKind.INPUT_FIELD)

    async def find_dropdown(self, cue: str) -> Locator:
        return await self.resolve(cue, LocatorKind.DROPDOWN)


class SmartInteractor:
    """Cue-driven interactions built on the resolver."""

    def __init__(self, resolver: LocatorResolver):
        self.resolver = resolver

    async def click(self, cue: str) -> None:
        element = await self.resolver.find_element(cue)
        await element.click()
        logger.info(f"Clicked on: {cue}")

    async def double_click(self, cue: str) -> None:
        element = await self.resolver.find_element(cue)
        await element.dblclick()
        logger.info(f"Double clicked: {cue}")

    async def right_click(self, cue: str) -> None:
        element = await self.resolver.find_element(cue)
        await element.click(button="right")
        logger.info(f"Right clicked: {cue}")

    async def hover(self, cue: str) -> None:
        element = await self.resolver.find_element(cue)
        await element.hover()
        logger.info(f"Hovered over: {cue}")

    async def fill(self, field: str, text: str) -> None:
        element = await self.resolver.find_input_field(field)
        await element.fill(text)
        logger.info(f"Typed into {field} field")

    async def clear(self, field: str) -> None:
        element = await self.resolver.find_input_field(field)
        await element.fill("")
        logger.info(f"Cleared: {field}")

    async def select(self, dropdown: str, option: str) -> None:
        element = await self.resolver.find_dropdown(dropdown)
        await element.select_option(label=option)
        logger.info(f"Selected '{option}' from {dropdown}")

    async def wait_until_visible(self, cue: str, timeout_ms: Optional[int] = None) -> None:
        element = await self.resolver.find_element(cue)
        await element.wait_for(state="visible", timeout=timeout_ms)
        logger.info(f"Waited for '{cue}' to appear")

    async def wait_until_hidden(self, cue: str, timeout_ms: Optional[int] = None) -> None:
        element = await self.resolver.find_element(cue)
        await element.wait_for(state="hidden", timeout=timeout_ms)
        logger.info(f"Waited for '{cue}' to disappear")

    async def is_visible(self, cue: str) -> bool:
        element = await self.resolver.find_element(cue)
        return await element.is_visible()
