"""Models describing an analyzed surface."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class ControlCategory(str, Enum):
    """Categories of interactive controls, in extraction order."""
    BUTTON = "button"
    INPUT = "input"
    DROPDOWN = "dropdown"
    LINK = "link"
    TABLE = "table"


class BusinessLogicTag(str, Enum):
    """Business-logic flags inferred from the control set."""
    AUTHENTICATION = "authentication"
    COMMERCE = "commerce"
    FORMS = "forms"
    NAVIGATION = "navigation"
    DATA_DISPLAY = "data-display"
    SEARCH = "search"


class ControlDescriptor(BaseModel):
    """One discovered interactive element."""
    category: ControlCategory = Field(..., description="Control category")
    raw_text: str = Field(default="", description="Visible label/value/aria text")
    derived_name: str = Field(..., min_length=1, description="Category-prefixed identifier")
    locator_hint: str = Field(..., description="Best-effort selector")

    # Category-specific metadata
    action: Optional[str] = Field(None, description="Button action hint")
    input_type: Optional[str] = Field(None, description="Input type attribute")
    validation: Optional[str] = Field(None, description="Inferred validation class")
    options: List[str] = Field(default_factory=list, description="Dropdown option labels")
    href: Optional[str] = Field(None, description="Link target address")
    headers: List[str] = Field(default_factory=list, description="Table header labels")


class Workflow(BaseModel):
    """A usage scenario inferred from co-occurring controls."""
    name: str = Field(..., description="Workflow name")
    steps: List[str] = Field(default_factory=list, description="Ordered step descriptions")
    positive_case: str = Field(..., description="Positive-case sentence")
    negative_case: str = Field(..., description="Negative-case sentence")


class PageAnalysis(BaseModel):
    """Result of analyzing one surface."""
    url: str = Field(..., description="Source address")
    title: str = Field(default="", description="Page title")
    controls: List[ControlDescriptor] = Field(
        default_factory=list,
        description="Controls in discovery order"
    )
    platform: List[str] = Field(
        default_factory=list,
        description="Framework/library hints, in indicator-table order"
    )
    business_logic: List[BusinessLogicTag] = Field(
        default_factory=list,
        description="Business-logic tags, in declaration order"
    )
    workflows: List[Workflow] = Field(default_factory=list, description="Inferred workflows")
    page_name: str = Field(..., description="Derived page name, e.g. CheckoutPage")

    @property
    def element_names(self) -> List[str]:
        return [control.derived_name for control in self.controls]

    def controls_of(self, category: ControlCategory) -> List[ControlDescriptor]:
        """Controls of a single category, in discovery order."""
        return [control for control in self.controls if control.category == category]
