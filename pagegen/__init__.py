"""
Page analysis and multi-artifact test generation.

Inspects a rendered page, models its controls and workflows, and generates
a page object, a test file, a Gherkin feature and its step bindings,
extending previously generated artifacts instead of duplicating them.
"""

__version__ = "1.0.0"
