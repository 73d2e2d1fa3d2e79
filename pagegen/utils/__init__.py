"""Utility modules for the page generation agent."""

from pagegen.utils.config import Settings, validate_settings
from pagegen.utils.logging import log_configuration, redact_dict, setup_logging

__all__ = [
    'Settings',
    'validate_settings',
    'setup_logging',
    'redact_dict',
    'log_configuration',
]
