"""API routers for the page generation agent."""

from pagegen.routers import analysis, health

__all__ = ['analysis', 'health']
