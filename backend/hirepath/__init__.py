"""Hirepath: candidate pipeline and onboarding task service."""

__version__ = "1.0.0"
