"""Lexidetect exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Construction-time failures raise a specific error type; classification
itself never raises.
"""

from __future__ import annotations


class LexidetectError(Exception):
    """Base exception for all Lexidetect failures."""


class LexidetectConfigError(LexidetectError):
    """Raised for invalid detection settings or unknown language codes."""


class LexidetectProfileError(LexidetectError):
    """Raised for malformed or unreadable language profiles."""


class LexidetectCorpusError(LexidetectError):
    """Raised when a corpus table cannot be assembled."""


class LexidetectEvaluationError(LexidetectError):
    """Raised when measured accuracy drifts from a recorded baseline."""


class LexidetectDependencyError(LexidetectError):
    """Raised when an optional runtime dependency is missing."""
