"""
Domain exceptions for the profile engine.

Notes
-----
Engine code avoids raising generic exceptions for expected failure modes.
Every such failure maps to a domain exception with a clear meaning so the CLI
and GUI can translate it into a user-visible message.
"""

from __future__ import annotations


class ProfileEngineError(RuntimeError):
    """Base exception for all profile engine domain failures."""


class ConfigurationError(ProfileEngineError):
    """Raised when the data root or engine settings cannot be used."""


class RecordCodecError(ProfileEngineError):
    """Raised when a persisted record payload cannot be decoded."""


class UnknownFieldError(ProfileEngineError):
    """Raised when a draft setter is given a field name that is not editable."""
