"""
Shared components: source locations and the error taxonomy.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic, format_diagnostic,
    UpgradeError, InvalidInputError, NotADependencyError, ResolutionExhaustedError,
    TransportError, LoadError, PersistError,
)

__all__ = [
    "SourceLocation",
    "Diagnostic",
    "format_diagnostic",
    "UpgradeError",
    "InvalidInputError",
    "NotADependencyError",
    "ResolutionExhaustedError",
    "TransportError",
    "LoadError",
    "PersistError",
]
