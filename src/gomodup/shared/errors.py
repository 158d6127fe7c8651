"""
Error Reporting

Every failure of an upgrade run is an UpgradeError subclass. Components
raise, and only the CLI entry point decides to terminate the process.
Errors that know where they happened render a compiler-style snippet.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from .source_location import SourceLocation
from ..utils.config import ERROR_POINTER_CHAR


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("GOMODUP_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Diagnostic dataclass
# ---------------------------------------------------------------------------

@dataclass
class Diagnostic:
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def format_diagnostic(
    diagnostic: Diagnostic,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic.

    Example output (plain, no color)::

        error[E0005]: cannot parse go.mod
         --> go.mod:3:9
          |
        3 | require (
          |         ^ unexpected end of block
    """
    out: List[str] = []

    code_str = f"[{diagnostic.code}]" if diagnostic.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {diagnostic.message}", _BOLD, color=color)
    )

    loc = diagnostic.location
    if loc is None:
        _append_help(out, diagnostic, 1, color)
        return "\n".join(out)

    source = source_files.get(loc.file)
    src_lines = source.splitlines() if source is not None else []
    idx = loc.line - 1
    if not 0 <= idx < len(src_lines):
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))
        _append_help(out, diagnostic, 1, color)
        return "\n".join(out)

    gw = len(str(loc.line))
    code_line = src_lines[idx]
    col_start = max(loc.column, 1) - 1
    span_len = _guess_span(code_line, col_start)
    label_suffix = f" {diagnostic.label}" if diagnostic.label else ""

    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(" " * col_start + ERROR_POINTER_CHAR * span_len + label_suffix, _BOLD, _RED, color=color)
    )
    _append_help(out, diagnostic, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length from the column onwards."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", "(", ")", ";"):
            break
        length += 1
    return max(1, length)


def _append_help(out: List[str], diagnostic: Diagnostic, gw: int, color: bool) -> None:
    if not diagnostic.help:
        return
    pad = " " * (gw + 1)
    out.append(
        _style(f"{pad}= ", _BOLD, _CYAN, color=color)
        + _style("help: ", _BOLD, color=color)
        + diagnostic.help
    )


# ============================================================================
# Exception Classes
# ============================================================================

class UpgradeError(Exception):
    """Base exception for all gomodup errors"""
    error_code = "E0000"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_code: Optional[str] = None,
        help: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.source_code = source_code
        self.help_text = help

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
        )

    def render(self, color: Optional[bool] = None) -> str:
        """Full diagnostic including the source snippet when one is known."""
        use_color = color if color is not None else _use_color()
        source_files: Dict[str, str] = {}
        if self.source_code is not None and self.location is not None:
            source_files[self.location.file] = self.source_code
        return format_diagnostic(self.to_diagnostic(), source_files, color=use_color)

    def __str__(self):
        if self.location:
            return f"{self.message} ({self.location})"
        return self.message


class InvalidInputError(UpgradeError):
    """Malformed module path or target version, rejected before any external call."""
    error_code = "E0001"


class NotADependencyError(UpgradeError):
    """The module is not required by the manifest."""
    error_code = "E0002"


class ResolutionExhaustedError(UpgradeError):
    """Version probing never produced a usable version."""
    error_code = "E0003"


class TransportError(UpgradeError):
    """The `go` command could not be run, failed, or returned garbage."""
    error_code = "E0004"

    def __init__(self, message: str, stderr: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.stderr = stderr.strip() if stderr else None

    def render(self, color: Optional[bool] = None) -> str:
        text = super().render(color)
        if self.stderr:
            text = f"{self.stderr}\n{text}"
        return text


class LoadError(UpgradeError):
    """The source tree or the manifest could not be loaded."""
    error_code = "E0005"


class PersistError(UpgradeError):
    """Writing a rewritten file or the manifest failed."""
    error_code = "E0006"
