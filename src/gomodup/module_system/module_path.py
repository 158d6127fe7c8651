"""
Module Path Handling

Validation of Go module paths and splitting of the major version suffix.
Pure functions; no I/O.

Go convention: major lines 0 and 1 carry no suffix, line N >= 2 is
imported as ``<prefix>/vN``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..shared.errors import InvalidInputError

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"

_ELEMENT_CHARS = re.compile(r"^[A-Za-z0-9\-._~]+$")
_FIRST_ELEMENT_CHARS = re.compile(r"^[a-z0-9\-.]+$")
_WINDOWS_RESERVED = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)


@dataclass(frozen=True)
class ModuleIdentity:
    """
    A module path split into its prefix and optional major suffix.

    ``prefix`` never includes the suffix; ``major_suffix`` is None for major
    lines 0 and 1, otherwise an integer >= 2.
    """
    prefix: str
    major_suffix: Optional[int] = None

    def __post_init__(self):
        if self.major_suffix is not None and self.major_suffix < 2:
            raise ValueError(f"major suffix must be >= 2, got {self.major_suffix}")

    @property
    def path(self) -> str:
        return path_for_major(self.prefix, self.major_suffix)

    @property
    def current_major(self) -> int:
        """Major line encoded in the path (1 when there is no suffix)."""
        return self.major_suffix if self.major_suffix is not None else 1

    def __str__(self) -> str:
        return self.path


def path_for_major(prefix: str, major: Optional[int]) -> str:
    """Module path for a major line: the bare prefix for 0/1, else prefix/vN."""
    if major is None or major < 2:
        return prefix
    return f"{prefix}{PATH_SEPARATOR}v{major}"


def check_path(path: str) -> None:
    """
    Validate a module path.

    Raises:
        InvalidInputError: describing the first problem found
    """
    def fail(reason: str) -> None:
        raise InvalidInputError(f"invalid module path {path!r}: {reason}")

    if not path:
        fail("empty string")
    if path.startswith(PATH_SEPARATOR):
        fail("leading slash")
    if path.endswith(PATH_SEPARATOR):
        fail("trailing slash")
    if "//" in path:
        fail("double slash")

    elements = path.split(PATH_SEPARATOR)
    first = elements[0]
    if "." not in first:
        fail(f"missing dot in first path element {first!r}")
    if first.startswith("-"):
        fail("leading dash in first path element")
    if not _FIRST_ELEMENT_CHARS.match(first):
        fail(f"invalid char in first path element {first!r}")

    for elem in elements:
        if not _ELEMENT_CHARS.match(elem):
            fail(f"invalid char in path element {elem!r}")
        if elem.strip(".") == "":
            fail(f"invalid path element {elem!r}")
        if elem.startswith("."):
            fail(f"leading dot in path element {elem!r}")
        if elem.endswith("."):
            fail(f"trailing dot in path element {elem!r}")
        short = elem.split(".", 1)[0]
        if short.upper() in _WINDOWS_RESERVED:
            fail(f"{elem!r} disallowed as path element component on Windows")

    if path.startswith("gopkg.in/"):
        raise InvalidInputError(
            f"unsupported module path {path!r}",
            help="gopkg.in paths encode the major version as .vN and are not handled",
        )

    split_path_version(path)


def split_path_version(path: str) -> ModuleIdentity:
    """
    Split ``path`` into prefix and major suffix.

    ``example.com/mod/v3`` -> ModuleIdentity("example.com/mod", 3);
    ``example.com/mod`` -> ModuleIdentity("example.com/mod", None).

    Raises:
        InvalidInputError: for suffixes Go disallows (/v0, /v1, /v02, /v2.1)
    """
    i = len(path)
    dot = False
    while i > 0 and (path[i - 1].isdigit() or path[i - 1] == "."):
        if path[i - 1] == ".":
            dot = True
        i -= 1
    if i <= 1 or i == len(path) or path[i - 1] != "v" or path[i - 2] != PATH_SEPARATOR:
        return ModuleIdentity(path)

    prefix, suffix = path[:i - 2], path[i - 1:]
    if dot or len(suffix) <= 1 or suffix[1] == "0" or suffix == "v1":
        raise InvalidInputError(f"invalid module path {path!r}: disallowed version suffix /{suffix}")

    identity = ModuleIdentity(prefix, int(suffix[1:]))
    logger.debug(f"split {path} into prefix {identity.prefix} and major v{identity.major_suffix}")
    return identity


def is_within(import_path: str, module_path: str) -> bool:
    """
    True if ``import_path`` names ``module_path`` itself or a package inside it.

    The test respects path-segment boundaries: ``example.com/moduleX`` is not
    inside ``example.com/mod``.
    """
    if import_path == module_path:
        return True
    return import_path.startswith(module_path + PATH_SEPARATOR)
