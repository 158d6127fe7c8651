"""
Semantic versions as the Go module system writes them.

Versions carry a leading "v". Shorthands such as "v2" and "v2.1" are valid
and stand for "v2.0.0" and "v2.1.0"; they may not carry a prerelease or
build suffix. Build metadata is ignored for ordering.
"""

from typing import Optional

from semver import Version

VERSION_PREFIX = "v"


def parse(version: str) -> Optional[Version]:
    """Parse a Go version into a semver Version, or None if it is not valid."""
    if not version or not version.startswith(VERSION_PREFIX):
        return None
    body = version[len(VERSION_PREFIX):]
    shorthand = "-" not in body and "+" not in body
    try:
        return Version.parse(body, optional_minor_and_patch=shorthand)
    except ValueError:
        return None


def is_valid(version: str) -> bool:
    """True if version is a valid Go semantic version (shorthands allowed)."""
    return parse(version) is not None


def major_number(version: str) -> Optional[int]:
    parsed = parse(version)
    return parsed.major if parsed is not None else None


def compare(a: str, b: str) -> int:
    """
    Compare two versions: -1, 0 or +1.

    An invalid version is considered less than every valid one and equal to
    other invalid versions, matching golang.org/x/mod/semver.
    """
    pa, pb = parse(a), parse(b)
    if pa is None and pb is None:
        return 0
    if pa is None:
        return -1
    if pb is None:
        return 1
    return pa.compare(pb)

