"""Version resolution: probing the go command for published module versions."""

from .probe import GoListProbe, Probe, ProbeResult, VersionCandidate
from .version_resolver import ResolvedTarget, VersionResolver

__all__ = [
    "GoListProbe",
    "Probe",
    "ProbeResult",
    "VersionCandidate",
    "ResolvedTarget",
    "VersionResolver",
]
