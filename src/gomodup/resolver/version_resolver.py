"""
Version Resolver

Finds the highest published major version line of a module by probing
``prefix/vN@vN`` candidates in fixed-size batches, and resolves the
concrete version inside a chosen line.

Whether a major line exists is decided from error text alone: the go
command reports a missing line as "no matching versions for query", and
that substring is the only signal available. Any other error (network
trouble, pre-module +incompatible releases) is skipped.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from . import versions
from .probe import Probe, VersionCandidate
from ..module_system.module_path import ModuleIdentity, path_for_major
from ..shared.errors import InvalidInputError, ResolutionExhaustedError, TransportError
from ..utils.config import BATCH_SIZE, FIRST_UPGRADE_MAJOR, MAX_FAILED_BATCHES, NO_MATCHING_VERSIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedTarget:
    """Where the dependency moves to: new module path and concrete version."""
    new_path: str
    version: str

    def __str__(self) -> str:
        return f"{self.new_path}@{self.version}"


def is_missing_version(error_text: Optional[str]) -> bool:
    return bool(error_text) and NO_MATCHING_VERSIONS in error_text


def build_batch(prefix: str, first_major: int, size: int) -> List[VersionCandidate]:
    """Contiguous candidates first_major .. first_major+size-1, each self-tagged vN@vN."""
    return [
        VersionCandidate(path_for_major(prefix, major), f"v{major}")
        for major in range(first_major, first_major + size)
    ]


class VersionResolver:
    """
    Computes upgrade targets from probe results.

    Batches run strictly one after another: the first "does not exist"
    answer in issuance order ends the search.
    """

    def __init__(
        self,
        probe: Probe,
        batch_size: int = BATCH_SIZE,
        max_failed_batches: int = MAX_FAILED_BATCHES,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.probe = probe
        self.batch_size = batch_size
        self.max_failed_batches = max_failed_batches

    def resolve_highest_major(self, prefix: str, current_major: Optional[int] = None) -> str:
        """
        Highest available version tag of the highest existing major line.

        Args:
            prefix: module path without any /vN suffix
            current_major: the suffix already in the path, or None (line 1)

        Raises:
            ResolutionExhaustedError: if no line above the current one exists,
                or too many consecutive batches failed with other errors
        """
        cursor = current_major + 1 if current_major is not None else FIRST_UPGRADE_MAJOR
        best: Optional[str] = None
        failed_batches = 0

        while True:
            batch = build_batch(prefix, cursor, self.batch_size)
            results = self.probe.query_batch(batch)
            batch_failed = bool(results)

            for candidate, result in zip(batch, results):
                if result.ok:
                    best = result.version
                    batch_failed = False
                elif is_missing_version(result.error_text):
                    if best is None:
                        raise ResolutionExhaustedError(
                            "no versions available for upgrade",
                            help=f"{candidate.module_path} has not been published",
                        )
                    logger.info(f"Found target version: {prefix}/{best}")
                    return best
                else:
                    logger.debug(result.error_text)

            failed_batches = failed_batches + 1 if batch_failed else 0
            if failed_batches >= self.max_failed_batches:
                raise ResolutionExhaustedError(
                    f"giving up after {failed_batches} batches of failed version queries "
                    f"(last probed {batch[-1]})"
                )
            cursor += self.batch_size

    def resolve_full_version(self, path: str, target: str) -> str:
        """
        Concrete version of ``path@target``, e.g. the latest v2.x.y for "v2".

        Raises:
            TransportError: if the go command fails or prints nothing
        """
        version = self.probe.query_version(f"{path}@{target}").strip()
        if not version:
            raise TransportError(f"no version reported for {path}@{target}")
        return version

    def resolve_target(
        self, identity: ModuleIdentity, target_version: Optional[str] = None
    ) -> ResolvedTarget:
        """
        Fix the new module path and version for an upgrade of ``identity``.

        With no explicit ``target_version`` the highest major line is probed.

        Raises:
            InvalidInputError: for an invalid version or a lower major line
        """
        if not target_version:
            target_version = self.resolve_highest_major(identity.prefix, identity.major_suffix)
        elif not versions.is_valid(target_version):
            raise InvalidInputError(f"invalid target version: {target_version}")

        target_major = versions.major_number(target_version)
        current = identity.current_major
        if target_major < current and not (current == 1 and target_major == 0):
            raise InvalidInputError(
                f"cannot downgrade {identity.path} to {target_version}",
                help="only upgrades to the same or a higher major version are supported",
            )

        new_path = path_for_major(identity.prefix, target_major)
        version = self.resolve_full_version(new_path, target_version)
        logger.debug(f"resolved {identity.path} -> {new_path}@{version}")
        return ResolvedTarget(new_path=new_path, version=version)
