"""
Upgrade Driver

Orchestrates one dependency upgrade:
1. validate the module path and read the manifest
2. resolve the target module path and version
3. rewrite imports in the source tree
4. rewrite the manifest

Every stage raises an UpgradeError on failure; the driver never exits the
process itself.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .gomod import ModFile
from .module_system.module_path import check_path, split_path_version
from .module_system.source_file import SourceFile
from .resolver.probe import GoListProbe, Probe
from .resolver.version_resolver import ResolvedTarget, VersionResolver
from .rewriter.import_rewriter import ImportRewriter
from .shared.errors import LoadError, NotADependencyError, PersistError
from .utils.config import UpgradeConfig
from .utils.io_utils import read_source_bytes, write_file_atomic

logger = logging.getLogger(__name__)


@dataclass
class UpgradeResult:
    """Outcome of a successful upgrade."""
    old_path: str
    target: ResolvedTarget
    rewritten_files: List[SourceFile] = field(default_factory=list)

    @property
    def new_path(self) -> str:
        return self.target.new_path

    @property
    def version(self) -> str:
        return self.target.version


class UpgradeDriver:
    """
    Upgrade driver.

    Collaborators are injectable so each stage can be exercised without the
    go toolchain.
    """

    def __init__(
        self,
        config: Optional[UpgradeConfig] = None,
        probe: Optional[Probe] = None,
        rewriter: Optional[ImportRewriter] = None,
    ):
        self.config = config or UpgradeConfig()
        self.probe = probe or GoListProbe(self.config.go_binary, workdir=self.config.project_root)
        self.resolver = VersionResolver(
            self.probe,
            batch_size=self.config.batch_size,
            max_failed_batches=self.config.max_failed_batches,
        )
        self.rewriter = rewriter or ImportRewriter(self.config.project_root)

    def load_manifest(self) -> ModFile:
        modfile_path = self.config.modfile
        try:
            data = read_source_bytes(modfile_path)
        except OSError as e:
            raise LoadError(f"error reading module file {modfile_path}: {e}") from e
        try:
            return ModFile.parse(str(modfile_path), data)
        except UnicodeDecodeError as e:
            raise LoadError(f"error parsing module file {modfile_path}: {e}") from e

    def upgrade(self, module_path: str, target_version: Optional[str] = None) -> UpgradeResult:
        """
        Upgrade ``module_path`` to ``target_version``, or to the highest major
        version available when none is given.

        Raises:
            InvalidInputError, NotADependencyError, ResolutionExhaustedError,
            TransportError, LoadError, PersistError
        """
        check_path(module_path)
        identity = split_path_version(module_path)

        manifest = self.load_manifest()
        if not manifest.has_requirement(module_path):
            raise NotADependencyError(f"module not a known dependency: {module_path}")

        target = self.resolver.resolve_target(identity, target_version)

        rewritten = self.rewriter.rewrite_imports(module_path, target.new_path)

        manifest.drop_requirement(module_path)
        manifest.add_requirement(target.new_path, target.version)
        manifest.cleanup()
        manifest.sort_blocks()
        self.write_manifest(manifest)

        return UpgradeResult(old_path=module_path, target=target, rewritten_files=rewritten)

    def write_manifest(self, manifest: ModFile) -> None:
        modfile_path = self.config.modfile
        try:
            write_file_atomic(modfile_path, manifest.format())
        except OSError as e:
            raise PersistError(f"error writing module file {modfile_path}: {e}") from e
        logger.info(f"wrote {modfile_path}")
