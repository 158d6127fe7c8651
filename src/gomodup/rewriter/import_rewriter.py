"""
Import Rewriter

Moves every import of a module (and of packages inside it) to a new module
path across a source tree. Only the quoted path literals change; files with
no matching import are not written.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional

from ..module_system.module_path import PATH_SEPARATOR, is_within
from ..module_system.package_loader import PackageLoader
from ..module_system.source_file import SourceFile
from ..shared.errors import PersistError
from ..utils.io_utils import write_file_atomic

logger = logging.getLogger(__name__)

_MAJOR_SEGMENT = re.compile(r"^v(?:[2-9]|[1-9]\d+)$")


def rewrite_import_path(import_path: str, old_path: str, new_path: str) -> Optional[str]:
    """
    New import path for ``import_path``, or None if it is not inside ``old_path``.

    ``example.com/mod/sub`` with old ``example.com/mod`` and new
    ``example.com/mod/v3`` becomes ``example.com/mod/v3/sub``.

    A first segment below ``old_path`` that is a major suffix (``/v2``,
    ``/v3``...) names another module, so ``example.com/mod/v3/sub`` is left
    alone. This also makes a repeated run a no-op.
    """
    if not is_within(import_path, old_path):
        return None
    tail = import_path[len(old_path):]
    first_segment = tail[1:].split(PATH_SEPARATOR, 1)[0]
    if _MAJOR_SEGMENT.match(first_segment):
        return None
    return new_path + tail


def rewrite_source_file(source_file: SourceFile, old_path: str, new_path: str) -> bool:
    """Rewrite matching imports of one file in memory. True if its text changes."""
    for imp in source_file.imports:
        rewritten = rewrite_import_path(imp.current_path, old_path, new_path)
        if rewritten is None or rewritten == imp.current_path:
            continue
        logger.debug(f"{source_file.path}:\n\t{imp.current_path}\n\t-> {rewritten}")
        imp.rewrite(rewritten)
    return source_file.changed


class ImportRewriter:
    """
    Rewrites imports below a project root.

    Files are processed one at a time and each write is atomic. There is no
    transaction across files: a failure on one file leaves the files already
    written in their new state.
    """

    def __init__(self, project_root: Path = Path("."), loader: Optional[PackageLoader] = None):
        self.project_root = Path(project_root)
        self.loader = loader if loader is not None else PackageLoader()

    def rewrite_imports(self, old_path: str, new_path: str) -> List[SourceFile]:
        """
        Rewrite imports of ``old_path`` to ``new_path`` and persist changed files.

        Returns:
            The files that were written

        Raises:
            LoadError: if the tree cannot be loaded or holds no Go files
            PersistError: if writing a file fails
        """
        packages = self.loader.load(self.project_root)
        written: List[SourceFile] = []

        for package in packages:
            logger.debug(package.name)
            for source_file in package.files:
                if not rewrite_source_file(source_file, old_path, new_path):
                    continue
                self._persist(source_file)
                written.append(source_file)

        logger.info(f"rewrote imports in {len(written)} files")
        return written

    def _persist(self, source_file: SourceFile) -> None:
        try:
            write_file_atomic(source_file.path, source_file.render())
        except OSError as e:
            raise PersistError(f"error writing to file {source_file.path}: {e}") from e


def rewrite_imports(old_path: str, new_path: str, project_root: Path = Path(".")) -> List[SourceFile]:
    """Convenience wrapper around ImportRewriter with a fresh loader."""
    return ImportRewriter(project_root).rewrite_imports(old_path, new_path)
