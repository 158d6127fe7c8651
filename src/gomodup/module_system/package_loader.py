"""
Package Loader

Loads every Go package below a module root, the way ``go list ./...``
selects them, and parses the import header of each file.

Directory rules:
- names starting with "." or "_" are skipped, as are testdata and vendor
- a subdirectory holding its own go.mod is a different module and skipped
- every *.go file is loaded, _test.go files included
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from .source_file import GoPackage, SourceFile
from ..frontend.parser import GoImportParser
from ..shared.errors import LoadError
from ..utils.config import (
    GO_FILE_EXTENSION,
    MODFILE_NAME,
    SKIPPED_DIRECTORIES,
    SKIPPED_DIRECTORY_PREFIXES,
)
from ..utils.io_utils import read_source_file

logger = logging.getLogger(__name__)


def _skip_directory(name: str) -> bool:
    return name in SKIPPED_DIRECTORIES or name.startswith(SKIPPED_DIRECTORY_PREFIXES)


class PackageLoader:
    """
    Loads a module's source tree into GoPackage entries.

    Stateless apart from the parser, which is built once and reused.
    """

    def __init__(self, parser: Optional[GoImportParser] = None):
        self.parser = parser if parser is not None else GoImportParser()

    def discover_files(self, root: Path) -> List[Path]:
        """All Go files below ``root`` that belong to the module rooted there."""
        found: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            kept = []
            for name in sorted(dirnames):
                if _skip_directory(name):
                    continue
                if (current / name / MODFILE_NAME).exists():
                    logger.debug(f"skipping nested module {current / name}")
                    continue
                kept.append(name)
            dirnames[:] = kept
            for name in sorted(filenames):
                if name.endswith(GO_FILE_EXTENSION) and not name.startswith(SKIPPED_DIRECTORY_PREFIXES):
                    found.append(current / name)
        return found

    def load_file(self, path: Path) -> SourceFile:
        try:
            source = read_source_file(path)
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"error reading {path}: {e}") from e
        syntax = self.parser.parse(source, str(path))
        return SourceFile(path=path, source=source, syntax=syntax)

    def load(self, root: Path) -> List[GoPackage]:
        """
        Load all packages below ``root``.

        Returns:
            Packages sorted by directory, files sorted by name

        Raises:
            LoadError: if root is not a directory, a file cannot be read or
                parsed, or no Go files exist
        """
        root = Path(root)
        if not root.is_dir():
            raise LoadError(f"error loading package info: {root} is not a directory")

        packages: Dict[Path, GoPackage] = {}
        for path in self.discover_files(root):
            source_file = self.load_file(path)
            package = packages.get(path.parent)
            if package is None:
                package = GoPackage(name=source_file.package, directory=path.parent)
                packages[path.parent] = package
            package.files.append(source_file)

        if not packages:
            raise LoadError(f"failed to find/load package info below {root}")

        logger.debug(f"loaded {len(packages)} packages from {root}")
        return [packages[d] for d in sorted(packages)]
