"""
Configuration constants and the explicit run configuration for gomodup
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Version probing
BATCH_SIZE = 25  # Major versions probed per `go list` call
MAX_FAILED_BATCHES = 4  # Consecutive all-error batches before giving up
FIRST_UPGRADE_MAJOR = 2  # Paths without a /vN suffix are major line 1

# Substring of the `go` command's error text for a major line that does not
# exist. There is no structured error code, so this is matched verbatim.
NO_MATCHING_VERSIONS = "no matching versions for query"

# Go toolchain
DEFAULT_GO_BINARY = "go"
GO_BINARY_ENV = "GOMODUP_GO"

# Manifest
DEFAULT_MODFILE = "./go.mod"
MODFILE_NAME = "go.mod"

# Source tree discovery (mirrors `go list ./...`)
GO_FILE_EXTENSION = ".go"
SKIPPED_DIRECTORIES = frozenset({"testdata", "vendor"})
SKIPPED_DIRECTORY_PREFIXES = (".", "_")

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Display and formatting constants
ERROR_POINTER_CHAR = "^"


@dataclass(frozen=True)
class UpgradeConfig:
    """
    Settings for one upgrade run.

    Passed explicitly into the driver, the probe and the rewriter so that no
    component reads process-wide state on its own.
    """
    modfile: Path = Path(DEFAULT_MODFILE)
    project_root: Path = Path(".")
    verbose: bool = False
    go_binary: str = DEFAULT_GO_BINARY
    batch_size: int = BATCH_SIZE
    max_failed_batches: int = MAX_FAILED_BATCHES

    @classmethod
    def from_env(
        cls,
        modfile: Optional[str] = None,
        verbose: bool = False,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "UpgradeConfig":
        """Build a config from CLI values, honouring GOMODUP_GO for the go binary."""
        env = os.environ if environ is None else environ
        modfile_path = Path(modfile or DEFAULT_MODFILE)
        return cls(
            modfile=modfile_path,
            project_root=modfile_path.parent,
            verbose=verbose,
            go_binary=env.get(GO_BINARY_ENV) or DEFAULT_GO_BINARY,
        )
