"""
gomodup utilities package
"""

from .io_utils import read_source_file, read_source_bytes, write_file_atomic
from .config import UpgradeConfig

__all__ = ["read_source_file", "read_source_bytes", "write_file_atomic", "UpgradeConfig"]
