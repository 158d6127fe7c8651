"""
gomodup: upgrade a Go module dependency to a new major version.
"""

from .driver import UpgradeDriver, UpgradeResult
from .resolver.version_resolver import ResolvedTarget
from .utils.config import UpgradeConfig

__version__ = "0.1.0"

__all__ = ["UpgradeDriver", "UpgradeResult", "ResolvedTarget", "UpgradeConfig", "__version__"]
