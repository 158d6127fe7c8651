"""
Pytest configuration and shared fixtures for all gomodup tests.

The Lark parsers are built once per session; everything touching the
filesystem works below pytest's tmp_path.
"""

import sys
import pytest
from pathlib import Path
from typing import Dict, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from gomodup.frontend.parser import GoImportParser
from gomodup.gomod.parser import ModFileParser
from gomodup.module_system.package_loader import PackageLoader
from gomodup.utils.config import UpgradeConfig

from tests.test_utils import FakeProbe, write_tree


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def go_parser():
    """Go import parser, stateless and safe to share."""
    return GoImportParser()


@pytest.fixture(scope="session")
def modfile_parser():
    """go.mod parser, stateless and safe to share."""
    return ModFileParser()


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def loader(go_parser):
    return PackageLoader(go_parser)


@pytest.fixture
def fake_probe():
    """Probe where v2 and v3 exist and v4 does not."""
    return FakeProbe(available={2: "v2.1.0", 3: "v3.0.2"})


@pytest.fixture
def go_project(tmp_path):
    """
    Factory laying out a Go module below tmp_path.

    Returns (root, paths, config) where paths maps relative names to files.
    """
    def _make(files: Dict[str, str], gomod: Optional[str] = None):
        paths = write_tree(tmp_path, files)
        if gomod is not None:
            paths["go.mod"] = write_tree(tmp_path, {"go.mod": gomod})["go.mod"]
        config = UpgradeConfig(modfile=tmp_path / "go.mod", project_root=tmp_path)
        return tmp_path, paths, config

    return _make


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as end-to-end tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
