"""
End-to-end upgrades through UpgradeDriver on a real source tree, with the
go command replaced by FakeProbe.
"""

import pytest

from gomodup.driver import UpgradeDriver
from gomodup.rewriter.import_rewriter import ImportRewriter
from gomodup.shared.errors import (
    InvalidInputError,
    LoadError,
    NotADependencyError,
    PersistError,
    ResolutionExhaustedError,
)
from tests.test_utils import FakeProbe, go_file

pytestmark = pytest.mark.integration

GOMOD = """\
module example.com/app

go 1.21

require (
	example.com/mod v1.2.3
	golang.org/x/text v0.3.0
)
"""

MAIN = """\
package main

import (
	"fmt"

	"example.com/mod"
	"example.com/mod/sub"
)

func main() { fmt.Println(mod.Name, sub.Name) }
"""

FILES = {
    "main.go": MAIN,
    "internal/x/x.go": go_file("x", "example.com/moduleX"),
    "internal/y/y_test.go": go_file("y", "testing", "example.com/mod/sub"),
}


def make_driver(config, probe, loader):
    return UpgradeDriver(config, probe=probe, rewriter=ImportRewriter(config.project_root, loader))


class TestUpgradeToHighestMajor:
    def test_full_upgrade(self, go_project, fake_probe, loader):
        root, paths, config = go_project(FILES, GOMOD)
        before_x = paths["internal/x/x.go"].read_bytes()

        result = make_driver(config, fake_probe, loader).upgrade("example.com/mod")

        assert result.old_path == "example.com/mod"
        assert result.new_path == "example.com/mod/v3"
        assert result.version == "v3.0.2"
        assert sorted(sf.path.name for sf in result.rewritten_files) == ["main.go", "y_test.go"]

        assert paths["main.go"].read_text() == MAIN.replace(
            '"example.com/mod"', '"example.com/mod/v3"'
        ).replace('"example.com/mod/sub"', '"example.com/mod/v3/sub"')
        assert paths["internal/y/y_test.go"].read_text() == go_file("y", "testing", "example.com/mod/v3/sub")
        assert paths["internal/x/x.go"].read_bytes() == before_x

        assert paths["go.mod"].read_text() == """\
module example.com/app

go 1.21

require (
	example.com/mod/v3 v3.0.2
	golang.org/x/text v0.3.0
)
"""

    def test_from_suffixed_path(self, go_project, loader):
        gomod = "module example.com/app\n\ngo 1.21\n\nrequire example.com/mod/v2 v2.1.0\n"
        files = {"main.go": go_file("main", "example.com/mod/v2", "example.com/mod/v2/sub")}
        root, paths, config = go_project(files, gomod)
        probe = FakeProbe(available={2: "v2.1.0", 3: "v3.0.2", 4: "v4.0.0"})

        result = make_driver(config, probe, loader).upgrade("example.com/mod/v2")

        assert result.new_path == "example.com/mod/v4"
        assert probe.probed_majors[0] == 3
        assert paths["main.go"].read_text() == go_file("main", "example.com/mod/v4", "example.com/mod/v4/sub")
        assert paths["go.mod"].read_text() == (
            "module example.com/app\n\ngo 1.21\n\nrequire example.com/mod/v4 v4.0.0\n"
        )


class TestUpgradeToExplicitVersion:
    def test_explicit_version(self, go_project, fake_probe, loader):
        root, paths, config = go_project(FILES, GOMOD)

        result = make_driver(config, fake_probe, loader).upgrade("example.com/mod", "v2.0.5")

        assert str(result.target) == "example.com/mod/v2@v2.0.5"
        assert fake_probe.batches == []
        assert fake_probe.version_queries == ["example.com/mod/v2@v2.0.5"]
        assert '"example.com/mod/v2/sub"' in paths["main.go"].read_text()
        assert "example.com/mod/v2 v2.0.5" in paths["go.mod"].read_text()

    def test_same_major_only_touches_manifest(self, go_project, fake_probe, loader):
        root, paths, config = go_project(FILES, GOMOD)
        before_main = paths["main.go"].read_bytes()

        result = make_driver(config, fake_probe, loader).upgrade("example.com/mod", "v1.4.0")

        assert result.rewritten_files == []
        assert paths["main.go"].read_bytes() == before_main
        assert "\texample.com/mod v1.4.0\n" in paths["go.mod"].read_text()


class TestFailures:
    def _assert_untouched(self, paths, snapshot):
        for name, data in snapshot.items():
            assert paths[name].read_bytes() == data, name

    def test_not_a_dependency(self, go_project, fake_probe, loader):
        root, paths, config = go_project(FILES, GOMOD)
        snapshot = {name: p.read_bytes() for name, p in paths.items()}

        with pytest.raises(NotADependencyError, match="module not a known dependency: example.com/other"):
            make_driver(config, fake_probe, loader).upgrade("example.com/other")

        assert fake_probe.batches == []
        self._assert_untouched(paths, snapshot)

    def test_invalid_path_checked_first(self, go_project, fake_probe, loader):
        root, paths, config = go_project(FILES, GOMOD)
        with pytest.raises(InvalidInputError):
            make_driver(config, fake_probe, loader).upgrade("not a path")
        assert fake_probe.batches == []

    def test_nothing_to_upgrade_leaves_tree_untouched(self, go_project, loader):
        root, paths, config = go_project(FILES, GOMOD)
        snapshot = {name: p.read_bytes() for name, p in paths.items()}

        with pytest.raises(ResolutionExhaustedError):
            make_driver(config, FakeProbe(), loader).upgrade("example.com/mod")

        self._assert_untouched(paths, snapshot)

    def test_missing_manifest(self, go_project, fake_probe, loader):
        root, paths, config = go_project(FILES)
        with pytest.raises(LoadError, match="error reading module file"):
            make_driver(config, fake_probe, loader).upgrade("example.com/mod")


class TestManifestWriteFailure:
    def test_manifest_left_unchanged(self, go_project, fake_probe, loader, monkeypatch):
        root, paths, config = go_project(FILES, GOMOD)

        def disk_full(path, content):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr("gomodup.driver.write_file_atomic", disk_full)

        with pytest.raises(PersistError, match="error writing module file"):
            make_driver(config, fake_probe, loader).upgrade("example.com/mod")

        assert paths["go.mod"].read_text() == GOMOD
        # imports are written before the manifest and stay rewritten
        assert '"example.com/mod/v3"' in paths["main.go"].read_text()
