"""
Tests for module path validation and major suffix splitting.
"""

import pytest

from gomodup.module_system.module_path import (
    ModuleIdentity,
    check_path,
    is_within,
    path_for_major,
    split_path_version,
)
from gomodup.shared.errors import InvalidInputError


class TestCheckPath:
    @pytest.mark.parametrize("path", [
        "github.com/nathanjcochran/gomod",
        "example.com/mod",
        "example.com/mod/v2",
        "example.com/mod/v10",
        "golang.org/x/text",
        "example.com/some-thing_else~1.2",
    ])
    def test_valid_paths(self, path):
        check_path(path)

    @pytest.mark.parametrize("path,reason", [
        ("", "empty string"),
        ("/example.com/mod", "leading slash"),
        ("example.com/mod/", "trailing slash"),
        ("example.com//mod", "double slash"),
        ("localmodule/pkg", "missing dot"),
        ("Example.com/mod", "invalid char in first path element"),
        ("-example.com/mod", "leading dash"),
        ("example.com/mod/a b", "invalid char in path element"),
        ("example.com/.hidden", "leading dot"),
        ("example.com/mod./x", "trailing dot"),
        ("example.com/con/x", "disallowed as path element component on Windows"),
    ])
    def test_invalid_paths(self, path, reason):
        with pytest.raises(InvalidInputError) as exc_info:
            check_path(path)
        assert reason in exc_info.value.message

    @pytest.mark.parametrize("path", [
        "example.com/mod/v0",
        "example.com/mod/v1",
        "example.com/mod/v02",
        "example.com/mod/v2.1",
    ])
    def test_disallowed_major_suffix(self, path):
        with pytest.raises(InvalidInputError, match="disallowed version suffix"):
            check_path(path)

    def test_gopkg_in_is_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            check_path("gopkg.in/yaml.v2")
        assert "unsupported module path" in exc_info.value.message
        assert exc_info.value.help_text is not None


class TestSplitPathVersion:
    def test_path_without_suffix(self):
        identity = split_path_version("example.com/mod")
        assert identity == ModuleIdentity("example.com/mod")
        assert identity.major_suffix is None
        assert identity.current_major == 1

    def test_path_with_suffix(self):
        identity = split_path_version("example.com/mod/v3")
        assert identity.prefix == "example.com/mod"
        assert identity.major_suffix == 3
        assert identity.current_major == 3
        assert identity.path == "example.com/mod/v3"

    def test_multi_digit_suffix(self):
        assert split_path_version("example.com/mod/v12").major_suffix == 12

    @pytest.mark.parametrize("path", [
        "example.com/mod2",
        "example.com/v2x",
        "example.com/mod/version",
        "example.com/mod/2",
    ])
    def test_look_alikes_are_not_suffixes(self, path):
        assert split_path_version(path) == ModuleIdentity(path)

    def test_rejects_v1_suffix(self):
        with pytest.raises(InvalidInputError):
            split_path_version("example.com/mod/v1")


class TestModuleIdentity:
    def test_suffix_below_two_rejected(self):
        with pytest.raises(ValueError):
            ModuleIdentity("example.com/mod", 1)

    @pytest.mark.parametrize("major,expected", [
        (None, "example.com/mod"),
        (0, "example.com/mod"),
        (1, "example.com/mod"),
        (2, "example.com/mod/v2"),
        (25, "example.com/mod/v25"),
    ])
    def test_path_for_major(self, major, expected):
        assert path_for_major("example.com/mod", major) == expected


class TestIsWithin:
    @pytest.mark.parametrize("import_path,expected", [
        ("example.com/mod", True),
        ("example.com/mod/sub", True),
        ("example.com/mod/sub/deeper", True),
        ("example.com/moduleX", False),
        ("example.com/mo", False),
        ("example.com", False),
        ("fmt", False),
    ])
    def test_segment_boundaries(self, import_path, expected):
        assert is_within(import_path, "example.com/mod") is expected
