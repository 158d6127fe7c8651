"""Module system: module paths, source tree loading."""

from .module_path import ModuleIdentity, check_path, split_path_version, path_for_major, is_within
from .source_file import SourceFile, GoPackage
from .package_loader import PackageLoader

__all__ = [
    'ModuleIdentity',
    'check_path',
    'split_path_version',
    'path_for_major',
    'is_within',
    'SourceFile',
    'GoPackage',
    'PackageLoader',
]
