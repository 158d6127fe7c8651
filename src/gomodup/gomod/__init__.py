"""go.mod manifest: parsing, requirement edits and canonical formatting."""

from .modfile import Block, Line, ModFile, Requirement
from .parser import ModFileParser, parse_modfile

__all__ = ["Block", "Line", "ModFile", "Requirement", "ModFileParser", "parse_modfile"]
