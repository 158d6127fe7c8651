"""Import rewriting across a Go source tree."""

from .import_rewriter import ImportRewriter, rewrite_imports, rewrite_import_path

__all__ = ["ImportRewriter", "rewrite_imports", "rewrite_import_path"]
