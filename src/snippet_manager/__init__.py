"""Snippet Manager - save line ranges from source files as named snippets."""

__version__ = "0.1.0"

from snippet_manager.config import SnippetConfig

__all__ = ["SnippetConfig", "__version__"]
