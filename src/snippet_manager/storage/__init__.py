"""File-based storage engine for persisting snippets to a JSON document."""

from snippet_manager.storage.store import SnippetFileStore

__all__ = ["SnippetFileStore"]
