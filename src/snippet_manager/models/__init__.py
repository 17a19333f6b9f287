"""Pydantic data models for snippets and the snippet store snapshot."""

from snippet_manager.models.snippet import Snippet, SnippetStore

__all__ = [
    "Snippet",
    "SnippetStore",
]
