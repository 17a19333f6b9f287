"""Snippet record and the immutable store snapshot that holds them.

A :class:`SnippetStore` is the top-level persistence unit: the storage
engine loads one from disk, operations derive new snapshots from it, and the
result is written back in full.  Snapshots are frozen, so a failed write can
never leave a half-applied change visible to the caller.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from snippet_manager.errors import (
    DuplicateTagError,
    InvalidTagError,
    SnippetNotFoundError,
)


class Snippet(BaseModel):
    """A saved piece of code identified by a unique tag."""

    model_config = ConfigDict(frozen=True)

    tag: str = Field(
        ...,
        min_length=1,
        description="User-chosen identifier, unique across the store (case-sensitive).",
    )
    code: str = Field(
        default="",
        description="The saved text. May be empty or span multiple lines.",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snippet was saved (UTC).",
    )

    def line_count(self) -> int:
        """Return the number of lines in the saved code."""
        if not self.code:
            return 0
        return len(self.code.split("\n"))


class SnippetStore(BaseModel):
    """Ordered, tag-unique collection of snippets.

    Insertion order is preserved.  All mutating operations return a new
    snapshot and leave the receiver untouched.
    """

    model_config = ConfigDict(frozen=True)

    snippets: tuple[Snippet, ...] = Field(
        default_factory=tuple,
        description="Saved snippets, ordered oldest to newest.",
    )

    @model_validator(mode="after")
    def validate_unique_tags(self) -> "SnippetStore":
        """Reject snapshots in which two snippets share a tag."""
        seen: set[str] = set()
        for snippet in self.snippets:
            if snippet.tag in seen:
                raise ValueError(f"duplicate tag '{snippet.tag}'")
            seen.add(snippet.tag)
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, tag: str) -> Optional[Snippet]:
        """Return the snippet with exactly this tag, or *None*."""
        for snippet in self.snippets:
            if snippet.tag == tag:
                return snippet
        return None

    def get(self, tag: str) -> Snippet:
        """Return the snippet with this tag or raise SnippetNotFoundError."""
        snippet = self.find(tag)
        if snippet is None:
            raise SnippetNotFoundError(tag)
        return snippet

    def tags(self) -> list[str]:
        return [snippet.tag for snippet in self.snippets]

    def __contains__(self, tag: object) -> bool:
        return any(snippet.tag == tag for snippet in self.snippets)

    def __len__(self) -> int:
        return len(self.snippets)

    # ------------------------------------------------------------------
    # Derivations
    # ------------------------------------------------------------------

    def add(
        self,
        tag: str,
        code: str,
        created_at: Optional[datetime] = None,
    ) -> tuple["SnippetStore", Snippet]:
        """Return a new snapshot with a snippet appended.

        Raises:
            InvalidTagError: If *tag* is empty.
            DuplicateTagError: If a snippet with *tag* already exists.
        """
        if not tag:
            raise InvalidTagError("Tag is required")
        if tag in self:
            raise DuplicateTagError(tag)

        if created_at is None:
            snippet = Snippet(tag=tag, code=code)
        else:
            snippet = Snippet(tag=tag, code=code, created_at=created_at)
        return SnippetStore(snippets=self.snippets + (snippet,)), snippet

    def remove(self, tag: str) -> tuple["SnippetStore", Snippet]:
        """Return a new snapshot without the snippet carrying *tag*.

        The relative order of the remaining snippets is unchanged.

        Raises:
            SnippetNotFoundError: If no snippet has *tag*.
        """
        removed = self.get(tag)
        remaining = tuple(s for s in self.snippets if s.tag != tag)
        return SnippetStore(snippets=remaining), removed

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json_dict(self) -> dict:
        """Serialize to a JSON-compatible dictionary.

        Datetimes become ISO 8601 strings and the snippet tuple becomes a
        list, matching the on-disk document shape.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_json_dict(cls, data: dict) -> "SnippetStore":
        """Deserialize from a JSON-compatible dictionary."""
        return cls.model_validate(data)
