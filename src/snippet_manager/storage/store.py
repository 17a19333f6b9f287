"""SnippetFileStore -- file-based storage engine for the snippet store.

Handles all file I/O for loading and saving :class:`SnippetStore` snapshots.
The whole store lives in one pretty-printed JSON document and every change
rewrites it in full.  Writes are atomic (write-to-temp + rename) so a crash
mid-write never truncates the previously saved snippets.

Typical usage::

    files = SnippetFileStore("/home/me/.snippets/snippets.json")

    store = files.load()
    store, snippet = files.insert(store, "retry-loop", code)
    snippet = files.find_by_tag(store, "retry-loop")
    store, removed = files.delete_by_tag(store, "retry-loop")
    for snippet in files.list_all(store):
        ...

The handle never caches a snapshot.  Callers load once per operation and
pass the snapshot back in, which keeps the transaction boundary in their
hands.  There is no locking: two processes writing at once lose one update.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from snippet_manager.errors import CorruptStoreError, StorageIOError
from snippet_manager.models.snippet import Snippet, SnippetStore

logger = logging.getLogger(__name__)


class SnippetFileStore:
    """File-backed handle for a single snippet store document.

    Parameters
    ----------
    store_path:
        Path to the JSON store file.  Its parent directory is created on the
        first write, not on construction, so loading a store that was never
        saved has no side effects.
    """

    def __init__(self, store_path: str | os.PathLike[str]) -> None:
        self._path = Path(store_path).expanduser().resolve()

    # ------------------------------------------------------------------
    # Public API -- Persistence
    # ------------------------------------------------------------------

    def load(self) -> SnippetStore:
        """Load the store snapshot from disk.

        Returns
        -------
        SnippetStore
            The persisted snapshot, or an empty one if the file does not
            exist yet.

        Raises
        ------
        CorruptStoreError
            The file is not valid JSON or does not describe a valid store.
        StorageIOError
            The file exists but could not be read.
        """
        if not self._path.exists():
            logger.debug(
                "No snippet store at %s. Starting with an empty store.",
                self._path,
            )
            return SnippetStore()

        try:
            with open(self._path, "r", encoding="utf-8") as fp:
                data = json.load(fp)
        except json.JSONDecodeError as exc:
            logger.debug("Corrupt JSON in %s.", self._path, exc_info=True)
            raise CorruptStoreError(str(self._path), str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise CorruptStoreError(str(self._path), str(exc)) from exc
        except OSError as exc:
            raise StorageIOError(
                str(self._path), "Error reading snippets file"
            ) from exc

        if not isinstance(data, dict):
            raise CorruptStoreError(
                str(self._path), "expected a JSON object at the top level"
            )

        try:
            store = SnippetStore.from_json_dict(data)
        except ValidationError as exc:
            logger.debug(
                "Invalid snippet store in %s.", self._path, exc_info=True
            )
            raise CorruptStoreError(str(self._path), _first_error(exc)) from exc

        logger.debug("Loaded %d snippets from %s", len(store), self._path)
        return store

    def save(self, store: SnippetStore) -> Path:
        """Persist *store* to disk, replacing the previous document.

        Returns
        -------
        Path
            The path to the written file.

        Raises
        ------
        StorageIOError
            The file could not be written.  The previous document, if any,
            is left untouched.
        """
        try:
            self._atomic_write(self._path, store.to_json_dict())
        except OSError as exc:
            raise StorageIOError(
                str(self._path), "Error writing snippets to file"
            ) from exc
        logger.debug("Saved %d snippets to %s", len(store), self._path)
        return self._path

    # ------------------------------------------------------------------
    # Public API -- Snippet operations
    # ------------------------------------------------------------------

    def insert(
        self, store: SnippetStore, tag: str, code: str
    ) -> tuple[SnippetStore, Snippet]:
        """Append a new snippet and persist the updated store.

        Raises
        ------
        DuplicateTagError
            A snippet with *tag* already exists.  Nothing is written.
        StorageIOError
            The updated store could not be written.
        """
        updated, snippet = store.add(tag, code)
        self.save(updated)
        logger.info("Saved snippet '%s' to %s", tag, self._path)
        return updated, snippet

    def find_by_tag(self, store: SnippetStore, tag: str) -> Optional[Snippet]:
        """Return the snippet with exactly *tag*, or *None*."""
        return store.find(tag)

    def get(self, store: SnippetStore, tag: str) -> Snippet:
        """Return the snippet with *tag* or raise SnippetNotFoundError."""
        return store.get(tag)

    def delete_by_tag(
        self, store: SnippetStore, tag: str
    ) -> tuple[SnippetStore, Snippet]:
        """Remove the snippet with *tag* and persist the updated store.

        Raises
        ------
        SnippetNotFoundError
            No snippet has *tag*.  Nothing is written.
        StorageIOError
            The updated store could not be written.
        """
        updated, removed = store.remove(tag)
        self.save(updated)
        logger.info("Deleted snippet '%s' from %s", tag, self._path)
        return updated, removed

    def list_all(self, store: SnippetStore) -> list[Snippet]:
        """Return every snippet in insertion order."""
        return list(store.snippets)

    # ------------------------------------------------------------------
    # Public API -- Introspection
    # ------------------------------------------------------------------

    @property
    def store_path(self) -> Path:
        """The resolved path of the store document."""
        return self._path

    def exists(self) -> bool:
        """Check whether the store document exists on disk."""
        return self._path.is_file()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _atomic_write(self, target: Path, data: dict) -> None:
        """Write *data* as formatted JSON to *target* atomically.

        The temp file is created in the same directory as *target* so the
        final ``os.replace`` stays on one filesystem.  On any failure before
        the rename the temp file is removed and *target* is left as it was.
        """
        target.parent.mkdir(parents=True, exist_ok=True)

        fd = None
        tmp_path: Optional[str] = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=".tmp_",
                suffix=".json",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                fd = None  # os.fdopen takes ownership of the fd
                json.dump(data, fp, indent=2, ensure_ascii=False)
                fp.write("\n")
                fp.flush()
                os.fsync(fp.fileno())

            os.replace(tmp_path, str(target))
            tmp_path = None

        except BaseException:
            if fd is not None:
                os.close(fd)
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise


def _first_error(exc: ValidationError) -> str:
    """Summarise a pydantic ValidationError as one line."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    if location:
        return f"{location}: {message}"
    return message
