"""Click CLI commands for managing snippets.

Provides the ``snippet`` CLI entry point with subcommands:
- ``snippet save``   -- Save a line range (or a whole file) under a tag.
- ``snippet copy``   -- Copy a snippet's code to the clipboard.
- ``snippet show``   -- Print a snippet's code.
- ``snippet list``   -- List saved snippets (with --json-output).
- ``snippet delete`` -- Delete a snippet.
"""

from snippet_manager.cli.main import cli, copy, delete, list_snippets, save, show

__all__ = ["cli", "copy", "delete", "list_snippets", "save", "show"]
