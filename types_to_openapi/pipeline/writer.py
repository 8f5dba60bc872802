"""
Atomic file writer for generated documents.

Ensures that file writes are atomic so an interrupted run never leaves
a truncated document behind.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import OutputValidationError


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(
        self,
        validate_json: Callable[[str], None] | None = None,
        validate_html: Callable[[str], None] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            validate_json: Optional validation function for JSON documents
            validate_html: Optional validation function for HTML pages
        """
        self._validate_json = validate_json or self._default_validate_json
        self._validate_html = validate_html or self._default_validate_html

    def write(self, path: Path, content: str, fmt: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            fmt: Content format for validation ("json" or "html")
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate_content(content, fmt)

            temp_path.replace(path)

        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass  # Best effort cleanup
            raise

    def _validate_content(self, content: str, fmt: str) -> None:
        if fmt == "json":
            self._validate_json(content)
        elif fmt == "html":
            self._validate_html(content)

    def _default_validate_json(self, content: str) -> None:
        try:
            document = json.loads(content)
        except ValueError as e:
            raise OutputValidationError(f"Generated document is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise OutputValidationError("Generated document must be a JSON object")

    def _default_validate_html(self, content: str) -> None:
        if "<html" not in content or "</html>" not in content:
            raise OutputValidationError("Generated page is not an HTML document")
