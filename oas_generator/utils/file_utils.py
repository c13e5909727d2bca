"""
File utilities for the OAS generator.

This module provides the generated-file record and the category-aware
writer used by the generator driver.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from oas_generator.constants import FileCategory
from oas_generator.errors import EmissionError, FileSystemWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """A generated file: relative name, encoded content and output category."""

    filename: str
    content: bytes
    category: FileCategory

    @classmethod
    def from_text(cls, filename: str, text: str, category: FileCategory) -> FileInfo:
        return cls(filename=filename, content=text.encode("utf-8"), category=category)

    @property
    def relative_path(self) -> Path:
        """Path of the file relative to the output directory."""
        subdirectory = self.category.subdirectory
        return Path(subdirectory) / self.filename if subdirectory else Path(self.filename)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


def resolve_output_paths(files: list[FileInfo], output_dir: Path) -> dict[Path, bytes]:
    """Map generated files onto absolute output paths.

    Args:
        files: Generated files.
        output_dir: Root output directory.

    Returns:
        Dictionary mapping file paths to their content, in input order.
    """
    return {output_dir / file.relative_path: file.content for file in files}


def write_files_to_disk(files: dict[Path, bytes]) -> None:
    """Write generated files to disk.

    Args:
        files: Dictionary mapping file paths to their content.

    Raises:
        FileSystemWriteError: If a directory or file cannot be written.
    """
    for path, content in files.items():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise FileSystemWriteError(str(e), element=str(path)) from e
        logger.debug("Wrote %s (%d bytes)", path, len(content))


def check_unique_filenames(files: Iterable[FileInfo]) -> None:
    """Raise ``EmissionError`` when two files of one category share a filename."""
    seen: set[tuple[FileCategory, str]] = set()
    for file in files:
        key = (file.category, file.filename)
        if key in seen:
            msg = f"duplicate {file.category.value} filename"
            raise EmissionError(msg, element=file.filename)
        seen.add(key)
