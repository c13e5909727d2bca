"""
Utilities Module for Client Generation

This module provides the generated-file record, disk writing and string case
conversions used throughout the generator.
"""

from .file_utils import FileInfo, check_unique_filenames, resolve_output_paths, write_files_to_disk
from .string_case import (
    apply_naming_convention,
    camelcase,
    constcase,
    escape_rust_keyword,
    kebabcase,
    normalize_rust_identifier,
    pascalcase,
    snakecase,
    spinalcase,
    ts_enum_variant_name,
    ts_identifier,
    ts_type_name,
)

__all__ = [
    "FileInfo",
    "check_unique_filenames",
    "apply_naming_convention",
    "camelcase",
    "constcase",
    "escape_rust_keyword",
    "kebabcase",
    "normalize_rust_identifier",
    "pascalcase",
    "resolve_output_paths",
    "snakecase",
    "spinalcase",
    "ts_enum_variant_name",
    "ts_identifier",
    "ts_type_name",
    "write_files_to_disk",
]
