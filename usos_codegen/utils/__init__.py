"""
Utilities Module for Python Client Generation

This module provides file operations and string case conversions
used during client generation.
"""

from .string_case import (
    escape_python_keyword,
    is_python_keyword,
    normalize_python_identifier,
    pascalcase,
    python_identifier,
    snakecase,
)

__all__ = [
    "escape_python_keyword",
    "is_python_keyword",
    "normalize_python_identifier",
    "pascalcase",
    "python_identifier",
    "snakecase",
    "write_files_to_disk",
]
