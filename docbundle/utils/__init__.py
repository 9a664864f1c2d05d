"""Filesystem helpers shared by the pipeline steps."""

from .file_scanner import (
    MARKDOWN_EXTENSIONS,
    is_markdown,
    list_files,
    list_libraries,
    select_libraries,
)
from .paths import display_path, lock_key, replace_input_with_output

__all__ = [
    "MARKDOWN_EXTENSIONS",
    "display_path",
    "is_markdown",
    "list_files",
    "list_libraries",
    "lock_key",
    "replace_input_with_output",
    "select_libraries",
]
