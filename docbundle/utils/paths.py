"""Path helpers for mapping input documents to their output locations."""

from pathlib import Path, PurePath
from typing import Union


PathLike = Union[str, PurePath]


def replace_input_with_output(file_path: PathLike, segment: int = 2) -> Path:
    """
    Map an input document path to its mirrored output path.

    The path segment at ``segment`` is swapped from ``input`` to ``output``
    and the suffix is forced to ``.md``. With the default index this expects
    the ``docs/<library>/input/...`` shape; any other shape only gets the
    suffix change, so callers with a deeper docs root must pass the index
    of their ``input`` segment.

    Args:
        file_path: Document path, usually relative to the project root
        segment: Index of the ``input`` segment (default: 2)

    Returns:
        Output path with ``.md`` suffix

    Example:
        >>> replace_input_with_output("docs/reactjs/input/guides/intro.mdx")
        PosixPath('docs/reactjs/output/guides/intro.md')
    """
    parts = list(Path(file_path).parts)

    if len(parts) > segment and parts[segment] == "input":
        parts[segment] = "output"

    return Path(*parts).with_suffix(".md")


def lock_key(file_path: PathLike, root: PathLike) -> str:
    """Root-relative POSIX path used as the lock file key."""
    return Path(file_path).relative_to(root).as_posix()


def display_path(file_path: PathLike, root: PathLike) -> str:
    """Root-relative POSIX path when possible, absolute POSIX path otherwise."""
    try:
        return lock_key(file_path, root)
    except ValueError:
        return Path(file_path).as_posix()
