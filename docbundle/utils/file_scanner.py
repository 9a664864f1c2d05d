"""
Directory walking for the docs tree.

The docs root holds one directory per library; each library has an ``input``
tree of raw pages and an optional ``output`` tree of transformed pages.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

# Extensions treated as documentation pages
MARKDOWN_EXTENSIONS = {".md", ".mdx"}


def is_markdown(path: Path) -> bool:
    return path.suffix in MARKDOWN_EXTENSIONS


def list_libraries(docs_dir: Path) -> List[Path]:
    """
    List library directories directly under the docs root.

    Hidden directories are not libraries.

    Args:
        docs_dir: Docs root

    Returns:
        Library directories sorted by name

    Raises:
        FileNotFoundError: If the docs root does not exist
    """
    docs_dir = Path(docs_dir)
    if not docs_dir.is_dir():
        raise FileNotFoundError(f"Docs directory does not exist: {docs_dir}")

    libraries = sorted(
        entry for entry in docs_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )
    logger.debug(f"Found {len(libraries)} libraries in {docs_dir}")
    return libraries


def list_files(directory: Path) -> List[Path]:
    """
    Recursively list every file under a directory.

    Hidden files are included so the cleaner can remove them. A missing
    directory yields an empty list; any other I/O error propagates.

    Args:
        directory: Directory to walk

    Returns:
        Files sorted by path
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(_walk_directory(directory))


def _walk_directory(directory: Path) -> Iterator[Path]:
    for item in directory.iterdir():
        if item.is_dir():
            yield from _walk_directory(item)
        elif item.is_file():
            yield item


def select_libraries(docs_dir: Path, names: Optional[Iterable[str]] = None) -> List[Path]:
    """
    List library directories, optionally restricted to ``names``.

    Raises:
        FileNotFoundError: If the docs root does not exist
        ValueError: If a requested library has no directory
    """
    libraries = list_libraries(docs_dir)
    if names is None:
        return libraries

    wanted = list(dict.fromkeys(names))
    by_name = {library.name: library for library in libraries}
    unknown = [name for name in wanted if name not in by_name]
    if unknown:
        raise ValueError(f"Unknown libraries: {', '.join(unknown)}")

    return [by_name[name] for name in sorted(wanted)]
