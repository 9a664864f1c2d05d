"""Compiler step: concatenate each library's pages into one Markdown file."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from docbundle.schemas import CompiledLibrary, CompileReport
from docbundle.utils import display_path, is_markdown, list_files, select_libraries

logger = logging.getLogger(__name__)

SEPARATOR = "\n\n"


def select_sources(library_dir: Path) -> Tuple[str, List[Path]]:
    """
    Pick the pages to compile for one library.

    ``output`` wins as soon as it holds any file; otherwise ``input`` is used.
    Non-Markdown files are then dropped and the rest is ordered by descending
    library-relative path (whole-path string comparison).

    Returns:
        (source subtree name, ordered pages)
    """
    output_files = list_files(library_dir / "output")
    if output_files:
        source, files = "output", output_files
    else:
        input_files = list_files(library_dir / "input")
        source, files = ("input", input_files) if input_files else ("none", [])

    pages = [file for file in files if is_markdown(file)]
    pages.sort(key=lambda file: file.relative_to(library_dir).as_posix(), reverse=True)
    return source, pages


def compile_library(library_dir: Path, public_dir: Path, root: Path) -> CompiledLibrary:
    """Write ``<public_dir>/<library>.md`` for one library."""
    source, pages = select_sources(library_dir)
    text = SEPARATOR.join(page.read_text(encoding="utf-8") for page in pages)

    target = public_dir / f"{library_dir.name}.md"
    target.write_text(text, encoding="utf-8")

    logger.info(f"Compiled {library_dir.name}: {len(pages)} pages from {source} -> {target}")
    return CompiledLibrary(
        library=library_dir.name,
        source=source,
        files=[display_path(page, root) for page in pages],
        target=display_path(target, root),
        characters=len(text),
    )


def compile_docs(
    docs_dir: Path,
    public_dir: Path,
    libraries: Optional[Iterable[str]] = None,
    root: Optional[Path] = None,
) -> CompileReport:
    """
    Regenerate every library's compiled file.

    Args:
        docs_dir: Docs root
        public_dir: Directory receiving ``<library>.md`` files (created if missing)
        libraries: Restrict to these library names (default: all)
        root: Base for the paths in the report (default: parent of docs_dir)

    Returns:
        CompileReport with one entry per library
    """
    docs_dir = Path(docs_dir)
    public_dir = Path(public_dir)
    root = Path(root) if root else docs_dir.parent

    public_dir.mkdir(parents=True, exist_ok=True)

    report = CompileReport()
    for library in select_libraries(docs_dir, libraries):
        report.libraries.append(compile_library(library, public_dir, root))

    return report
