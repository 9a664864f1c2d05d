"""Cleaner step: drop non-Markdown artifacts from library input trees."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from docbundle.schemas import CleanReport
from docbundle.utils import display_path, is_markdown, list_files, select_libraries

logger = logging.getLogger(__name__)


def clean(
    docs_dir: Path,
    libraries: Optional[Iterable[str]] = None,
    root: Optional[Path] = None,
) -> CleanReport:
    """
    Delete every non-Markdown file under each library's ``input`` tree.

    Only ``input`` trees are touched. Each deletion completes before the next
    one starts; a failed deletion aborts the run.

    Args:
        docs_dir: Docs root
        libraries: Restrict to these library names (default: all)
        root: Base for the paths in the report (default: parent of docs_dir)

    Returns:
        CleanReport listing removed files
    """
    docs_dir = Path(docs_dir)
    root = Path(root) if root else docs_dir.parent
    report = CleanReport()

    for library in select_libraries(docs_dir, libraries):
        input_dir = library / "input"
        if not input_dir.is_dir():
            logger.warning(f"No input directory for {library.name}, skipping")
            report.skipped_libraries.append(library.name)
            continue

        report.libraries.append(library.name)
        for file in list_files(input_dir):
            if is_markdown(file):
                continue
            file.unlink()
            relative = display_path(file, root)
            report.removed.append(relative)
            logger.info(f"Removed: {relative}")

    logger.info(f"Cleaned {len(report.libraries)} libraries, removed {len(report.removed)} files")
    return report
