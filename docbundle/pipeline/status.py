"""Per-library status snapshot for the ``libraries`` command."""

from typing import List

from docbundle.cache import LockCache, compute_checksum
from docbundle.config import PipelineConfig
from docbundle.schemas import LibraryStatus
from docbundle.utils import is_markdown, list_files, list_libraries, lock_key


def collect_status(config: PipelineConfig, cache: LockCache) -> List[LibraryStatus]:
    """
    Summarise every library's input/output trees and lock coverage.

    Args:
        config: Pipeline configuration
        cache: Loaded lock cache

    Returns:
        One LibraryStatus per library, sorted by name
    """
    statuses = []

    for library in list_libraries(config.docs_path):
        inputs = list_files(library / "input")
        markdown_inputs = [file for file in inputs if is_markdown(file)]

        locked = 0
        for file in markdown_inputs:
            checksum = compute_checksum(file.read_text(encoding="utf-8"))
            if cache.is_current(lock_key(file, config.root), checksum):
                locked += 1

        statuses.append(LibraryStatus(
            library=library.name,
            input_files=len(inputs),
            markdown_inputs=len(markdown_inputs),
            output_files=len(list_files(library / "output")),
            locked_files=locked,
            compiled=(config.public_path / f"{library.name}.md").exists(),
        ))

    return statuses
