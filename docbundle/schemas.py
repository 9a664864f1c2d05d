"""
Pydantic schemas for pipeline step results.

Each pipeline step returns one of these reports so the CLI and the build
runner can summarise a run without re-reading the filesystem.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ============================================================================
# CLEANER
# ============================================================================

class CleanReport(BaseModel):
    """Files removed from library input trees."""
    libraries: List[str] = Field(default_factory=list, description="Libraries whose input tree was scanned")
    removed: List[str] = Field(default_factory=list, description="Root-relative paths that were deleted")
    skipped_libraries: List[str] = Field(default_factory=list, description="Libraries without an input directory")


# ============================================================================
# TRANSFORMER
# ============================================================================

class FileOutcome(BaseModel):
    """What happened to a single input document."""
    path: str = Field(description="Root-relative input path (the lock key)")
    status: Literal["transformed", "passthrough", "skipped"]
    checksum: str = Field(description="MD5 hex digest of the input text")
    output_path: Optional[str] = Field(None, description="Root-relative output path when written")
    provider: Optional[str] = Field(None, description="Provider that produced the text")
    model: Optional[str] = Field(None, description="Model that produced the text")
    used_fallback: bool = Field(False, description="Whether the secondary provider was used")


class TransformReport(BaseModel):
    """Summary of a transformer run."""
    files: List[FileOutcome] = Field(default_factory=list)
    skipped_libraries: List[str] = Field(default_factory=list)

    @property
    def transformed(self) -> int:
        return sum(1 for f in self.files if f.status == "transformed")

    @property
    def passthrough(self) -> int:
        return sum(1 for f in self.files if f.status == "passthrough")

    @property
    def skipped(self) -> int:
        return sum(1 for f in self.files if f.status == "skipped")

    @property
    def fallbacks(self) -> int:
        return sum(1 for f in self.files if f.used_fallback)


# ============================================================================
# COMPILER
# ============================================================================

class CompiledLibrary(BaseModel):
    """One compiled per-library Markdown file."""
    library: str
    source: Literal["output", "input", "none"] = Field(description="Subtree the pages were taken from")
    files: List[str] = Field(default_factory=list, description="Root-relative pages in concatenation order")
    target: str = Field(description="Root-relative path of the compiled file")
    characters: int = Field(0, description="Length of the compiled text")


class CompileReport(BaseModel):
    """Summary of a compiler run."""
    libraries: List[CompiledLibrary] = Field(default_factory=list)


# ============================================================================
# STATUS / BUILD
# ============================================================================

class LibraryStatus(BaseModel):
    """Snapshot of one library's documentation tree."""
    library: str
    input_files: int = 0
    markdown_inputs: int = 0
    output_files: int = 0
    locked_files: int = Field(0, description="Markdown inputs whose checksum matches the lock file")
    compiled: bool = Field(False, description="Whether public/docs/<library>.md exists")


class BuildSummary(BaseModel):
    """Result of running clean, transform and compile in sequence."""
    clean: CleanReport
    transform: TransformReport
    compile: CompileReport
    duration_seconds: float
