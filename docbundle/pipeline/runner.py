"""
Pipeline runner that chains the three build steps.

This module coordinates:
1. Cleaning library input trees
2. Transforming changed pages through the text generator
3. Compiling one Markdown file per library
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from docbundle.cache import LockCache
from docbundle.config import PipelineConfig
from docbundle.hooks import TranscriptLogger
from docbundle.llm import ProgressSink, TextGenerator
from docbundle.pipeline.cleaner import clean
from docbundle.pipeline.compiler import compile_docs
from docbundle.pipeline.transformer import DocumentTransformer
from docbundle.schemas import BuildSummary

logger = logging.getLogger(__name__)


class DocumentationBuildPipeline:
    """Runs clean -> transform -> compile for a docs tree."""

    def __init__(
        self,
        config: PipelineConfig,
        generator: TextGenerator,
        sink: Optional[ProgressSink] = None,
        cache: Optional[LockCache] = None,
    ):
        """
        Initialize the build pipeline.

        Args:
            config: Pipeline configuration
            generator: Text generator for the transform step
            sink: Progress sink for streamed chunks
            cache: Lock cache (default: loaded from config.lock_path)
        """
        self.config = config
        self.generator = generator
        self.sink = sink
        self.cache = cache

    async def run(
        self,
        force: bool = False,
        libraries: Optional[Iterable[str]] = None,
    ) -> BuildSummary:
        """
        Run all three steps in order; any failure stops the build.

        Args:
            force: Reprocess every page regardless of the lock file
            libraries: Restrict to these library names (default: all)

        Returns:
            BuildSummary with each step's report
        """
        start_time = datetime.now()
        selected = list(libraries) if libraries is not None else None

        logger.info("[1/3] Cleaning input trees...")
        clean_report = clean(self.config.docs_path, selected, root=self.config.root)

        logger.info("[2/3] Transforming changed pages...")
        transcript = (
            TranscriptLogger(self.config.transcript_path)
            if self.config.transcript_path else None
        )
        transformer = DocumentTransformer(
            config=self.config,
            generator=self.generator,
            cache=self.cache,
            sink=self.sink,
            transcript=transcript,
        )
        transform_report = await transformer.run(libraries=selected, force=force)

        logger.info("[3/3] Compiling libraries...")
        compile_report = compile_docs(
            self.config.docs_path,
            self.config.public_path,
            selected,
            root=self.config.root,
        )

        duration = (datetime.now() - start_time).total_seconds()
        logger.info(f"Build finished in {duration:.1f}s")

        return BuildSummary(
            clean=clean_report,
            transform=transform_report,
            compile=compile_report,
            duration_seconds=duration,
        )
