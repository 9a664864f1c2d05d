"""
Transformer step: checksum-gated rewrite of input pages through an LLM.

For every Markdown page under ``docs/<library>/input``:

1. Checksum the page text and compare it with the lock file entry
2. Skip the page if the checksum is unchanged
3. Otherwise stream the page through the text generator (with its
   size-limit fallback) and write the result to the mirrored ``output`` path
4. Record the new checksum and rewrite the lock file immediately

A crash or provider failure therefore loses at most the page in flight.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional

from docbundle.cache import LockCache, compute_checksum
from docbundle.config import PipelineConfig
from docbundle.errors import TransformError
from docbundle.hooks import TranscriptLogger
from docbundle.llm import ProgressSink, TextGenerator, load_system_prompt
from docbundle.schemas import FileOutcome, TransformReport
from docbundle.utils import (
    is_markdown,
    list_files,
    lock_key,
    replace_input_with_output,
    select_libraries,
)

logger = logging.getLogger(__name__)

# Anything that looks like an HTML/JSX tag
MARKUP_PATTERN = re.compile(r"<[^<>\n]+>")


def has_markup(text: str) -> bool:
    """Rough check for HTML/JSX markup; plain Markdown returns False."""
    return MARKUP_PATTERN.search(text) is not None


class DocumentTransformer:
    """Incrementally transforms library input pages into output pages."""

    def __init__(
        self,
        config: PipelineConfig,
        generator: TextGenerator,
        cache: Optional[LockCache] = None,
        sink: Optional[ProgressSink] = None,
        transcript: Optional[TranscriptLogger] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the transformer.

        Args:
            config: Pipeline configuration
            generator: Text generator used for every changed page
            cache: Lock cache (default: loaded from config.lock_path)
            sink: Progress sink receiving streamed chunks
            transcript: Optional JSONL transcript logger
            sleep: Awaitable used for the delay between processed pages
        """
        self.config = config
        self.generator = generator
        self.cache = cache if cache is not None else LockCache(config.lock_path).load()
        self.sink = sink
        self.transcript = transcript
        self._sleep = sleep

    def output_path_for(self, key: str) -> Path:
        """Root-relative output path for a lock key."""
        return replace_input_with_output(key, segment=self.config.input_segment)

    async def run(
        self,
        libraries: Optional[Iterable[str]] = None,
        force: bool = False,
    ) -> TransformReport:
        """
        Transform every changed page.

        Args:
            libraries: Restrict to these library names (default: all)
            force: Ignore the lock file and reprocess every page

        Returns:
            TransformReport with one outcome per Markdown page

        Raises:
            TransformError: If the generator fails for a page
        """
        system = load_system_prompt(self.config.prompt_path)
        report = TransformReport()

        for library in select_libraries(self.config.docs_path, libraries):
            input_dir = library / "input"
            if not input_dir.is_dir():
                logger.warning(f"No input directory for {library.name}, skipping")
                report.skipped_libraries.append(library.name)
                continue

            for file in list_files(input_dir):
                if not is_markdown(file):
                    continue

                outcome = await self.transform_file(file, system, force=force)
                report.files.append(outcome)

                # Rate limiting between external calls
                if outcome.status == "transformed" and self.config.delay_seconds:
                    await self._sleep(self.config.delay_seconds)

        logger.info(
            f"Transform complete: {report.transformed} transformed, "
            f"{report.passthrough} passed through, {report.skipped} unchanged"
        )
        return report

    async def transform_file(self, file: Path, system: str, force: bool = False) -> FileOutcome:
        """
        Process a single input page.

        Args:
            file: Absolute path of the input page
            system: System prompt text
            force: Reprocess even when the checksum matches

        Returns:
            FileOutcome describing what happened
        """
        key = lock_key(file, self.config.root)
        logger.info(f"Parsing: {key}")

        text = file.read_text(encoding="utf-8")
        checksum = compute_checksum(text)

        if not force and self.cache.is_current(key, checksum):
            logger.info(f"Skipped (unchanged): {key}")
            return FileOutcome(path=key, status="skipped", checksum=checksum)

        if self.config.passthrough_plain and not has_markup(text):
            status, result_text = "passthrough", text
            provider = model = None
            used_fallback = False
        else:
            try:
                result = await self.generator.generate(system, text, self.sink)
            except TransformError as e:
                e.path = key
                raise
            status, result_text = "transformed", result.text
            provider, model, used_fallback = result.provider, result.model, result.used_fallback

        output_key = self.output_path_for(key)
        output_file = self.config.root / output_key
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(result_text, encoding="utf-8")

        # Commit only after the output is on disk
        self.cache.update(key, checksum)
        self.cache.save()

        if self.transcript is not None:
            self.transcript.record(
                path=key,
                status=status,
                checksum=checksum,
                output_path=output_key.as_posix(),
                input_chars=len(text),
                output_chars=len(result_text),
                provider=provider,
                model=model,
                used_fallback=used_fallback,
            )

        logger.info(f"Done: {output_key.as_posix()}")
        return FileOutcome(
            path=key,
            status=status,
            checksum=checksum,
            output_path=output_key.as_posix(),
            provider=provider,
            model=model,
            used_fallback=used_fallback,
        )
