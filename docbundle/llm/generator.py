"""
Primary/secondary dispatch for the document transform.

The primary provider handles every request. Only when it reports that the
request is too large is the same system prompt and input sent, once, to the
secondary provider. Every other failure aborts.
"""

import logging
from typing import AsyncIterable, Callable, Optional

from docbundle.errors import EmptyCompletionError, TransformError
from docbundle.llm.providers import TextProvider
from docbundle.llm.results import CompletionResult, CompletionStatus

logger = logging.getLogger(__name__)

ProgressSink = Callable[[str], None]


async def collect_stream(chunks: AsyncIterable[str], sink: Optional[ProgressSink] = None) -> str:
    """Accumulate a chunk stream, forwarding each chunk to ``sink``."""
    parts = []
    async for chunk in chunks:
        parts.append(chunk)
        if sink is not None:
            sink(chunk)
    return "".join(parts)


async def complete(
    provider: TextProvider,
    system: str,
    prompt: str,
    sink: Optional[ProgressSink] = None,
) -> CompletionResult:
    """
    Stream one request through one provider.

    Args:
        provider: Provider to call
        system: System instructions
        prompt: Document text
        sink: Optional progress sink receiving each chunk

    Returns:
        CompletionResult; provider exceptions are captured, never raised.
        A reply with no text is FAILED so it never overwrites a page.
    """
    try:
        text = await collect_stream(provider.stream(system, prompt), sink)
    except Exception as e:
        if provider.is_size_limit_error(e):
            return CompletionResult.size_limit_exceeded(provider.name, provider.model, e)
        return CompletionResult.failed(provider.name, provider.model, e)

    if not text.strip():
        error = EmptyCompletionError(f"{provider.name} ({provider.model}) returned no text")
        return CompletionResult.failed(provider.name, provider.model, error)

    return CompletionResult.ok(provider.name, provider.model, text)


class TextGenerator:
    """Runs the transform with an optional size-limit fallback."""

    def __init__(self, primary: TextProvider, secondary: Optional[TextProvider] = None):
        self.primary = primary
        self.secondary = secondary

    async def generate(
        self,
        system: str,
        prompt: str,
        sink: Optional[ProgressSink] = None,
    ) -> CompletionResult:
        """
        Transform ``prompt`` under ``system`` instructions.

        Returns:
            An OK CompletionResult; ``used_fallback`` tells which provider won

        Raises:
            TransformError: If no provider produced text
        """
        logger.info(f"Trying {self.primary.name} ({self.primary.model})...")
        result = await complete(self.primary, system, prompt, sink)

        if result.status is CompletionStatus.SIZE_LIMIT_EXCEEDED and self.secondary is not None:
            logger.warning(
                f"Request too large for {self.primary.name} ({self.primary.model}), "
                f"falling back to {self.secondary.name} ({self.secondary.model})"
            )
            result = await complete(self.secondary, system, prompt, sink)
            result.used_fallback = True

        if not result.is_ok:
            reason = "request too large" if result.status is CompletionStatus.SIZE_LIMIT_EXCEEDED else "request failed"
            raise TransformError(
                f"{result.provider} ({result.model}) {reason}: {result.error}",
                provider=result.provider,
            ) from result.error

        return result
