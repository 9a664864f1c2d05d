from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest

from docbundle.config import PipelineConfig
from docbundle.llm import TextProvider


class FakeSizeLimitError(Exception):
    """Stands in for a provider's 'request too large' response."""


class FakeProvider(TextProvider):
    """
    Provider double that records every request.

    Replies are produced by ``reply(prompt)`` and streamed in two chunks.
    """

    def __init__(
        self,
        name: str = "fake",
        model: str = "fake-1",
        reply: Optional[Callable[[str], str]] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(model)
        self.name = name
        self.reply = reply or (lambda prompt: f"# Cleaned\n\n{prompt}")
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def stream(self, system: str, prompt: str):
        self.calls.append((system, prompt))
        if self.error is not None:
            raise self.error
        text = self.reply(prompt)
        middle = len(text) // 2
        for chunk in (text[:middle], text[middle:]):
            if chunk:
                yield chunk

    def is_size_limit_error(self, error: BaseException) -> bool:
        return isinstance(error, FakeSizeLimitError)


def write(root: Path, relative: str, text: str = "") -> Path:
    """Create ``root/relative`` with ``text``, making parent directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path: Path) -> PipelineConfig:
    (tmp_path / "docs").mkdir()
    return PipelineConfig(root=tmp_path, secondary=None)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
