import pytest

from docbundle.llm import TextGenerator
from docbundle.pipeline import DocumentationBuildPipeline
from tests.conftest import FakeProvider, write


@pytest.mark.asyncio
async def test_build_runs_all_steps(config):
    write(config.root, "docs/foo/input/a.md", "A")
    write(config.root, "docs/foo/input/b.md", "B")
    write(config.root, "docs/foo/input/stray.txt", "x")
    provider = FakeProvider(reply=lambda prompt: prompt.lower())

    summary = await DocumentationBuildPipeline(config, TextGenerator(provider)).run()

    assert summary.clean.removed == ["docs/foo/input/stray.txt"]
    assert summary.transform.transformed == 2
    assert (config.root / "public/docs/foo.md").read_text() == "b\n\na"
    assert summary.duration_seconds >= 0


@pytest.mark.asyncio
async def test_build_writes_transcript_when_configured(config):
    write(config.root, "docs/foo/input/a.md", "A")
    config = config.model_copy(update={"transcript_log": "logs/transform.jsonl"})

    await DocumentationBuildPipeline(config, TextGenerator(FakeProvider())).run()

    assert len((config.root / "logs/transform.jsonl").read_text().splitlines()) == 1
