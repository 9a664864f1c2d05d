"""System prompt used for the document transform."""

from pathlib import Path
from typing import Optional


DEFAULT_SYSTEM_PROMPT = """You are a technical writer preparing library documentation for use as LLM context.

You receive one documentation page in Markdown or MDX. Rewrite it as clean, self-contained Markdown:

- Keep every heading, explanation, API name, parameter and code example that carries information
- Convert JSX/MDX components, HTML tags and admonition syntax into plain Markdown equivalents
- Drop imports of UI components, front matter, navigation links, badges and other site chrome
- Keep fenced code blocks verbatim and preserve their language tags
- Do not add commentary, summaries or content that is not in the page

Respond with the rewritten Markdown only.
"""


def load_system_prompt(prompt_file: Optional[Path] = None) -> str:
    """
    Load the system prompt template.

    Args:
        prompt_file: Template file; the built-in prompt is used when None

    Returns:
        Prompt text

    Raises:
        FileNotFoundError: If a configured template file is missing
    """
    if prompt_file is None:
        return DEFAULT_SYSTEM_PROMPT
    return Path(prompt_file).read_text(encoding="utf-8")
