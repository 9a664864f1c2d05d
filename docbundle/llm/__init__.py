"""External text transform: providers, result type and fallback dispatch."""

from .generator import ProgressSink, TextGenerator, collect_stream, complete
from .prompt import DEFAULT_SYSTEM_PROMPT, load_system_prompt
from .providers import (
    ClaudeAgentProvider,
    OpenAICompatibleProvider,
    TextProvider,
    build_provider,
)
from .results import CompletionResult, CompletionStatus

__all__ = [
    "ClaudeAgentProvider",
    "CompletionResult",
    "CompletionStatus",
    "DEFAULT_SYSTEM_PROMPT",
    "OpenAICompatibleProvider",
    "ProgressSink",
    "TextGenerator",
    "TextProvider",
    "build_provider",
    "collect_stream",
    "complete",
    "load_system_prompt",
]
