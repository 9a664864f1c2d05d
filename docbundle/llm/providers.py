"""
Streaming text providers.

Every provider turns ``(system, prompt)`` into a one-shot async iterator of
text chunks and classifies its own exceptions, so the generator never has to
match on error message wording.
"""

import logging
import os
from typing import AsyncIterator, Optional

from claude_agent_sdk import (
    ClaudeSDKClient,
    ClaudeAgentOptions,
    AssistantMessage,
    ResultError,
    ResultMessage,
    TextBlock,
)
from openai import AsyncOpenAI, APIStatusError

from docbundle.config import ProviderSettings
from docbundle.errors import ClaudeResponseError, ProviderConfigError

logger = logging.getLogger(__name__)

# Error codes OpenAI-compatible APIs use for oversized requests
SIZE_LIMIT_CODES = {"context_length_exceeded", "request_too_large"}


class TextProvider:
    """Base class for providers used by the document transform."""

    name: str = "provider"

    def __init__(self, model: str):
        self.model = model

    def stream(self, system: str, prompt: str) -> AsyncIterator[str]:
        raise NotImplementedError

    def is_size_limit_error(self, error: BaseException) -> bool:
        """Whether ``error`` means the request was too large for this model."""
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, model={self.model!r})"


class OpenAICompatibleProvider(TextProvider):
    """Streaming chat completions through the ``openai`` SDK.

    Also serves Groq, which exposes an OpenAI-compatible endpoint.
    """

    def __init__(
        self,
        model: str,
        name: str = "openai",
        api_key: Optional[str] = None,
        api_key_env: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        super().__init__(model)
        self.name = name
        self.api_key = api_key
        self.api_key_env = api_key_env
        self.base_url = base_url
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise ProviderConfigError(
                    f"No API key for provider '{self.name}'"
                    + (f" (set {self.api_key_env})" if self.api_key_env else "")
                )
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def stream(self, system: str, prompt: str) -> AsyncIterator[str]:
        client = self._get_client()
        logger.debug(f"Streaming from {self.name} ({self.model})")

        stream = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    def is_size_limit_error(self, error: BaseException) -> bool:
        if not isinstance(error, APIStatusError):
            return False
        if error.status_code == 413:
            return True
        return getattr(error, "code", None) in SIZE_LIMIT_CODES


class ClaudeAgentProvider(TextProvider):
    """Single-turn completions through the Claude Agent SDK.

    ``tools=[]`` removes every built-in tool from the session, so the model
    can only answer with text. An error turn (``AssistantMessage.error``) or
    an error result (``ResultMessage.is_error``) raises ClaudeResponseError
    instead of being streamed as page text.
    """

    name = "claude"

    def __init__(self, model: str, client_factory=ClaudeSDKClient):
        super().__init__(model)
        self._client_factory = client_factory

    async def stream(self, system: str, prompt: str) -> AsyncIterator[str]:
        options = ClaudeAgentOptions(
            system_prompt=system,
            model=self.model,
            tools=[],
            max_turns=1,
        )
        error_type = None
        error_text = ""

        async with self._client_factory(options=options) as client:
            await client.query(prompt)

            async for message in client.receive_response():
                if isinstance(message, AssistantMessage):
                    texts = [block.text for block in message.content if isinstance(block, TextBlock)]
                    if message.error:
                        # Wait for the result message, which carries the HTTP status
                        error_type = message.error
                        error_text = "".join(texts)
                        continue
                    for text in texts:
                        yield text
                elif isinstance(message, ResultMessage) and message.is_error:
                    raise ClaudeResponseError(
                        error_text or message.result or f"Claude run failed ({message.subtype})",
                        error_type=error_type,
                        api_error_status=message.api_error_status,
                    )

        if error_type is not None:
            raise ClaudeResponseError(error_text or error_type, error_type=error_type)

    def is_size_limit_error(self, error: BaseException) -> bool:
        if isinstance(error, (ClaudeResponseError, ResultError)):
            if error.api_error_status is not None:
                return error.api_error_status == 413
            # Older CLIs report no status; an invalid request is the overflow case
            return getattr(error, "error_type", None) == "invalid_request"
        return False


def build_provider(settings: ProviderSettings) -> TextProvider:
    """
    Build a provider from its settings.

    API keys are read from the environment variable named in the settings.
    A missing key only fails when the provider is actually called.

    Args:
        settings: Provider kind, model and endpoint hints

    Returns:
        Configured TextProvider
    """
    if settings.kind == "claude":
        return ClaudeAgentProvider(model=settings.model)

    if settings.kind in ("groq", "openai"):
        api_key_env = settings.resolved_api_key_env()
        return OpenAICompatibleProvider(
            model=settings.model,
            name=settings.kind,
            api_key=os.environ.get(api_key_env) if api_key_env else None,
            api_key_env=api_key_env,
            base_url=settings.resolved_base_url(),
        )

    raise ProviderConfigError(f"Unknown provider kind: {settings.kind}")
