"""Result type for a single text-generation attempt."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CompletionStatus(str, Enum):
    OK = "ok"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    FAILED = "failed"


@dataclass
class CompletionResult:
    """Outcome of streaming one request through one provider.

    Only ``OK`` results carry text; the other statuses carry the provider
    exception so the caller can chain it when giving up.
    """
    status: CompletionStatus
    provider: str
    model: str
    text: str = ""
    error: Optional[BaseException] = None
    used_fallback: bool = False

    @classmethod
    def ok(cls, provider: str, model: str, text: str) -> "CompletionResult":
        return cls(CompletionStatus.OK, provider, model, text=text)

    @classmethod
    def size_limit_exceeded(cls, provider: str, model: str, error: BaseException) -> "CompletionResult":
        return cls(CompletionStatus.SIZE_LIMIT_EXCEEDED, provider, model, error=error)

    @classmethod
    def failed(cls, provider: str, model: str, error: BaseException) -> "CompletionResult":
        return cls(CompletionStatus.FAILED, provider, model, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is CompletionStatus.OK
