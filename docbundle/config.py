"""
Pipeline configuration.

Settings come from ``.env.local`` / ``.env`` files and ``DOCBUNDLE_*``
environment variables. CLI options override them per invocation.
"""

import os
from pathlib import Path, PurePosixPath
from typing import Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from docbundle.utils import lock_key


ProviderKind = Literal["groq", "openai", "claude"]

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# Per-kind defaults for the model, API key variable and endpoint
PROVIDER_DEFAULTS: Dict[str, Dict[str, Optional[str]]] = {
    "groq": {"model": "llama-3.3-70b-versatile", "api_key_env": "GROQ_API_KEY", "base_url": GROQ_BASE_URL},
    "openai": {"model": "gpt-4o-mini", "api_key_env": "OPENAI_API_KEY", "base_url": None},
    "claude": {"model": "claude-sonnet-4-5", "api_key_env": None, "base_url": None},
}


class ProviderSettings(BaseModel):
    """Which provider and model a transform slot talks to."""
    kind: ProviderKind = Field(description="Provider family: groq, openai or claude")
    model: str = Field(description="Model identifier passed to the provider")
    api_key_env: Optional[str] = Field(None, description="Environment variable holding the API key")
    base_url: Optional[str] = Field(None, description="Override for OpenAI-compatible endpoints")

    def resolved_api_key_env(self) -> Optional[str]:
        return self.api_key_env or PROVIDER_DEFAULTS[self.kind]["api_key_env"]

    def resolved_base_url(self) -> Optional[str]:
        return self.base_url or PROVIDER_DEFAULTS[self.kind]["base_url"]


class PipelineConfig(BaseModel):
    """Filesystem layout and transform settings for one pipeline run."""
    root: Path = Field(default_factory=Path.cwd, description="Project root; lock keys are relative to it")
    docs_dir: Path = Field(Path("docs"), description="Docs root, relative to root")
    public_dir: Path = Field(Path("public/docs"), description="Compiled output directory, relative to root")
    lock_file: Path = Field(Path("io-lock.json"), description="Checksum lock file, relative to root")
    prompt_file: Optional[Path] = Field(None, description="System prompt template; built-in prompt if unset")
    transcript_log: Optional[Path] = Field(None, description="JSONL log of processed files")
    delay_seconds: float = Field(0.0, ge=0, description="Pause after each transformed file")
    passthrough_plain: bool = Field(False, description="Copy files without <...> markup verbatim")
    primary: ProviderSettings = Field(
        default_factory=lambda: ProviderSettings(kind="groq", model=PROVIDER_DEFAULTS["groq"]["model"])
    )
    secondary: Optional[ProviderSettings] = Field(
        default_factory=lambda: ProviderSettings(kind="openai", model=PROVIDER_DEFAULTS["openai"]["model"])
    )

    @field_validator("root", mode="after")
    @classmethod
    def resolve_root(cls, v: Path) -> Path:
        """Lock keys are computed relative to root, so it must be absolute."""
        return Path(v).resolve()

    @model_validator(mode="after")
    def check_docs_under_root(self) -> "PipelineConfig":
        """Lock keys are root-relative, so the docs root must sit inside root."""
        if not self.docs_path.is_relative_to(self.root):
            raise ValueError(f"docs_dir {self.docs_path} is outside the project root {self.root}")
        return self

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the project root, normalising ``..``."""
        path = Path(path)
        return Path(os.path.normpath(path if path.is_absolute() else self.root / path))

    @property
    def docs_path(self) -> Path:
        return self.resolve(self.docs_dir)

    @property
    def public_path(self) -> Path:
        return self.resolve(self.public_dir)

    @property
    def lock_path(self) -> Path:
        return self.resolve(self.lock_file)

    @property
    def prompt_path(self) -> Optional[Path]:
        return self.resolve(self.prompt_file) if self.prompt_file else None

    @property
    def transcript_path(self) -> Optional[Path]:
        return self.resolve(self.transcript_log) if self.transcript_log else None

    @property
    def input_segment(self) -> int:
        """Index of the ``input`` segment in a root-relative document path."""
        return len(PurePosixPath(lock_key(self.docs_path, self.root)).parts) + 1

    @classmethod
    def from_env(cls, root: Optional[Path] = None) -> "PipelineConfig":
        """
        Build a config from dotenv files and ``DOCBUNDLE_*`` variables.

        Args:
            root: Project root (default: current directory)

        Returns:
            PipelineConfig with environment overrides applied
        """
        root = Path(root).resolve() if root else Path.cwd()

        # .env.local wins over .env; load_dotenv never overrides set variables
        for name in (".env.local", ".env"):
            load_dotenv(root / name)

        env = os.environ
        values: Dict[str, object] = {"root": root}

        simple = {
            "DOCBUNDLE_DOCS_DIR": "docs_dir",
            "DOCBUNDLE_PUBLIC_DIR": "public_dir",
            "DOCBUNDLE_LOCK_FILE": "lock_file",
            "DOCBUNDLE_PROMPT_FILE": "prompt_file",
            "DOCBUNDLE_TRANSCRIPT_LOG": "transcript_log",
            "DOCBUNDLE_DELAY_SECONDS": "delay_seconds",
        }
        for var, field in simple.items():
            if env.get(var):
                values[field] = env[var]

        if env.get("DOCBUNDLE_PASSTHROUGH_PLAIN"):
            values["passthrough_plain"] = env["DOCBUNDLE_PASSTHROUGH_PLAIN"].lower() in {"1", "true", "yes"}

        primary = _provider_from_env("PRIMARY", cls.model_fields["primary"].default_factory())
        if primary is not None:
            values["primary"] = primary

        secondary_kind = env.get("DOCBUNDLE_SECONDARY_PROVIDER", "")
        if secondary_kind.lower() == "none":
            values["secondary"] = None
        else:
            secondary = _provider_from_env("SECONDARY", cls.model_fields["secondary"].default_factory())
            if secondary is not None:
                values["secondary"] = secondary

        return cls.model_validate(values)


def _provider_from_env(slot: str, default: ProviderSettings) -> Optional[ProviderSettings]:
    """Read ``DOCBUNDLE_<SLOT>_*`` overrides on top of a default provider."""
    prefix = f"DOCBUNDLE_{slot}_"
    overrides = {
        "kind": os.environ.get(prefix + "PROVIDER"),
        "model": os.environ.get(prefix + "MODEL"),
        "api_key_env": os.environ.get(prefix + "API_KEY_ENV"),
        "base_url": os.environ.get(prefix + "BASE_URL"),
    }
    overrides = {k: v for k, v in overrides.items() if v}
    if not overrides:
        return None

    data = default.model_dump()
    if "kind" in overrides and overrides["kind"] != default.kind:
        # Switching provider family drops the old family's model and endpoint/key hints
        family = PROVIDER_DEFAULTS.get(overrides["kind"], {})
        data.update({"model": family.get("model"), "api_key_env": None, "base_url": None})
    data.update(overrides)
    return ProviderSettings.model_validate(data)
