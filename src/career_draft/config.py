"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    timeout: int = 60
    max_tokens: int = 4096


@dataclass(frozen=True)
class GenerationConfig:
    questions_per_category: int = 5
    extra_instruction: str = ""


@dataclass(frozen=True)
class ValidationConfig:
    required_interview_questions: int = 5


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.career-draft/drafts.db"
    log_db_path: str = "~/.career-draft/generation.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_log_db_path(self) -> Path:
        return Path(self.log_db_path).expanduser()


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = "http://localhost:3000"
    timeout: float = 20.0


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        generation=GenerationConfig(**raw.get("generation", {})),
        validation=ValidationConfig(**raw.get("validation", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        api=ApiConfig(**raw.get("api", {})),
    )
