from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from guideline_qa.core.limits import Limits

BACKEND_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    openai_api_key: SecretStr | None = Field(None)
    openai_offline: bool = Field(False, alias="OPENAI_OFFLINE")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    guide_path: str = Field("data/guide.txt", alias="GUIDE_PATH")
    cors_origin: str = Field("*")
    app_env: str = Field("dev", alias="APP_ENV")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3001, alias="PORT")

    max_question_length: int = Field(500, alias="MAX_QUESTION_LENGTH")
    max_context_lines: int = Field(20, alias="MAX_CONTEXT_LINES")
    max_context_chars: int = Field(4000, alias="MAX_CONTEXT_CHARS")

    @field_validator("max_question_length", "max_context_lines", "max_context_chars")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("limits must be positive integers")
        return v

    @field_validator("app_env", mode="before")
    @classmethod
    def _normalize_env(cls, v: object) -> object:
        if isinstance(v, str):
            return (v.strip() or "dev").lower()
        return v

    @model_validator(mode="after")
    def _validate_env(self) -> "Settings":
        if self.app_env == "prod" and bool(self.openai_offline):
            raise ValueError("OPENAI_OFFLINE cannot be enabled in production (APP_ENV=prod)")
        return self

    def resolved_guide_path(self) -> Path:
        path = Path(self.guide_path).expanduser()
        return path if path.is_absolute() else BACKEND_DIR / path

    def limits(self) -> Limits:
        return Limits(
            max_question_length=self.max_question_length,
            max_context_lines=self.max_context_lines,
            max_context_chars=self.max_context_chars,
        )


settings = Settings()
