"""Pydantic configuration schema for YAML input."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, ValidationError


class OracleConfig(BaseModel):
    api_key: str | None = None
    model: str = "gemini-2.5-flash"
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 30.0


class InterviewConfig(BaseModel):
    max_workers: int = Field(default=1, ge=1)


class CacheConfig(BaseModel):
    ttl_seconds: float = Field(default=3600.0, gt=0)
    max_entries: int = Field(default=1024, ge=1)


class SMTPConfig(BaseModel):
    host: str = "localhost"
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    sender_name: str = "Interview Gate"
    sender_email: str = "no-reply@localhost"
    timeout: float = 30.0


class DispatchConfig(BaseModel):
    delay_seconds: float = Field(default=1.0, ge=0)
    smtp: SMTPConfig = Field(default_factory=SMTPConfig)


class AppConfig(BaseModel):
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    interview: InterviewConfig = Field(default_factory=InterviewConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    audit_log: str | None = None

    def with_environment(self, environ: dict[str, str] | None = None) -> "AppConfig":
        """Fill secrets left empty in YAML from the process environment."""
        environ = os.environ if environ is None else environ
        updated = self.model_copy(deep=True)
        if not updated.oracle.api_key:
            updated.oracle.api_key = environ.get("GEMINI_API_KEY") or None
        if not updated.dispatch.smtp.password:
            updated.dispatch.smtp.password = environ.get("SMTP_PASSWORD") or None
        return updated

    def to_settings(self) -> dict[str, Any]:
        return self.model_dump()


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
