# src/fxbench/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a .env file; every field has a
default so the engine can be imported and used as a library with no
configuration at all.

Files that USE this module:
- fxbench.app (logging and bot configuration)
- fxbench.application.conversion_service (engine defaults via from_settings)
- fxbench.application.load_test (stress-test cap and sample input)
- fxbench.adapters.telegram.handlers (admin username)

Files that this module USES:
- fxbench.shared.validators (bot token format check)
- fxbench.domain.currencies (allow-list for the stress-test sample pair)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fxbench.domain.currencies import SUPPORTED_CURRENCY_CODES
from fxbench.shared.validators import MIN_POSITIVE_AMOUNT, validate_bot_token


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Simulated transport ---
    delay_min_ms: float = Field(default=50.0, alias="FX_DELAY_MIN_MS", ge=0.0)
    delay_max_ms: float = Field(default=150.0, alias="FX_DELAY_MAX_MS", ge=0.0)
    fault_probability: float = Field(default=0.001, alias="FX_FAULT_PROBABILITY", ge=0.0, le=1.0)
    call_timeout_seconds: float = Field(default=5.0, alias="FX_CALL_TIMEOUT_SECONDS", ge=0.0)  # 0 disables

    # --- Validation ---
    # Defaults to the smallest positive double; set 0.000001 to enforce a business minimum
    min_amount: float = Field(default=MIN_POSITIVE_AMOUNT, alias="FX_MIN_AMOUNT", gt=0.0)

    # --- Rate table ---
    rate_table_file: Optional[Path] = Field(default=None, alias="FX_RATE_TABLE_FILE")

    # --- Stress testing ---
    stress_max_duration_ms: int = Field(default=30000, alias="STRESS_MAX_DURATION_MS", ge=0, le=30000)
    stress_sample_amount: float = Field(default=100.0, alias="STRESS_SAMPLE_AMOUNT", gt=0.0)
    stress_sample_from: str = Field(default="USD", alias="STRESS_SAMPLE_FROM")
    stress_sample_to: str = Field(default="EUR", alias="STRESS_SAMPLE_TO")

    # --- Telegram (optional surface) ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")
    admin_username: str = Field(default="", alias="ADMIN_USERNAME")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FXBENCH_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def call_timeout(self) -> Optional[float]:
        """Per-call timeout in seconds, or None when disabled."""
        return self.call_timeout_seconds or None

    @property
    def stress_sample_pair(self) -> tuple[str, str]:
        return self.stress_sample_from, self.stress_sample_to

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format when one is configured."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v

    @field_validator("stress_sample_from", "stress_sample_to")
    @classmethod
    def validate_sample_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if code not in SUPPORTED_CURRENCY_CODES:
            raise ValueError(f"Unsupported stress-test currency: {v}")
        return code

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @model_validator(mode="after")
    def check_delay_range(self) -> Settings:
        if self.delay_max_ms < self.delay_min_ms:
            raise ValueError("FX_DELAY_MAX_MS must be greater than or equal to FX_DELAY_MIN_MS")
        return self


# Global settings instance
settings = Settings()
