from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from texcorrect.exceptions import ConfigurationError


BrowserChoice = Literal["chrome", "firefox"]
LanguageChoice = Literal["german", "english"]
LogFormatChoice = Literal["console", "json"]

DEFAULT_DRIVER_URLS = {
    "chrome": "http://localhost:9515",
    "firefox": "http://localhost:4444",
}


class Settings(BaseSettings):
    """Environment-driven configuration for the correction run.

    Values are read from environment variables with prefix ``TEXCORRECT_`` and
    optionally from a local ``.env`` file at the project root.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXCORRECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Document Markers ---
    start_marker: str = Field(
        "%CORRECT_START",
        description="Line that opens the correctable region.",
    )
    end_marker: str = Field(
        "%CORRECT_END",
        description="Line that closes the correctable region.",
    )

    # --- Segmentation ---
    max_batch_chars: int = Field(
        2000,
        description="Character budget for one submission to the service.",
    )
    language: LanguageChoice = Field(
        "german",
        description="Abbreviation seed for the sentence segmenter.",
    )
    flush_trailing_chunk: bool = Field(
        True,
        description="Correct free text that ends the working region.",
    )

    # --- Polling ---
    poll_interval_ms: int = Field(
        500,
        description="Delay between two samples of the output surface.",
    )
    poll_attempts: int = Field(
        30,
        description="Samples per round before the batch is resubmitted.",
    )

    # --- Browser / Driver ---
    browser: BrowserChoice = Field(
        "chrome",
        description="Browser driven through WebDriver.",
    )
    driver_binary: Optional[Path] = Field(
        None,
        description="chromedriver/geckodriver executable to spawn; unset uses a running driver.",
    )
    driver_url: Optional[str] = Field(
        None,
        description="WebDriver endpoint; defaults to the browser's standard port.",
    )

    # --- Correction Service ---
    service_url: str = Field(
        "https://www.deepl.com/write",
        description="Page hosting the correction service.",
    )
    input_selector: str = Field(
        ".min-h-0 > div:nth-child(1)",
        description="CSS selector of the input surface.",
    )
    output_selector: str = Field(
        ".last\\:grow > div:nth-child(1)",
        description="CSS selector of the output surface.",
    )
    mode_selectors: List[str] = Field(
        default_factory=lambda: [
            "#headlessui-listbox-button-28",
            "#headlessui-listbox-option-32",
        ],
        description="Buttons clicked in order while preparing the session.",
    )
    confirm_key: str = Field(
        "b",
        description="Key pressed together with Ctrl to accept a correction.",
    )

    # --- Output ---
    output_path: Path = Field(
        Path("corrected.tex"),
        description="Where the corrected document is written.",
    )

    # --- Logging ---
    log_level: str = Field("INFO", description="Root log level.")
    log_format: LogFormatChoice = Field("console", description="Log renderer.")
    driver_log_level: str = Field(
        "WARNING",
        description="Level for the selenium and urllib3 loggers.",
    )

    @field_validator("max_batch_chars", "poll_attempts", "poll_interval_ms")
    @classmethod
    def positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("confirm_key")
    @classmethod
    def single_key(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("confirm_key must be a single character")
        return value.lower()

    def resolve_driver_url(self) -> str:
        """Return the configured WebDriver endpoint or the browser default."""
        return self.driver_url or DEFAULT_DRIVER_URLS[self.browser]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid TEXCORRECT_* environment: {exc}") from exc


__all__ = [
    "Settings",
    "get_settings",
    "BrowserChoice",
    "LanguageChoice",
    "LogFormatChoice",
    "DEFAULT_DRIVER_URLS",
]
