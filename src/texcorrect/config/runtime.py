from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from texcorrect.config.settings import (
    DEFAULT_DRIVER_URLS,
    BrowserChoice,
    LanguageChoice,
    LogFormatChoice,
    Settings,
    get_settings,
)
from texcorrect.exceptions import ConfigurationError


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class SegmentationConfig(_Section):
    start_marker: str = Field(default="%CORRECT_START")
    end_marker: str = Field(default="%CORRECT_END")
    max_batch_chars: int = Field(default=2000, gt=0)
    language: LanguageChoice = Field(default="german")
    flush_trailing_chunk: bool = Field(default=True)


class OracleConfig(_Section):
    service_url: str = Field(default="https://www.deepl.com/write")
    input_selector: str = Field(default=".min-h-0 > div:nth-child(1)")
    output_selector: str = Field(default=".last\\:grow > div:nth-child(1)")
    mode_selectors: List[str] = Field(default_factory=list)
    confirm_key: str = Field(default="b", min_length=1, max_length=1)
    poll_interval_ms: int = Field(default=500, gt=0)
    poll_attempts: int = Field(default=30, gt=0)

    @field_validator("confirm_key")
    @classmethod
    def lower_key(cls, value: str) -> str:
        # KeyboardEvent.key is lower-case while Ctrl is held without Shift
        return value.lower()


class DriverConfig(_Section):
    browser: BrowserChoice = Field(default="chrome")
    binary: Optional[Path] = Field(default=None)
    url: Optional[str] = Field(default=None)

    @property
    def endpoint(self) -> str:
        """Configured WebDriver URL, or the standard port of the chosen browser."""
        return self.url or DEFAULT_DRIVER_URLS[self.browser]


class OutputConfig(_Section):
    path: Path = Field(default=Path("corrected.tex"))
    log_level: str = Field(default="INFO")
    log_format: LogFormatChoice = Field(default="console")
    driver_log_level: str = Field(default="WARNING")


class RuntimeConfig(_Section):
    """Typed view over environment settings merged with an optional YAML overlay."""

    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    driver: DriverConfig = Field(default_factory=DriverConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def from_settings(cls, env: Settings) -> "RuntimeConfig":
        return cls(
            segmentation=SegmentationConfig(
                start_marker=env.start_marker,
                end_marker=env.end_marker,
                max_batch_chars=env.max_batch_chars,
                language=env.language,
                flush_trailing_chunk=env.flush_trailing_chunk,
            ),
            oracle=OracleConfig(
                service_url=env.service_url,
                input_selector=env.input_selector,
                output_selector=env.output_selector,
                mode_selectors=list(env.mode_selectors),
                confirm_key=env.confirm_key,
                poll_interval_ms=env.poll_interval_ms,
                poll_attempts=env.poll_attempts,
            ),
            driver=DriverConfig(
                browser=env.browser,
                binary=env.driver_binary,
                url=env.driver_url,
            ),
            output=OutputConfig(
                path=env.output_path,
                log_level=env.log_level,
                log_format=env.log_format,
                driver_log_level=env.driver_log_level,
            ),
        )


def load_runtime_config(
    config_path: Path | str | None = None,
    env: Optional[Settings] = None,
) -> RuntimeConfig:
    """Build the runtime configuration.

    Environment settings provide the base layer; when ``config_path`` is given
    its YAML sections (``segmentation``, ``oracle``, ``driver``, ``output``)
    are merged on top with OmegaConf and validated by pydantic.
    """
    base = RuntimeConfig.from_settings(env or get_settings())
    if config_path is None:
        return base

    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        overlay = OmegaConf.load(path)
        merged = OmegaConf.merge(
            OmegaConf.create(base.model_dump(mode="json")),
            overlay,
        )
        container = OmegaConf.to_container(merged, resolve=True)  # type: ignore[arg-type]
    except OmegaConfBaseException as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc

    try:
        return RuntimeConfig.model_validate(container)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc


__all__ = [
    "RuntimeConfig",
    "SegmentationConfig",
    "OracleConfig",
    "DriverConfig",
    "OutputConfig",
    "load_runtime_config",
]
