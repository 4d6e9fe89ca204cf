"""Configuration module for finvoice.

This module provides configuration dataclasses, loading and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class LocaleConfig:
    """Language used for capture, prompts and synthesis."""

    language: str = "es"
    supported: list[str] = field(default_factory=lambda: ["es", "en"])


@dataclass
class CaptureConfig:
    """Utterance capture configuration."""

    max_duration_seconds: float = 60.0
    continuous: bool = True
    interim_results: bool = True


@dataclass
class ParserConfig:
    """Action parser configuration."""

    currency_symbol: str = "$"


@dataclass
class MemoryConfig:
    """Conversation memory configuration."""

    max_exchanges: int = 10
    session_timeout_minutes: float = 30.0
    check_interval_seconds: float = 60.0
    summary_exchanges: int = 3
    summary_response_chars: int = 100


@dataclass
class ConfirmationConfig:
    """Confirmation gate configuration."""

    timeout_seconds: float = 30.0
    confirm_creations: bool = True


@dataclass
class SpeechConfig:
    """Response speech configuration."""

    engine: str = "auto"
    words_per_minute: int = 150
    seek_step_seconds: float = 10.0
    progress_interval_seconds: float = 0.1
    voice: str | None = None


@dataclass
class STTConfig:
    """Speech recognition engine configuration."""

    engine: str = "mock"
    model: str = "base"
    device: str = "cpu"
    compute_type: str = "int8"
    window_seconds: float = 4.0
    sample_rate: int = 16000


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class TestingConfig:
    """Testing configuration."""

    use_mock_engines: bool = False


@dataclass
class FinvoiceConfig:
    """Main finvoice configuration."""

    locale: LocaleConfig = field(default_factory=LocaleConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    confirmation: ConfirmationConfig = field(default_factory=ConfirmationConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    stt: STTConfig = field(default_factory=STTConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> FinvoiceConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> FinvoiceConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


# Public API
__all__ = [
    "CaptureConfig",
    "ConfigLoader",
    "ConfirmationConfig",
    "FinvoiceConfig",
    "LocaleConfig",
    "LoggingConfig",
    "MemoryConfig",
    "ParserConfig",
    "STTConfig",
    "SpeechConfig",
    "TestingConfig",
]
