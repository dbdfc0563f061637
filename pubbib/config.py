"""
Configuration module for PubBib.

Centralizes all configuration settings, environment variables, and defaults.
Settings can be overridden via environment variables or .env file.

Usage:
    from pubbib.config import config

    base_url = config.PUBMED_BASE_URL
    if config.STRICT_EXTRACTION:
        ...
"""

import os
from pathlib import Path
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load from project root .env file
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    val = os.environ.get(key, "")
    try:
        return int(val) if val else default
    except ValueError:
        return default


def _get_env_float(key: str, default: float = 0.0) -> float:
    """Get float environment variable."""
    val = os.environ.get(key, "")
    try:
        return float(val) if val else default
    except ValueError:
        return default


@dataclass
class Config:
    """
    PubBib configuration settings.

    All settings can be overridden via environment variables.
    """

    # ==========================================================================
    # PubMed Settings
    # ==========================================================================

    # Site searched for titles; result links are relative to it
    PUBMED_BASE_URL: str = field(default_factory=lambda: _get_env(
        "PUBMED_BASE_URL", "https://pubmed.ncbi.nlm.nih.gov"
    ))

    # Request timeout in seconds
    REQUEST_TIMEOUT: int = field(default_factory=lambda: _get_env_int(
        "REQUEST_TIMEOUT", 30
    ))

    # Rate limiting (requests per second) for batch lookups
    REQUESTS_PER_SECOND: float = field(default_factory=lambda: _get_env_float(
        "REQUESTS_PER_SECOND", 2.5
    ))

    # User agent string for page requests
    USER_AGENT: str = field(default_factory=lambda: _get_env(
        "USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
    ))

    # ==========================================================================
    # Extraction Settings
    # ==========================================================================

    # Treat a missing copyright/citation block as fatal for the document
    STRICT_EXTRACTION: bool = field(default_factory=lambda: _get_env_bool(
        "STRICT_EXTRACTION", False
    ))

    # Remove punctuation such as "smith," from generated cite keys
    CITE_KEY_STRIP_PUNCTUATION: bool = field(default_factory=lambda: _get_env_bool(
        "CITE_KEY_STRIP_PUNCTUATION", False
    ))

    # Append a, b, c... to cite keys that repeat within one batch
    DISAMBIGUATE_KEYS: bool = field(default_factory=lambda: _get_env_bool(
        "DISAMBIGUATE_KEYS", True
    ))

    # ==========================================================================
    # Logging Settings
    # ==========================================================================

    # Log level: DEBUG, INFO, WARNING, ERROR
    LOG_LEVEL: str = field(default_factory=lambda: _get_env(
        "LOG_LEVEL", "WARNING"
    ))

    # Enable verbose logging
    VERBOSE: bool = field(default_factory=lambda: _get_env_bool(
        "VERBOSE", False
    ))

    # Enable file logging
    ENABLE_FILE_LOGGING: bool = field(default_factory=lambda: _get_env_bool(
        "ENABLE_FILE_LOGGING", False
    ))

    # Log file rotation size (MB)
    LOG_ROTATION_SIZE_MB: int = field(default_factory=lambda: _get_env_int(
        "LOG_ROTATION_SIZE_MB", 10
    ))

    # Number of log files to retain
    LOG_RETENTION_COUNT: int = field(default_factory=lambda: _get_env_int(
        "LOG_RETENTION_COUNT", 5
    ))

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.LOG_LEVEL.upper() not in valid_levels:
            self.LOG_LEVEL = 'WARNING'

        # Ensure positive values
        if self.REQUEST_TIMEOUT < 1:
            self.REQUEST_TIMEOUT = 30
        if self.REQUESTS_PER_SECOND <= 0:
            self.REQUESTS_PER_SECOND = 2.5
        self.PUBMED_BASE_URL = self.PUBMED_BASE_URL.rstrip('/')

    def to_dict(self) -> dict:
        """Convert config to dictionary for logging/debugging."""
        return {
            'PUBMED_BASE_URL': self.PUBMED_BASE_URL,
            'REQUEST_TIMEOUT': self.REQUEST_TIMEOUT,
            'REQUESTS_PER_SECOND': self.REQUESTS_PER_SECOND,
            'STRICT_EXTRACTION': self.STRICT_EXTRACTION,
            'CITE_KEY_STRIP_PUNCTUATION': self.CITE_KEY_STRIP_PUNCTUATION,
            'DISAMBIGUATE_KEYS': self.DISAMBIGUATE_KEYS,
            'LOG_LEVEL': self.LOG_LEVEL,
        }


# Global config instance
config = Config()


VERSION = "0.2.0"


__all__ = ['config', 'Config', 'VERSION']
