"""
Runtime Configuration

Central configuration for the verification engine, the ledger client and
the service surfaces (API, CLI).
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.merkle.merkle_proofs import CombinationStrategy

load_dotenv()


ENV_PREFIX = "CERTPROOF_"

DEFAULT_LEDGER_API_URL = "https://api.testnet.klever.org"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass
class LedgerConfig:
    """Configuration for the NFT metadata ledger API."""
    api_url: str = DEFAULT_LEDGER_API_URL
    use_mock: bool = False


@dataclass
class HttpConfig:
    """Configuration for HTTP client."""
    timeout: float = 15.0
    user_agent: str = "certproof/0.1"


@dataclass
class VerificationConfig:
    """Configuration for the verification engine."""
    combination_strategy: CombinationStrategy = CombinationStrategy.SORTED
    max_workers: int = 4
    chunk_size: int = 64 * 1024
    identity_fallback: bool = True

    def __post_init__(self):
        self.combination_strategy = CombinationStrategy.parse(self.combination_strategy)
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - JSON file
    - Programmatic construction
    """
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    verification: VerificationConfig = field(default_factory=VerificationConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - CERTPROOF_LEDGER_API_URL: Ledger API base URL
        - CERTPROOF_USE_MOCK_LEDGER: Serve built-in sample metadata (true/false)
        - CERTPROOF_HTTP_TIMEOUT: HTTP timeout in seconds
        - CERTPROOF_COMBINATION_STRATEGY: sorted | positional
        - CERTPROOF_MAX_WORKERS: Thread pool size for field verification
        - CERTPROOF_IDENTITY_FALLBACK: Enable identifier fallback (true/false)
        - CERTPROOF_LOG_LEVEL: Log level
        - CERTPROOF_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        # Ledger settings
        if os.getenv(f"{ENV_PREFIX}LEDGER_API_URL"):
            overrides.setdefault("ledger", {})["api_url"] = os.getenv(f"{ENV_PREFIX}LEDGER_API_URL")
        if os.getenv(f"{ENV_PREFIX}USE_MOCK_LEDGER"):
            overrides.setdefault("ledger", {})["use_mock"] = _env_bool(f"{ENV_PREFIX}USE_MOCK_LEDGER")

        # HTTP settings
        if os.getenv(f"{ENV_PREFIX}HTTP_TIMEOUT"):
            overrides.setdefault("http", {})["timeout"] = float(os.getenv(f"{ENV_PREFIX}HTTP_TIMEOUT", "15"))

        # Verification settings
        if os.getenv(f"{ENV_PREFIX}COMBINATION_STRATEGY"):
            overrides.setdefault("verification", {})["combination_strategy"] = (
                os.getenv(f"{ENV_PREFIX}COMBINATION_STRATEGY")
            )
        if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            overrides.setdefault("verification", {})["max_workers"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_WORKERS", "4")
            )
        if os.getenv(f"{ENV_PREFIX}IDENTITY_FALLBACK"):
            overrides.setdefault("verification", {})["identity_fallback"] = _env_bool(
                f"{ENV_PREFIX}IDENTITY_FALLBACK", "true"
            )

        # Logging
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        ledger_data = data.get("ledger", {})
        http_data = data.get("http", {})
        verification_data = data.get("verification", {})

        ledger = LedgerConfig(**ledger_data) if ledger_data else LedgerConfig()
        http = HttpConfig(**http_data) if http_data else HttpConfig()
        verification = (
            VerificationConfig(**verification_data) if verification_data else VerificationConfig()
        )

        return cls(
            ledger=ledger,
            http=http,
            verification=verification,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for section in ("ledger", "http", "verification"):
            if section in overrides:
                target = getattr(new_config, section)
                for key, value in overrides[section].items():
                    setattr(target, key, value)

        # Re-run validation on the overlaid verification section
        new_config.verification.__post_init__()

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "ledger": {
                "api_url": self.ledger.api_url,
                "use_mock": self.ledger.use_mock,
            },
            "http": {
                "timeout": self.http.timeout,
                "user_agent": self.http.user_agent,
            },
            "verification": {
                "combination_strategy": self.verification.combination_strategy.value,
                "max_workers": self.verification.max_workers,
                "chunk_size": self.verification.chunk_size,
                "identity_fallback": self.verification.identity_fallback,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


def config_search_paths() -> list[Path]:
    """Config file locations, in lookup order."""
    return [
        Path.cwd() / "certproof.json",
        Path.cwd() / ".certproof.json",
        Path.home() / ".config" / "certproof" / "config.json",
    ]


def load_runtime_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    An explicit path must exist. Without one, the first existing file from
    config_search_paths() is used, falling back to defaults.
    Environment variables ALWAYS override config file values.
    """
    if config_path is not None:
        return RuntimeConfig.from_json(config_path).with_env_overrides()

    for path in config_search_paths():
        if path.exists():
            return RuntimeConfig.from_json(path).with_env_overrides()

    return RuntimeConfig().with_env_overrides()
