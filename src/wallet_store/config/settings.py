"""Storage settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``WALLETSTORE_``)
2. YAML config file (``WALLETSTORE_CONFIG_PATH`` env var or ``from_yaml``)
3. Defaults defined here
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Tickers the price cache keeps a column for unless configured otherwise.
DEFAULT_CURRENCIES = [
    "aud",
    "btc",
    "cad",
    "chf",
    "cny",
    "eth",
    "eur",
    "gbp",
    "inr",
    "jpy",
    "ltc",
    "nzd",
    "rub",
    "usd",
]


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class DatabaseConfig(BaseModel):
    """Engine settings for one store file, derived from ``StorageConfig``."""

    dsn: str = Field(description="Async database connection string")
    debug_sql: bool = False


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class StorageConfig(BaseSettings):
    """Top-level storage configuration.

    Loads settings from environment variables (``WALLETSTORE_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="WALLETSTORE_",
        case_sensitive=False,
    )

    # Echo every SQL statement of every store engine.
    debug: bool = False
    config_path: str = ""
    data_dir: Path = Path("./wallet_data")
    coin_name: str = "Plenteum"
    currencies: list[str] = Field(default_factory=lambda: list(DEFAULT_CURRENCIES))
    wallet_file_format_version: int = 0
    compaction_interval_days: int = Field(default=7, ge=0)

    @field_validator("currencies")
    @classmethod
    def _normalize_currencies(cls, value: list[str]) -> list[str]:
        """Lower-case tickers and drop duplicates, keeping first occurrence."""
        seen: list[str] = []
        for ticker in value:
            code = ticker.strip().lower()
            if code and code not in seen:
                seen.append(code)
        return seen

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``StorageConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    def store_path(self, filename: str) -> Path:
        """Absolute path of a store file inside the data directory."""
        return (self.data_dir / filename).resolve()

    def store_database(self, filename: str) -> DatabaseConfig:
        """Database settings for one store file."""
        return DatabaseConfig(
            dsn=f"sqlite+aiosqlite:///{self.store_path(filename).as_posix()}",
            debug_sql=self.debug,
        )

    @property
    def presence_key(self) -> str:
        """Product-specific key of the have-wallet flag."""
        return f"{self.coin_name}HaveWallet"
