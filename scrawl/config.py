"""
Configuration management for scrawl stores.

Settings live in an optional TOML file inside the store directory.
SCRAWL_GPG_KEY supplies the GPG recipient when the file names none; it is
read at use and never written back.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import tomli_w

from .errors import SetupError


CONFIG_FILENAME = "scrawl.toml"
CONFIG_VERSION = 1

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M"

# Keys users may set with `scrawl config KEY VALUE`
SETTABLE_KEYS = ("date_format", "gpg_key", "gpg_binary", "editor")


def get_store_path(override: Optional[Path] = None) -> Path:
    """Resolve the store directory: explicit override, SCRAWL_DIR, ~/.scrawl."""
    if override is not None:
        return Path(override).expanduser()
    env = os.environ.get("SCRAWL_DIR")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".scrawl"


@dataclass
class StoreConfig:
    """Complete store configuration."""
    path: Path
    version: int = CONFIG_VERSION
    date_format: str = DEFAULT_DATE_FORMAT
    gpg_key: Optional[str] = None
    gpg_binary: str = "gpg"
    editor: Optional[str] = None

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    @property
    def recipient(self) -> Optional[str]:
        """GPG recipient: the saved key, else SCRAWL_GPG_KEY."""
        return self.gpg_key or os.environ.get("SCRAWL_GPG_KEY")

    def as_dict(self) -> dict:
        """Settable values, omitting unset ones (TOML has no null)."""
        d = {}
        for key in SETTABLE_KEYS:
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return d


def ensure_store_dir(path: Path) -> Path:
    """Create the store directory if needed and check it is writable."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SetupError(f"Cannot create store directory {path}: {e}") from e
    if not path.is_dir():
        raise SetupError(f"Store path is not a directory: {path}")
    if not os.access(path, os.W_OK | os.X_OK):
        raise SetupError(f"Store directory is not writable: {path}")
    return path


def load_config(store_path: Path) -> StoreConfig:
    """
    Load configuration from a store directory.

    A missing file yields the defaults.

    Raises:
        SetupError: If the file is unreadable, invalid or too new
    """
    config = StoreConfig(path=store_path)
    if not config.exists():
        return config

    try:
        with open(config.config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise SetupError(f"Cannot read config {config.config_path}: {e}") from e

    store_table = data.get("store", {})
    settings = data.get("scrawl", {})
    if not isinstance(store_table, dict) or not isinstance(settings, dict):
        raise SetupError(f"Config {config.config_path}: [store] and [scrawl] must be tables")

    version = store_table.get("version", 1)
    # bool is an int subclass
    if not isinstance(version, int) or isinstance(version, bool):
        raise SetupError(f"Config version must be an integer, got {version!r}")
    if version > CONFIG_VERSION:
        raise SetupError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    for key, value in settings.items():
        if key not in SETTABLE_KEYS:
            raise SetupError(f"Unknown config key in {config.config_path}: {key}")
        if not isinstance(value, str):
            raise SetupError(f"Config value for {key} must be a string")
        setattr(config, key, value)
    config.version = version
    return config


def save_config(config: StoreConfig) -> None:
    """
    Save configuration to the store directory.

    Creates the directory if it doesn't exist.
    """
    ensure_store_dir(config.path)
    data = {
        "store": {"version": config.version},
        "scrawl": config.as_dict(),
    }
    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def set_config_value(config: StoreConfig, key: str, value: str) -> StoreConfig:
    """Update one setting and persist it."""
    if key not in SETTABLE_KEYS:
        raise SetupError(
            f"Unknown config key: {key}. Available: {', '.join(SETTABLE_KEYS)}"
        )
    setattr(config, key, value)
    save_config(config)
    return config
