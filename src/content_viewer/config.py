"""Configuration loading and saving.

Config file location: ~/.config/content-viewer/config.toml

Schema:
    [server]
    url = "http://localhost:3000"   # content proxy (see `content-viewer serve`)
    timeout = 120.0

    [storage]
    file = ".state/storage.json"   # favorites live here
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

CONFIG_DIR = Path.home() / ".config" / "content-viewer"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_SERVER_URL = "http://localhost:3000"
DEFAULT_STORAGE_FILE = Path(".state") / "storage.json"


@dataclass
class AppConfig:
    server_url: str = DEFAULT_SERVER_URL
    storage_file: Path = DEFAULT_STORAGE_FILE
    timeout: float = 120.0


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    server_data = data.get("server", {})
    storage_data = data.get("storage", {})

    server_url = server_data.get("url", DEFAULT_SERVER_URL)
    if not str(server_url).startswith(("http://", "https://")):
        raise ValueError(f"Config server.url must be an http(s) URL, got {server_url!r}")

    return AppConfig(
        server_url=str(server_url),
        storage_file=Path(storage_data.get("file", DEFAULT_STORAGE_FILE)),
        timeout=float(server_data.get("timeout", 120.0)),
    )


def resolve_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Config from file if present, else defaults; env overrides the server URL."""
    config = load_config(config_path) if config_exists(config_path) else AppConfig()
    env_url = os.environ.get("CONTENT_VIEWER_SERVER_URL")
    if env_url:
        config.server_url = env_url
    return config


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "server": {
            "url": config.server_url,
            "timeout": config.timeout,
        },
        "storage": {
            "file": str(config.storage_file),
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
