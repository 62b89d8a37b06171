"""Configuration management for Flip Journal."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

JOURNAL_HOME = Path(os.environ.get("JOURNAL_HOME", Path.home() / "flipjournal"))
CONFIG_FILE = JOURNAL_HOME / "config" / "journal.conf"
DATA_DIR = JOURNAL_HOME / "data"
ENV_FILE = Path(".env")


@dataclass
class Config:
    """Flip Journal configuration."""

    jsonbin_api_key: str = ""
    jsonbin_bin_id: str = ""
    # Server settings
    host: str = "127.0.0.1"
    port: int = 8080
    server_url: str = "http://localhost:8080"
    document_root: str = str(JOURNAL_HOME / "www")
    backup_file: str = str(DATA_DIR / "journal-backup.json")
    # Local storage settings
    storage_file: str = str(DATA_DIR / "storage.json")
    storage_quota: int = 5 * 1024 * 1024
    autosave_delay: float = 1.5
    request_timeout: float = 10.0


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"'):
        end_quote = value.find('"', 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if value.startswith("'"):
        end_quote = value.find("'", 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_lines(text: str) -> dict[str, str]:
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        values[key.strip().lower()] = _unquote(value.strip())
    return values


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "jsonbin_api_key":
            config.jsonbin_api_key = value
        case "jsonbin_bin_id":
            config.jsonbin_bin_id = value
        case "host":
            config.host = value
        case "port":
            config.port = int(value)
        case "server_url":
            config.server_url = value
        case "document_root":
            config.document_root = value
        case "backup_file":
            config.backup_file = value
        case "storage_file":
            config.storage_file = value
        case "storage_quota":
            config.storage_quota = int(value)
        case "autosave_delay":
            config.autosave_delay = float(value)
        case "request_timeout":
            config.request_timeout = float(value)


def load_config(path: Path | None = None, env_file: Path | None = ENV_FILE) -> Config:
    """
    Load configuration.

    Reads journal.conf, then a .env file (the server's historical config
    location), then the JSONBIN_API_KEY / JSONBIN_BIN_ID / PORT environment
    variables. Later sources win.
    """
    config = Config()
    path = path or CONFIG_FILE

    values: dict[str, str] = {}
    for source in (path, env_file):
        if source is not None and source.exists():
            values.update(_parse_lines(source.read_text()))

    for name in ("JSONBIN_API_KEY", "JSONBIN_BIN_ID", "PORT"):
        if os.environ.get(name):
            values[name.lower()] = os.environ[name]

    for key, value in values.items():
        try:
            _apply(config, key, value)
        except ValueError as e:
            logger.warning(f"Ignoring invalid config value for {key.upper()}: {e}")

    return config
