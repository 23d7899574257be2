from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "transactions.db",
    "seed_url": DEFAULT_SEED_URL,
    "seed_on_startup": True,
    "seed_timeout": 30,
    "host": "127.0.0.1",
    "port": 3000,
    "log_level": "INFO",
    "log_file": None,
}

# Environment variables take precedence over values read from the YAML file.
ENV_OVERRIDES: Dict[str, str] = {
    "db_path": "SALES_DB_PATH",
    "seed_url": "SALES_SEED_URL",
    "seed_on_startup": "SALES_SEED_ON_STARTUP",
    "host": "SALES_HOST",
    "port": "SALES_PORT",
    "log_level": "SALES_LOG_LEVEL",
}


@dataclass
class Settings:
    db_path: str = "transactions.db"
    seed_url: str = DEFAULT_SEED_URL
    seed_on_startup: bool = True
    seed_timeout: float = 30
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    log_file: str | None = None


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
    return merged


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Read the YAML config at *path*, filling gaps from DEFAULT_CONFIG."""
    data: Dict[str, object] = {}
    if path is not None:
        target = Path(path)
        if target.exists():
            with target.open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp) or {}
    config = _merge_defaults(data, DEFAULT_CONFIG)
    for key, env_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value
    return config


def load_settings(path: str | Path | None = None, **overrides: object) -> Settings:
    """Resolve Settings from the config file, the environment and *overrides*.

    Overrides whose value is ``None`` are ignored so click options left unset
    do not mask the file or environment.
    """
    config = load_config(path)
    config.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(
        db_path=str(config["db_path"]),
        seed_url=str(config["seed_url"]),
        seed_on_startup=_as_bool(config["seed_on_startup"]),
        seed_timeout=float(config["seed_timeout"]),
        host=str(config["host"]),
        port=int(config["port"]),
        log_level=str(config["log_level"]),
        log_file=config.get("log_file") or None,
    )
