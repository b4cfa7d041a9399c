from __future__ import annotations

# kasir/config.py
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

import yaml
from dotenv import dotenv_values

from .drivers import PoolOptions

logger = logging.getLogger(__name__)

# Resolution order, highest first:
# 1) process environment
# 2) .env in the project root
# 3) config.yaml in the project root (keys are case-insensitive)
# 4) defaults below
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

_DURATION = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}


def parse_duration(value: str | float | int) -> float:
    """'90s', '30m', '1h', '250ms' or a bare number of seconds -> seconds."""
    if isinstance(value, (int, float)):
        return float(value)
    m = _DURATION.match(str(value))
    if not m:
        raise ValueError(f"invalid duration: {value!r}")
    return float(m.group(1)) * _UNITS[m.group(2)]


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    port: int = 8080
    log_level: str = "INFO"
    database_driver: str = "sqlite"
    database_path: str = field(default_factory=lambda: os.path.join(_PROJECT_ROOT, "kasir.db"))
    database_user: str = ""
    database_password: str = ""
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = ""
    database_max_open_connection: int = 10
    database_max_idle_connection: int = 2
    database_max_lifetime_connection: float = 1800.0
    database_logging: bool = True
    database_auto_schema: bool = True

    @property
    def dsn(self) -> str:
        if self.database_driver == "sqlite":
            return self.database_path
        return (
            f"postgresql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def pool_options(self) -> PoolOptions:
        return PoolOptions(
            max_open=self.database_max_open_connection,
            max_idle=self.database_max_idle_connection,
            max_lifetime=self.database_max_lifetime_connection,
        )


_CONVERTERS = {
    "port": int,
    "database_port": int,
    "database_max_open_connection": int,
    "database_max_idle_connection": int,
    "database_max_lifetime_connection": parse_duration,
    "database_logging": parse_bool,
    "database_auto_schema": parse_bool,
}


def _read_config_yaml(root: str) -> dict:
    cfg_path = os.path.join(root, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("config.yaml ignored: %s", e)
        return {}
    if not isinstance(cfg, dict):
        logger.warning("config.yaml ignored: top level is not a mapping")
        return {}
    return {str(k).upper(): v for k, v in cfg.items() if v is not None}


def load_settings(root: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    root = root or _PROJECT_ROOT
    values: dict = _read_config_yaml(root)
    env_file = os.path.join(root, ".env")
    if os.path.exists(env_file):
        values.update({k.upper(): v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update(os.environ if environ is None else environ)

    settings = Settings()
    for name in settings.__dataclass_fields__:
        raw = values.get(name.upper())
        if raw is None or raw == "":
            continue
        convert = _CONVERTERS.get(name, str)
        setattr(settings, name, convert(raw))
    settings.database_driver = settings.database_driver.lower()
    return settings
