"""Logging helpers shared by every dscript subsystem."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

import yaml

_CONFIG_LOCK = RLock()
_CONFIGURED = False

_ALLOWED_KEYS = ("version", "disable_existing_loggers", "formatters", "handlers", "root", "loggers")

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
    "loggers": {
        "dscript": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        }
    },
}

CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"


def _load_config(path: Path = CONFIG_PATH) -> dict[str, Any]:
    if not path.exists():
        return dict(_DEFAULT_CONFIG)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logging.basicConfig(level=logging.WARNING)
        logging.getLogger("dscript.telemetry").warning("failed to parse logging.yaml: %s", exc)
        return dict(_DEFAULT_CONFIG)
    if not isinstance(data, Mapping):
        return dict(_DEFAULT_CONFIG)
    merged = dict(_DEFAULT_CONFIG)
    merged.update({k: v for k, v in data.items() if k in _ALLOWED_KEYS})
    return merged


def configure(path: Path | None = None) -> None:
    """Ensure the logging subsystem is configured exactly once."""

    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED:
            return
        logging.config.dictConfig(_load_config(path or CONFIG_PATH))
        _CONFIGURED = True


def set_level(level: int | str) -> None:
    """Adjust the ``dscript`` logger threshold, e.g. for ``--verbose``."""

    configure()
    logging.getLogger("dscript").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured via ``configs/logging.yaml``."""

    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    return logging.getLogger(name)


__all__ = ["configure", "get_logger", "set_level"]
