"""
Configuration loading shared by the pimbridge modules.

Settings live in a JSON file (``/app/config/config.json`` inside the container,
or whatever ``PIMBRIDGE_CONFIG`` points at). Missing keys fall back to the
defaults below so the service and its tests run without a config file.
"""

import copy
import json
import os

CONFIG_PATH                     = os.getenv("PIMBRIDGE_CONFIG", "/app/config/config.json")

DEFAULTS = {
    "db": {
        "contacts": "./shared/db/pimbridge/contacts.db"
    },
    "graylog": {
        "host": "localhost",    # GELF UDP host
        "port": 12201           # GELF UDP port
    },
    "tracing_enabled": False,
    "otlp": {
        "endpoint": "http://tempo:4317"
    },
    "photos": {
        "timeout": 10,
        "allowed_hosts": []     # hosts photo URLs may be fetched from
    }
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config(path: str = None) -> dict:
    """
    Load configuration from config.json, layered over the built-in defaults.

    Args:
        path (str, optional): Path of the JSON file. Defaults to CONFIG_PATH.

    Returns:
        dict: The merged configuration. Defaults only if the file is missing or unreadable.
    """
    try:
        with open(path or CONFIG_PATH) as f:
            return _merge(DEFAULTS, json.load(f))
    except (OSError, ValueError):
        return copy.deepcopy(DEFAULTS)
