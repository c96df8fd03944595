"""Configuration for the WebVPN link service.

Reads from config/webvpn.ini if present, environment variables override.
Key material is not configuration: it is fixed in webvpn.keys.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

from webvpn.links import DEFAULT_BASE_URL
from webvpn.schemes import DEFAULT_SCHEME

_CONFIG_FILE = Path(__file__).resolve().parent.parent.parent / "config" / "webvpn.ini"
_PREFS_FILE = Path.home() / ".config" / "webvpn" / "prefs.json"


@dataclass(frozen=True)
class WebvpnConfig:
    """Service configuration. Immutable once loaded."""

    base_url: str = DEFAULT_BASE_URL
    scheme: str = DEFAULT_SCHEME
    prefs_path: str = str(_PREFS_FILE)
    api_key: str = ""
    host: str = "127.0.0.1"
    port: int = 8000


def load_config(config_path: Path | None = None) -> WebvpnConfig:
    """Load config from INI file, then override with environment variables."""
    path = config_path or _CONFIG_FILE
    kwargs: dict = {}

    if path.exists():
        parser = configparser.ConfigParser()
        parser.read(path)
        if parser.has_section("gateway"):
            for ini_key, config_key in [
                ("base_url", "base_url"),
                ("scheme", "scheme"),
                ("prefs_path", "prefs_path"),
            ]:
                val = parser.get("gateway", ini_key, fallback=None)
                if val is not None:
                    kwargs[config_key] = val
        if parser.has_section("service"):
            for ini_key, config_key in [
                ("api_key", "api_key"),
                ("host", "host"),
            ]:
                val = parser.get("service", ini_key, fallback=None)
                if val is not None:
                    kwargs[config_key] = val
            port_str = parser.get("service", "port", fallback=None)
            if port_str is not None:
                kwargs["port"] = int(port_str)

    env_map = {
        "WEBVPN_BASE_URL": "base_url",
        "WEBVPN_SCHEME": "scheme",
        "WEBVPN_PREFS_PATH": "prefs_path",
        "WEBVPN_API_KEY": "api_key",
        "WEBVPN_HOST": "host",
        "WEBVPN_PORT": "port",
    }
    for env_key, config_key in env_map.items():
        val = os.getenv(env_key)
        if val is not None:
            if config_key == "port":
                kwargs[config_key] = int(val)
            else:
                kwargs[config_key] = val

    kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return WebvpnConfig(**kwargs)
