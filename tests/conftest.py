from __future__ import annotations

import pytest

_ENV_KEYS = (
    "WEBVPN_BASE_URL",
    "WEBVPN_SCHEME",
    "WEBVPN_PREFS_PATH",
    "WEBVPN_API_KEY",
    "WEBVPN_HOST",
    "WEBVPN_PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's WEBVPN_* settings out of the tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
