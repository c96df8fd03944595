"""FastAPI dependencies for link service routes."""

from __future__ import annotations

from fastapi import Request

from webvpn.codec import Codec
from webvpn.config import WebvpnConfig
from webvpn.prefs import PreferenceStore


def get_codec(request: Request) -> Codec:
    """Get the active codec from app state."""
    return request.app.state.codec


def get_store(request: Request) -> PreferenceStore:
    """Get the preference store from app state."""
    return request.app.state.store


def get_config(request: Request) -> WebvpnConfig:
    return request.app.state.config
