"""Turning an encoded path into a navigable gateway address."""

from __future__ import annotations

import re

from webvpn.codec import Codec
from webvpn.errors import InvalidInputError
from webvpn.schemes import get_codec

DEFAULT_BASE_URL = "webvpn.xauat.edu.cn"
STORAGE_KEY = "baseURL"

_HTTP_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def is_http_or_https(url: object) -> bool:
    if not url:
        return False
    return bool(_HTTP_SCHEME.match(str(url)))


def normalize_base_url(value: object) -> str:
    """Trim, drop trailing slashes, default to https://. Empty stays empty."""
    if not value:
        return ""
    base = str(value).strip().rstrip("/")
    if not base:
        return ""
    if not _HTTP_SCHEME.match(base):
        base = "https://" + base
    return base


def build_vpn_url(url: str, base_url: str, codec: Codec | None = None) -> str:
    """Encode ``url`` and append the path to the normalized ``base_url``."""
    base = normalize_base_url(base_url)
    if not base:
        raise InvalidInputError("base url is empty")
    codec = codec or get_codec()
    return base + codec.encode(url)
