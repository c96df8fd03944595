"""Browser-side workflow on top of an abstract capability interface.

The popup and the page context menu both do the same thing: read the active
tab, refuse anything that is not http(s), encode, pick a base origin and
either show or open the result. ``Converter`` is that workflow; the platform
supplies a ``BrowserBridge``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from webvpn.codec import Codec
from webvpn.errors import InvalidInputError
from webvpn.links import DEFAULT_BASE_URL, build_vpn_url, is_http_or_https, normalize_base_url
from webvpn.prefs import PreferenceStore, get_saved_base_url, save_base_url
from webvpn.schemes import get_codec

logger = logging.getLogger("webvpn.browser")


class BrowserBridge(ABC):
    """What the workflow needs from the host platform."""

    @abstractmethod
    def get_active_tab_url(self) -> str:
        """URL of the active tab, or "" when it cannot be read."""

    @abstractmethod
    def get_saved_base_url(self) -> str | None: ...

    @abstractmethod
    def save_base_url(self, value: str) -> None: ...

    @abstractmethod
    def navigate(self, url: str) -> None: ...


class StoreBackedBridge(BrowserBridge):
    """Bridge whose preferences live in a ``PreferenceStore``.

    Navigation is delegated to a callable so front ends decide what opening a
    URL means (a browser, a redirect response, stdout).
    """

    def __init__(self, store: PreferenceStore, tab_url: str = "", opener=None):
        self.store = store
        self.tab_url = tab_url
        self._opener = opener
        self.navigated: list[str] = []

    def get_active_tab_url(self) -> str:
        return self.tab_url

    def get_saved_base_url(self) -> str | None:
        return get_saved_base_url(self.store)

    def save_base_url(self, value: str) -> None:
        save_base_url(self.store, value)

    def navigate(self, url: str) -> None:
        self.navigated.append(url)
        if self._opener is not None:
            self._opener(url)


class Converter:
    def __init__(
        self,
        bridge: BrowserBridge,
        codec: Codec | None = None,
        default_base_url: str = DEFAULT_BASE_URL,
    ):
        self.bridge = bridge
        self.codec = codec or get_codec()
        self.default_base_url = default_base_url

    def resolve_base_url(self, base_override: str | None = None) -> str:
        """Override, then saved preference, then the configured default."""
        override = (base_override or "").strip()
        raw = override or self.bridge.get_saved_base_url() or self.default_base_url
        return normalize_base_url(raw)

    def generate(self, base_override: str | None = None) -> str:
        url = self.bridge.get_active_tab_url()
        if not url:
            raise InvalidInputError("cannot get current tab url")
        if not is_http_or_https(url):
            raise InvalidInputError("only http and https pages can be converted")
        final = build_vpn_url(url, self.resolve_base_url(base_override), self.codec)
        logger.debug("Generated %s link for active tab", self.codec.name)
        return final

    def redirect(self, base_override: str | None = None) -> str:
        final = self.generate(base_override)
        self.bridge.navigate(final)
        return final

    def save_base_url(self, value: str) -> str:
        normalized = normalize_base_url(value)
        if not normalized:
            raise InvalidInputError("enter a valid base url")
        self.bridge.save_base_url(normalized)
        return normalized
