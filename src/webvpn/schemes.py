"""Codec registry, keyed by the scheme name used in configuration."""

from __future__ import annotations

from webvpn.codec import Codec, UrlCodec
from webvpn.keys import KeyMaterial
from webvpn.wrdvpn import WrdCodec

SCHEMES: dict[str, type[Codec]] = {
    UrlCodec.name: UrlCodec,
    WrdCodec.name: WrdCodec,
}

DEFAULT_SCHEME = UrlCodec.name


def get_codec(name: str = DEFAULT_SCHEME, key_material: KeyMaterial | None = None) -> Codec:
    """Instantiate the codec registered under ``name``."""
    try:
        codec_cls = SCHEMES[name]
    except KeyError:
        known = ", ".join(sorted(SCHEMES))
        raise ValueError(f"unknown codec scheme {name!r} (known: {known})") from None
    return codec_cls(key_material)
