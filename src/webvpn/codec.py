"""The URL codec: clear http(s) URL <-> encrypted gateway path.

encode: UTF-8 -> PKCS#7 -> AES-128-CBC (fixed key and IV) -> lowercase hex
-> path template. decode runs the same steps backwards and re-validates the
result. Both are pure: no I/O, no logging, no state beyond the key material.

The fixed IV makes ciphertext deterministic. The gateway resolves a path with
nothing but the path itself, so a per-call IV is not an option.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from webvpn.errors import (
    EncodingError,
    InvalidInputError,
    MalformedPathError,
    PaddingError,
)
from webvpn.keys import AES_BLOCK_BYTES, KeyMaterial, get_key_material

PATH_PREFIX = "/webvpn/"
PATH_SUFFIX = ""

_CLEAR_URL = re.compile(r"^https?://[^/?#]+", re.IGNORECASE)
_FORBIDDEN_CHARS = re.compile(r"[\x00-\x1f\x7f\s]")
_HEX_BODY = re.compile(r"[0-9a-f]+")


def validate_clear_url(url: object) -> str:
    """Check the ClearUrl invariant and return the URL unchanged.

    Accepts only a non-empty absolute http/https URL with an authority and
    no whitespace or control characters.
    """
    if not isinstance(url, str):
        raise InvalidInputError(f"url must be a string, got {type(url).__name__}")
    if not url:
        raise InvalidInputError("url is empty")
    if not _CLEAR_URL.match(url):
        raise InvalidInputError("url must be an absolute http:// or https:// URL")
    if _FORBIDDEN_CHARS.search(url):
        raise InvalidInputError("url contains whitespace or control characters")
    return url


class Codec(ABC):
    """A reversible mapping between clear URLs and gateway paths."""

    name: str

    @abstractmethod
    def encode(self, clear_url: str) -> str:
        """Clear URL -> gateway path."""

    @abstractmethod
    def decode(self, path: str) -> str:
        """Gateway path -> clear URL."""


class UrlCodec(Codec):
    """Whole-URL AES-128-CBC codec with PKCS#7 padding and hex encoding."""

    name = "sealed"

    def __init__(self, key_material: KeyMaterial | None = None):
        self._keys = key_material or get_key_material()

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._keys.key), modes.CBC(self._keys.iv))

    def encode(self, clear_url: str) -> str:
        url = validate_clear_url(clear_url)
        try:
            padder = padding.PKCS7(AES_BLOCK_BYTES * 8).padder()
            padded = padder.update(url.encode("utf-8")) + padder.finalize()
            encryptor = self._cipher().encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except (ValueError, TypeError) as exc:
            raise EncodingError(f"cipher failed while encoding: {exc}") from exc
        return f"{PATH_PREFIX}{ciphertext.hex()}{PATH_SUFFIX}"

    def decode(self, path: str) -> str:
        body = _strip_template(path)
        ciphertext = bytes.fromhex(body)
        try:
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
        except (ValueError, TypeError) as exc:
            raise EncodingError(f"cipher failed while decoding: {exc}") from exc

        try:
            unpadder = padding.PKCS7(AES_BLOCK_BYTES * 8).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise PaddingError(
                "invalid padding: path is corrupted or was encoded with other keys"
            ) from exc

        try:
            url = plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInputError("decrypted path is not valid UTF-8") from exc
        return validate_clear_url(url)


def _strip_template(path: object) -> str:
    if not isinstance(path, str):
        raise MalformedPathError(f"path must be a string, got {type(path).__name__}")
    if not path.startswith(PATH_PREFIX) or not path.endswith(PATH_SUFFIX):
        raise MalformedPathError(f"path must start with {PATH_PREFIX!r}")
    body = path[len(PATH_PREFIX) : len(path) - len(PATH_SUFFIX)]
    if not body:
        raise MalformedPathError("path carries no ciphertext")
    if not _HEX_BODY.fullmatch(body):
        raise MalformedPathError("ciphertext must be lowercase hexadecimal")
    if len(body) % (AES_BLOCK_BYTES * 2):
        raise MalformedPathError("ciphertext is not a whole number of AES blocks")
    return body


_default = UrlCodec()


def encode(clear_url: str) -> str:
    """Encode with the embedded key material."""
    return _default.encode(clear_url)


def decode(path: str) -> str:
    """Decode with the embedded key material."""
    return _default.decode(path)
