"""Host-only path layout used by WRD WebVPN gateways.

    https://example.com:8443/a?b=c
    -> /https-8443/77726476706e69737468656265737421<hex(cfb(host))>/a?b=c

Only the host is encrypted, with AES-128-CFB (128-bit segments) under the
fixed key and IV. The hex of the IV leads the host segment and the ciphertext
hex is cut to twice the host's byte length. Everything after the host stays in
clear. There is no padding, so a tampered host decodes to a different host
instead of failing.
"""

from __future__ import annotations

import re

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from webvpn.codec import Codec, validate_clear_url
from webvpn.errors import EncodingError, InvalidInputError, MalformedPathError
from webvpn.keys import KeyMaterial, get_key_material

_IPV6_LITERAL = re.compile(r"\[[0-9A-Fa-f:.]+\]")
_AUTHORITY_END = re.compile(r"[/?#]")
_QUERY_OR_FRAGMENT = re.compile(r"[?#]")
_WRD_PATH = re.compile(r"/(https?)(?:-(\d+))?/([0-9a-f]*)(.*)", re.DOTALL)


class WrdCodec(Codec):
    """Codec speaking the WRD gateway's own path format."""

    name = "wrdvpn"

    def __init__(self, key_material: KeyMaterial | None = None):
        self._keys = key_material or get_key_material()
        self._iv_hex = self._keys.iv.hex()

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._keys.key), modes.CFB(self._keys.iv))

    def encrypt_host(self, host: str) -> str:
        """hex(iv) + hex(cfb(host)), truncated to the host's length."""
        data = host.encode("utf-8")
        try:
            encryptor = self._cipher().encryptor()
            ciphertext = encryptor.update(data) + encryptor.finalize()
        except (ValueError, TypeError) as exc:
            raise EncodingError(f"cipher failed while encoding: {exc}") from exc
        return self._iv_hex + ciphertext.hex()[: len(data) * 2]

    def decrypt_host(self, segment: str) -> str:
        if len(segment) <= len(self._iv_hex) or len(segment) % 2:
            raise MalformedPathError("host segment is too short or has odd length")
        if not segment.startswith(self._iv_hex):
            raise MalformedPathError("host segment does not carry the gateway IV")
        try:
            decryptor = self._cipher().decryptor()
            data = decryptor.update(bytes.fromhex(segment[len(self._iv_hex) :]))
            data += decryptor.finalize()
        except (ValueError, TypeError) as exc:
            raise EncodingError(f"cipher failed while decoding: {exc}") from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInputError("decrypted host is not valid UTF-8") from exc

    def encode(self, clear_url: str) -> str:
        url = validate_clear_url(clear_url)
        scheme, rest = url.split("://", 1)
        scheme = scheme.lower()

        literal = _IPV6_LITERAL.match(rest)
        if literal:
            host = literal.group(0)
            rest = rest[literal.end() :]
        else:
            host = ""

        end = _AUTHORITY_END.search(rest)
        authority, tail = (rest[: end.start()], rest[end.start() :]) if end else (rest, "")

        port = ""
        if literal:
            if authority and not authority.startswith(":"):
                raise InvalidInputError("unexpected text after IPv6 literal")
            port = authority[1:]
            if authority and not port:
                raise InvalidInputError("port is empty")
        else:
            name, sep, candidate = authority.rpartition(":")
            if sep and (candidate.isdigit() or not candidate):
                if not candidate:
                    raise InvalidInputError("port is empty")
                host, port = name, candidate
            else:
                host = authority
        if port and not port.isdigit():
            raise InvalidInputError(f"port must be numeric, got {port!r}")

        # The gateway encrypts everything up to the first '/', query included
        # when no path separates it from the host.
        combined = host + tail
        cut = combined.find("/", len(host))
        secret, clear = (combined, "") if cut == -1 else (combined[:cut], combined[cut:])

        protocol = f"{scheme}-{port}" if port else scheme
        return f"/{protocol}/{self.encrypt_host(secret)}{clear}"

    def decode(self, path: str) -> str:
        if not isinstance(path, str):
            raise MalformedPathError(f"path must be a string, got {type(path).__name__}")
        match = _WRD_PATH.fullmatch(path)
        if not match:
            raise MalformedPathError(
                "path must look like /<http|https>[-port]/<lowercase hex>[/...]"
            )
        scheme, port, segment, tail = match.groups()
        if tail and not tail.startswith("/"):
            raise MalformedPathError("host segment must be followed by '/' or end")

        secret = self.decrypt_host(segment)
        split = _QUERY_OR_FRAGMENT.search(secret)
        host, extra = (secret[: split.start()], secret[split.start() :]) if split else (secret, "")
        authority = f"{host}:{port}" if port else host
        return validate_clear_url(f"{scheme}://{authority}{extra}{tail}")
