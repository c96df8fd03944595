"""Key material shared with the gateway.

The pair is embedded at build time and agreed out of band with the gateway
operator. It is validated once, when this module is imported.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from webvpn.errors import KeyMaterialError

AES_BLOCK_BYTES = 16

_KEY = b"wrdvpnisthebest!"
_IV = b"wrdvpnisthebest!"


@dataclass(frozen=True)
class KeyMaterial:
    """AES-128 key and IV. Immutable; repr hides the bytes."""

    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, bytes) or len(self.key) != AES_BLOCK_BYTES:
            raise KeyMaterialError(
                f"key must be {AES_BLOCK_BYTES} bytes for AES-128"
            )
        if not isinstance(self.iv, bytes) or len(self.iv) != AES_BLOCK_BYTES:
            raise KeyMaterialError(
                f"iv must be {AES_BLOCK_BYTES} bytes (one AES block)"
            )


_KEY_MATERIAL = KeyMaterial(key=_KEY, iv=_IV)


def get_key_material() -> KeyMaterial:
    """Return the process-wide key material. Same instance on every call."""
    return _KEY_MATERIAL
