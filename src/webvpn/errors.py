"""Error taxonomy for the URL codec.

Every failure is raised synchronously and never retried: the codec is
deterministic, so an identical input fails identically.
"""

from __future__ import annotations


class CodecError(Exception):
    """Base for all codec failures."""


class InvalidInputError(CodecError):
    """Clear text (or decrypted text) is not an absolute http/https URL."""


class MalformedPathError(CodecError):
    """An encoded path does not match the gateway template or alphabet."""


class PaddingError(CodecError):
    """Ciphertext did not decrypt to validly padded plaintext.

    Either the path was corrupted or it was produced with other key material.
    """


class EncodingError(CodecError):
    """Unexpected failure inside the cipher library."""


class KeyMaterialError(RuntimeError):
    """Embedded key material is unusable. Raised at import, never at runtime."""
