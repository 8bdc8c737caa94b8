"""Reversible transform applied to chat message bodies before broadcast.

``XorBase64Codec`` XORs each UTF-16 code unit against a repeating key and base64
encodes the UTF-8 bytes of the result. It is obfuscation for parity with
existing clients, not encryption: anyone holding the shared key (every client
does) can read the messages. Deployments that need confidentiality should point
``CHAT_CODEC`` at a codec built on authenticated encryption.
"""

from __future__ import annotations

import base64
import binascii
from functools import lru_cache
from typing import Protocol

from django.conf import settings
from django.utils.module_loading import import_string


class DecodeError(ValueError):
    """Ciphertext could not be decoded back into text."""


class MessageCodec(Protocol):
    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, ciphertext: str) -> str: ...


def _code_units(text: str) -> list[int]:
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i : i + 2], "little") for i in range(0, len(data), 2)]


def _xor(text: str, key: str) -> str:
    # UTF-16 code units: a character outside the BMP is XORed as a surrogate
    # pair and consumes two key positions.
    key_units = _code_units(key)
    xored = b"".join(
        (unit ^ key_units[i % len(key_units)]).to_bytes(2, "little")
        for i, unit in enumerate(_code_units(text))
    )
    return xored.decode("utf-16-le", "surrogatepass")


def _to_utf8(text: str) -> bytes:
    # Unpaired surrogates have no UTF-8 form; they become U+FFFD.
    return "".join(
        "\ufffd" if "\ud800" <= char <= "\udfff" else char for char in text
    ).encode("utf-8")


def encrypt(plaintext: str, key: str) -> str:
    if not key:
        msg = "key must not be empty"
        raise ValueError(msg)
    return base64.b64encode(_to_utf8(_xor(plaintext, key))).decode("ascii")


def decrypt(ciphertext: str, key: str) -> str:
    if not key:
        msg = "key must not be empty"
        raise ValueError(msg)
    try:
        raw = base64.b64decode(ciphertext, validate=True)
        text = raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        msg = "ciphertext is not valid base64-encoded UTF-8"
        raise DecodeError(msg) from exc
    return _xor(text, key)


class XorBase64Codec:
    """Shared-key XOR + base64 codec."""

    def __init__(self, key: str):
        if not key:
            msg = "key must not be empty"
            raise ValueError(msg)
        self.key = key

    def encrypt(self, plaintext: str) -> str:
        return encrypt(plaintext, self.key)

    def decrypt(self, ciphertext: str) -> str:
        return decrypt(ciphertext, self.key)


@lru_cache(maxsize=1)
def get_codec() -> MessageCodec:
    """Return the codec configured by ``CHAT_CODEC`` / ``CHAT_CODEC_KEY``."""

    codec_class = import_string(settings.CHAT_CODEC)
    return codec_class(key=settings.CHAT_CODEC_KEY)
