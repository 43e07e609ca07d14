"""Literal decoding stages: base64 strings, \\xHH escapes and backslash escapes."""

from __future__ import annotations

import base64
import binascii
import logging
import re

from .base import PRINTABLE_RE, Stage

logger = logging.getLogger(__name__)

_BASE64_LITERAL_RE = re.compile(
    r"""['"]((?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?)['"]"""
)
_HEX_ESCAPE_RE = re.compile(r"\\x([0-9a-fA-F]{2})")

# Applied in this order.
_ESCAPES = (
    ("\\n", "\n"),
    ("\\t", "\t"),
    ("\\r", "\r"),
    ('\\"', '"'),
    ("\\'", "'"),
)


def _is_printable(text: str) -> bool:
    return all(PRINTABLE_RE.fullmatch(ch) for ch in text)


def decode_base64(encoded: str) -> str | None:
    """Decode a base64 payload, or None if it is invalid or not printable text."""
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("latin-1")
    except (binascii.Error, ValueError):
        return None
    if not decoded or not _is_printable(decoded):
        return None
    return decoded


class Base64Decoder(Stage):
    name = "base64"
    label = "Base64 decoding"
    description = "Replace quoted base64 literals that decode to printable text"

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        hits = 0

        def _replace(m: re.Match) -> str:
            nonlocal hits
            decoded = decode_base64(m.group(1))
            if decoded is None:
                return m.group(0)
            hits += 1
            return f'"{decoded}"'

        content = _BASE64_LITERAL_RE.sub(_replace, content)
        if hits:
            logger.debug("decoded %d base64 literal(s)", hits)
        return content, hits


class HexDecoder(Stage):
    name = "hex"
    label = "Hex string decoding"
    description = "Turn printable \\xHH escapes into their characters"

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        hits = 0

        def _replace(m: re.Match) -> str:
            nonlocal hits
            char = chr(int(m.group(1), 16))
            if not PRINTABLE_RE.fullmatch(char):
                return m.group(0)
            hits += 1
            return char

        return _HEX_ESCAPE_RE.sub(_replace, content), hits


class EscapeNormalizer(Stage):
    name = "escapes"
    label = None
    description = "Unescape \\n, \\t, \\r, \\\" and \\' (never reported)"

    def apply(self, content: str, metadata: dict) -> tuple[str, int]:
        for escaped, char in _ESCAPES:
            content = content.replace(escaped, char)
        return content, 0
