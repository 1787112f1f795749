"""
Input normalization: turn pasted hex or base64 text into raw bytes.

Accepted forms:
    08 96 01                 plain hex, any whitespace
    0x08 0x96 0x01           0x-prefixed bytes
    \\x08\\x96\\x01             escaped bytes
    CJYB / CJYB== / a-_b     base64, standard or URL-safe, padding optional
"""

import base64
import binascii
import gzip
import logging
import string
import zlib
from typing import Optional

from protodecode.config import GZIP_MAGIC, TEXT_SAMPLE_SIZE, TEXT_THRESHOLD
from protodecode.errors import CorruptGzip, UnrecognizedInputFormat

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)
_PRINTABLE_CONTROL = (ord("\n"), ord("\r"), ord("\t"))


def parse_input(text: Optional[str]) -> bytes:
    """Parse hex first, then base64. Raises UnrecognizedInputFormat if neither fits."""
    data = try_parse_hex(text)
    if data is not None:
        logger.debug("Parsed input as hex (%d bytes)", len(data))
        return data

    data = try_parse_base64(text)
    if data is not None:
        logger.debug("Parsed input as base64 (%d bytes)", len(data))
        return data

    raise UnrecognizedInputFormat()


def try_parse_hex(text: Optional[str]) -> Optional[bytes]:
    """Return the decoded bytes, or None if text is not hex."""
    if text is None or not text.strip():
        return b""

    digits = []
    i = 0
    while i < len(text):
        c = text[i]
        nxt = text[i + 1] if i + 1 < len(text) else ""

        if c.isspace():
            i += 1
            continue
        # 0x / \x prefixes are separators, not data
        if c in ("\\", "0") and nxt in ("x", "X"):
            i += 2
            continue
        if c not in _HEX_DIGITS:
            return None

        digits.append(c)
        i += 1

    if len(digits) % 2:
        return None
    return bytes.fromhex("".join(digits))


def try_parse_base64(text: Optional[str]) -> Optional[bytes]:
    """Return the decoded bytes, or None if text is not base64."""
    if text is None:
        return b""

    candidate = "".join(text.split())
    if not candidate:
        return b""

    normalized = candidate.replace("-", "+").replace("_", "/")
    if len(normalized) % 4:
        normalized += "=" * (4 - len(normalized) % 4)

    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError):
        return None


def looks_like_text(data: bytes) -> bool:
    """
    Guess whether a buffer holds text (e.g. a pasted hex dump) or binary.

    Only the first TEXT_SAMPLE_SIZE bytes are inspected; a NUL byte in
    that window means binary.
    """
    if not data:
        return True

    sample = data[:TEXT_SAMPLE_SIZE]
    printable = 0
    for b in sample:
        if b == 0:
            return False
        if 32 <= b <= 126 or b in _PRINTABLE_CONTROL:
            printable += 1

    return printable >= len(sample) * TEXT_THRESHOLD


def maybe_gunzip(data: bytes) -> bytes:
    """
    Decompress gzip-wrapped payloads; pass everything else through.

    Raises CorruptGzip when the magic bytes are present but the stream
    is damaged or cut short.
    """
    if not data.startswith(GZIP_MAGIC):
        return data
    logger.debug("Unwrapping gzip payload (%d bytes)", len(data))
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise CorruptGzip(str(e)) from e


def load_payload(content: bytes) -> bytes:
    """
    Turn file or HTTP body contents into the protobuf bytes to decode.

    Contents that look like text are tried as a hex/base64 dump first;
    anything else (or text that is neither) is taken as raw protobuf.
    Either way a gzip wrapper is removed.
    """
    if looks_like_text(content):
        try:
            return maybe_gunzip(parse_input(content.decode("utf-8")))
        except (UnicodeDecodeError, UnrecognizedInputFormat):
            logger.debug("Text-like payload is not a hex/base64 dump, using raw bytes")
    return maybe_gunzip(content)
