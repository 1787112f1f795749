"""
Exceptions raised while decoding wire-format data or normalizing input.
"""

from typing import Optional


class DecodeError(ValueError):
    """Base class for malformed wire-format data."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (offset {offset})"
        super().__init__(message)
        self.offset = offset

    @property
    def kind(self) -> str:
        return type(self).__name__


class TruncatedVarint(DecodeError):
    """Buffer ended before a varint's terminating byte."""

    def __init__(self, offset: Optional[int] = None):
        super().__init__("Unexpected end of buffer while reading varint", offset)


class VarintOverflow(DecodeError):
    """Varint ran past 64 bits without terminating."""

    def __init__(self, offset: Optional[int] = None):
        super().__init__("Varint too long", offset)


class TruncatedFixed(DecodeError):
    def __init__(self, needed: int, available: int, offset: Optional[int] = None):
        super().__init__(f"Need {needed} bytes but only {available} remain", offset)
        self.needed = needed
        self.available = available


class LengthOverflow(DecodeError):
    def __init__(self, length: int, remaining: int, offset: Optional[int] = None):
        super().__init__(
            f"Length-delimited field too large: {length} bytes declared, {remaining} remain",
            offset,
        )
        self.length = length
        self.remaining = remaining


class UnsupportedWireType(DecodeError):
    def __init__(self, wire_type: int, field_number: int, offset: Optional[int] = None):
        super().__init__(
            f"Unsupported wire type {wire_type} for field {field_number}", offset
        )
        self.wire_type = wire_type
        self.field_number = field_number


class NestingTooDeep(DecodeError):
    """Nested messages exceed the configured recursion ceiling.

    Unlike the other decode errors this one is never swallowed by the
    nested-message check; it aborts the whole decode.
    """

    def __init__(self, max_depth: int):
        super().__init__(f"Nesting deeper than {max_depth} levels")
        self.max_depth = max_depth


class CorruptGzip(DecodeError):
    """Payload carries the gzip magic bytes but does not decompress."""

    def __init__(self, reason: str):
        super().__init__(f"Corrupt gzip payload: {reason}")
        self.reason = reason


class UnrecognizedInputFormat(ValueError):
    """Input text is neither hex nor base64."""

    def __init__(self):
        super().__init__(
            "Unrecognized input format: provide hex, \\xAA-escaped or Base64-encoded protobuf data."
        )
