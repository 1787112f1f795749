"""
Schema-less Protobuf wire-format decoder.

Turns raw bytes into a tree of FieldNode objects without a .proto file.
Length-delimited payloads are tried as nested messages: a payload that
decodes cleanly and is consumed to its last byte gets children, anything
else stays a leaf. The check can false-positive on binary data that
happens to look like valid fields; it is a best-effort heuristic.

Usage:
    from protodecode.decoder import decode, pretty_print

    nodes = decode(bytes.fromhex("089601"))
    print(pretty_print(nodes))
"""

import logging
from typing import Iterable, List, Optional, Tuple

from protodecode.config import MAX_DEPTH, MAX_DEPTH_LIMIT
from protodecode.cursor import BytesLike, Cursor
from protodecode.errors import DecodeError, LengthOverflow, NestingTooDeep, UnsupportedWireType
from protodecode.wire import FieldNode, WireType

logger = logging.getLogger(__name__)

# Largest length-delimited size accepted (signed 32-bit)
MAX_LENGTH = 0x7FFFFFFF


def decode(data: BytesLike, max_depth: int = MAX_DEPTH) -> List[FieldNode]:
    """
    Decode a buffer as a sequence of top-level fields.

    Raises a DecodeError subclass if the buffer is not well-formed at the
    top level; no partial result is returned. max_depth is capped at
    MAX_DEPTH_LIMIT.
    """
    return _decode_message(Cursor(data), 0, min(max_depth, MAX_DEPTH_LIMIT))


def try_decode_nested(payload: bytes, depth: int, max_depth: int = MAX_DEPTH) -> Optional[Tuple[FieldNode, ...]]:
    """
    Try to decode a length-delimited payload as a nested message.

    Returns the children when the payload decodes and is consumed exactly,
    otherwise None. Empty payloads are never tried.
    """
    if not payload:
        return None

    cursor = Cursor(payload)
    try:
        children = _decode_message(cursor, depth + 1, min(max_depth, MAX_DEPTH_LIMIT))
    except NestingTooDeep:
        raise
    except DecodeError as e:
        logger.debug("Payload of %d bytes is not a message: %s", len(payload), e)
        return None

    # _decode_message only returns once the cursor is at the end
    return tuple(children)


def _decode_message(cursor: Cursor, depth: int, max_depth: int) -> List[FieldNode]:
    if depth > max_depth:
        raise NestingTooDeep(max_depth)

    nodes = []
    while not cursor.at_end:
        nodes.append(_decode_field(cursor, depth, max_depth))
    return nodes


def _decode_field(cursor: Cursor, depth: int, max_depth: int) -> FieldNode:
    start = cursor.position
    key = cursor.read_varint()
    field_number = key >> 3
    wire_value = key & 0b111

    try:
        wire_type = WireType(wire_value)
    except ValueError:
        raise UnsupportedWireType(wire_value, field_number, start) from None

    children = None
    if wire_type == WireType.VARINT:
        raw = cursor.read_varint_bytes()
    elif wire_type == WireType.FIXED32:
        raw = cursor.read_bytes(4)
    elif wire_type == WireType.FIXED64:
        raw = cursor.read_bytes(8)
    else:
        length_offset = cursor.position
        length = cursor.read_varint()
        if length > MAX_LENGTH or length > cursor.remaining:
            raise LengthOverflow(length, cursor.remaining, length_offset)
        raw = cursor.read_bytes(length)
        children = try_decode_nested(raw, depth, max_depth)

    return FieldNode(
        field_number=field_number,
        wire_type=wire_type,
        raw_value=raw,
        children=children,
        span=(start, cursor.position),
    )


def pretty_print(nodes: Iterable[FieldNode], indent: int = 0) -> str:
    """Render nodes as brace-delimited, indented text for debugging."""
    lines = []
    prefix = "  " * indent
    for node in nodes:
        head = f"{prefix}Field {node.field_number} (Wire={node.wire_type.label}) "
        if node.has_children:
            lines.append(head + "{\n")
            lines.append(pretty_print(node.children, indent + 1))
            lines.append(prefix + "}\n")
        else:
            lines.append(f"{head}=> {node.raw_value.hex().upper()}\n")
    return "".join(lines)
