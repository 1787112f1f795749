"""Schema-less Protocol Buffers decoder.

Decodes raw protobuf wire-format bytes into an inspectable tree without
a .proto file.

Example:
    from protodecode import parse_input, decode, from_nodes

    data = parse_input("08 96 01 12 07 74 65 73 74 69 6e 67")
    for node in from_nodes(decode(data)):
        print(node.path, node.summary)
"""

from protodecode.cursor import Cursor
from protodecode.decoder import decode, pretty_print, try_decode_nested
from protodecode.display import (
    ArrayGroupNode,
    DisplayNode,
    ErrorNode,
    LeafNode,
    build_display_nodes,
    create_error,
    from_nodes,
    varint_to_value,
)
from protodecode.errors import (
    CorruptGzip,
    DecodeError,
    LengthOverflow,
    NestingTooDeep,
    TruncatedFixed,
    TruncatedVarint,
    UnrecognizedInputFormat,
    UnsupportedWireType,
    VarintOverflow,
)
from protodecode.inputs import load_payload, looks_like_text, maybe_gunzip, parse_input
from protodecode.stats import TreeStats, analyze_nodes
from protodecode.wire import FieldNode, WireType

__all__ = [
    "Cursor",
    "decode",
    "pretty_print",
    "try_decode_nested",
    "FieldNode",
    "WireType",
    "DisplayNode",
    "LeafNode",
    "ArrayGroupNode",
    "ErrorNode",
    "build_display_nodes",
    "from_nodes",
    "create_error",
    "varint_to_value",
    "parse_input",
    "looks_like_text",
    "maybe_gunzip",
    "load_payload",
    "TreeStats",
    "analyze_nodes",
    "DecodeError",
    "TruncatedVarint",
    "VarintOverflow",
    "TruncatedFixed",
    "LengthOverflow",
    "UnsupportedWireType",
    "NestingTooDeep",
    "CorruptGzip",
    "UnrecognizedInputFormat",
]

__version__ = "0.1.0"
