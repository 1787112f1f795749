"""
Wire-format types shared by the decoder and the display layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple


class WireType(IntEnum):
    """Protobuf wire types. 3, 4, 6 and 7 are reserved and never decoded."""
    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5

    @property
    def label(self) -> str:
        return _WIRE_LABELS[self]


_WIRE_LABELS = {
    WireType.VARINT: "Varint",
    WireType.FIXED64: "Fixed64",
    WireType.LENGTH_DELIMITED: "LengthDelimited",
    WireType.FIXED32: "Fixed32",
}


@dataclass(frozen=True)
class FieldNode:
    """One decoded wire-format field.

    ``raw_value`` holds the value bytes only (never the key). For varints
    that is the original encoding, overlong forms included. ``children``
    is set only for length-delimited payloads that decoded cleanly as a
    nested message.

    ``span`` is (key start, value end) within the buffer the field was
    decoded from; it is bookkeeping and does not take part in equality.
    """
    field_number: int
    wire_type: WireType
    raw_value: bytes
    children: Optional[Tuple[FieldNode, ...]] = None
    span: Optional[Tuple[int, int]] = field(default=None, compare=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "field": self.field_number,
            "wire_type": self.wire_type.label,
            "value": self.raw_value.hex(),
        }
        if self.children:
            d["children"] = [c.to_dict() for c in self.children]
        return d

    def __str__(self) -> str:
        if self.children:
            return f"Field {self.field_number} ({self.wire_type.label}) -> {len(self.children)} child nodes"
        return f"Field {self.field_number} ({self.wire_type.label}) -> {len(self.raw_value)} bytes"
