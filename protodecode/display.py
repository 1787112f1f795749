"""
Display tree for decoded Protobuf fields.

Converts FieldNode trees into presentation nodes for a UI or terminal:
- LeafNode wraps one decoded field (and its nested subtree, if any)
- ArrayGroupNode collects every occurrence of a repeated field number
- ErrorNode stands in for a tree when decoding failed

Paths are dot-joined field numbers; occurrences inside an array group
carry a 1-based index, e.g. "3.4[2]".
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from protodecode.config import SHORT_BYTES_LIMIT
from protodecode.wire import FieldNode, WireType

_INDEX_RE = re.compile(r"\[(-?\d+)\]")
_ALLOWED_CONTROL = "\n\r\t"


class _PathMixin:
    """Repeated-field helpers derived from the node path."""
    path: str

    @property
    def occurrence_index(self) -> int:
        index = _occurrence_index(self.path)
        return index if index is not None else 1

    @property
    def is_repeated(self) -> bool:
        return _occurrence_index(self.path) is not None


@dataclass(frozen=True)
class LeafNode(_PathMixin):
    """A decoded field, with its nested message (if any) as children."""
    node: FieldNode
    path: str
    label: str
    summary: str
    raw_preview: str
    children: Tuple[DisplayNode, ...] = ()

    is_error = False
    is_array_group = False

    @property
    def field_number(self) -> int:
        return self.node.field_number

    @property
    def wire_type(self) -> WireType:
        return self.node.wire_type

    @property
    def field_display(self) -> str:
        if self.is_repeated:
            return f"{self.field_number}[{self.occurrence_index}]"
        return str(self.field_number)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "kind": "field",
            "path": self.path,
            "field": self.field_number,
            "wire_type": self.wire_type.label,
            "summary": self.summary,
            "raw": self.raw_preview,
        }
        if self.children:
            d["children"] = [c.to_dict() for c in self.children]
        return d


@dataclass(frozen=True)
class ArrayGroupNode(_PathMixin):
    """All occurrences of one field number among siblings."""
    field_number: int
    wire_type: WireType
    path: str
    label: str
    summary: str
    children: Tuple[LeafNode, ...]

    is_error = False
    is_array_group = True
    raw_preview = ""

    @property
    def field_display(self) -> str:
        return f"[{len(self.children)}]"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "array",
            "path": self.path,
            "field": self.field_number,
            "wire_type": self.wire_type.label,
            "summary": self.summary,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class ErrorNode(_PathMixin):
    """Inline placeholder for a failed decode."""
    message: str

    is_error = True
    is_array_group = False
    path = ""
    raw_preview = ""
    field_number = -1
    wire_type = None
    children = ()

    @property
    def label(self) -> str:
        return self.message

    @property
    def summary(self) -> str:
        return self.message

    @property
    def field_display(self) -> str:
        return ""

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "error", "message": self.message}


DisplayNode = Union[LeafNode, ArrayGroupNode, ErrorNode]


def create_error(message: str) -> ErrorNode:
    """Build the node a UI shows in place of a tree when decoding fails."""
    return ErrorNode(message)


def from_nodes(nodes: Sequence[FieldNode]) -> List[DisplayNode]:
    return build_display_nodes(nodes, "")


def build_display_nodes(nodes: Sequence[FieldNode], parent_path: str = "") -> List[DisplayNode]:
    """
    Build display nodes for one level of siblings.

    Occurrences of the same field number are merged into one array group
    even when other fields sit between them; groups keep the order in
    which each field number first appeared.
    """
    grouped: Dict[int, List[FieldNode]] = {}
    for node in nodes:
        grouped.setdefault(node.field_number, []).append(node)

    result: List[DisplayNode] = []
    for field_number, items in grouped.items():
        segment = str(field_number)
        base_path = _compose_path(parent_path, segment)

        if len(items) == 1:
            result.append(make_leaf(items[0], base_path))
            continue

        children = tuple(
            make_leaf(item, _compose_path(parent_path, f"{segment}[{index}]"))
            for index, item in enumerate(items, start=1)
        )
        # Top-level value lengths only, nested descendants are not re-counted
        total_length = sum(len(item.raw_value) for item in items)
        result.append(ArrayGroupNode(
            field_number=field_number,
            wire_type=items[0].wire_type,
            path=base_path,
            label=f"#{field_number} array",
            summary=f"array · {len(children)} elements · length {total_length}",
            children=children,
        ))

    return result


def make_leaf(node: FieldNode, path: str) -> LeafNode:
    """Wrap a single FieldNode, recursing into its nested message."""
    children = tuple(build_display_nodes(node.children, path)) if node.children else ()
    return LeafNode(
        node=node,
        path=path,
        label=_label(node),
        summary=_summary(node),
        raw_preview=_raw_preview(node.raw_value),
        children=children,
    )


def varint_to_value(raw: bytes) -> int:
    """Decode varint bytes and reinterpret the result as signed 64-bit."""
    result = 0
    shift = 0
    for b in raw:
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            break
        shift += 7
    result &= (1 << 64) - 1
    return result - (1 << 64) if result >= 1 << 63 else result


def try_utf8(raw: bytes) -> Optional[str]:
    """Return the text if raw is strict UTF-8 with no stray control characters."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    for ch in text:
        if ch not in _ALLOWED_CONTROL and unicodedata.category(ch) == "Cc":
            return None
    return text


def _varint_text(raw: bytes) -> str:
    value = varint_to_value(raw)
    return f"{value} (0x{value & 0xFFFFFFFFFFFFFFFF:X})"


def _fixed_hex(raw: bytes) -> str:
    return f"0x{int.from_bytes(raw, 'little'):0{len(raw) * 2}X}"


def _label(node: FieldNode) -> str:
    head = f"#{node.field_number} [{node.wire_type.label}]"
    if node.children:
        return f"{head} ← {len(node.children)} children"
    return f"{head} → {_payload_text(node)}"


def _payload_text(node: FieldNode) -> str:
    raw = node.raw_value
    if node.wire_type == WireType.VARINT:
        return _varint_text(raw)
    if node.wire_type in (WireType.FIXED32, WireType.FIXED64):
        return f"{_fixed_hex(raw)} (LE)"

    if node.children:
        return f"nested ({len(node.children)} children) · length {len(raw)}"
    if not raw:
        return "length 0"
    text = try_utf8(raw)
    if text is not None:
        return f'UTF8 "{text}" ({len(raw)} bytes) · length {len(raw)}'
    return f"{len(raw)} bytes [{raw.hex('-').upper()}] · length {len(raw)}"


def _summary(node: FieldNode) -> str:
    raw = node.raw_value
    if node.children:
        return f"nested · {len(node.children)} children · length {len(raw)}"

    if node.wire_type == WireType.VARINT:
        return f"Varint · {_varint_text(raw)} · length {len(raw)}"
    if node.wire_type == WireType.FIXED32:
        return f"Fixed32 · {_fixed_hex(raw)} · length {len(raw)}"
    if node.wire_type == WireType.FIXED64:
        return f"Fixed64 · {_fixed_hex(raw)} · length {len(raw)}"

    if not raw:
        return "length 0"
    text = try_utf8(raw)
    if text is not None:
        return f'UTF8 · "{text}" · length {len(raw)}'
    if len(raw) <= SHORT_BYTES_LIMIT:
        return f"Bytes · {raw.hex('-').upper()} · length {len(raw)}"
    return f"Bytes · length {len(raw)}"


def _raw_preview(raw: bytes) -> str:
    return raw.hex(" ").upper()


def _compose_path(parent_path: str, segment: str) -> str:
    return f"{parent_path}.{segment}" if parent_path else segment


def _occurrence_index(path: str) -> Optional[int]:
    if not path:
        return None
    last = path.rsplit(".", 1)[-1]
    match = _INDEX_RE.search(last)
    return int(match.group(1)) if match else None
