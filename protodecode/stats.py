"""
Structure statistics over a decoded field tree.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from protodecode.wire import FieldNode, WireType


@dataclass
class TreeStats:
    """Counts gathered by analyze_nodes."""
    total_nodes: int = 0
    nested_nodes: int = 0
    max_depth: int = 0
    min_field_number: Optional[int] = None
    max_field_number: Optional[int] = None
    total_bytes: int = 0
    wire_type_counts: Counter = field(default_factory=Counter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "nested_nodes": self.nested_nodes,
            "max_depth": self.max_depth,
            "min_field_number": self.min_field_number,
            "max_field_number": self.max_field_number,
            "total_bytes": self.total_bytes,
            "wire_types": {wt.label: n for wt, n in sorted(self.wire_type_counts.items())},
        }


def analyze_nodes(nodes: Sequence[FieldNode]) -> TreeStats:
    """Walk the tree; top-level fields are depth 1."""
    stats = TreeStats(total_bytes=sum(len(n.raw_value) for n in nodes))
    _walk(nodes, 1, stats)
    return stats


def _walk(nodes: Sequence[FieldNode], depth: int, stats: TreeStats) -> None:
    for node in nodes:
        stats.total_nodes += 1
        stats.max_depth = max(stats.max_depth, depth)
        if stats.min_field_number is None or node.field_number < stats.min_field_number:
            stats.min_field_number = node.field_number
        if stats.max_field_number is None or node.field_number > stats.max_field_number:
            stats.max_field_number = node.field_number
        stats.wire_type_counts[node.wire_type] += 1

        if node.has_children:
            stats.nested_nodes += 1
            _walk(node.children, depth + 1, stats)


def contains_wire_type(nodes: Sequence[FieldNode], wire_type: WireType) -> bool:
    for node in nodes:
        if node.wire_type == wire_type:
            return True
        if node.children and contains_wire_type(node.children, wire_type):
            return True
    return False
