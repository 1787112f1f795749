"""
Tests for tree statistics.
"""

from protodecode.decoder import decode
from protodecode.stats import analyze_nodes, contains_wire_type
from protodecode.wire import WireType


class TestAnalyzeNodes:
    """Tests for analyze_nodes."""

    def test_mixed_message(self, mixed_message):
        stats = analyze_nodes(decode(mixed_message))

        assert stats.total_nodes == 5
        assert stats.nested_nodes == 2
        assert stats.max_depth == 3
        assert stats.min_field_number == 1
        assert stats.max_field_number == 4
        assert stats.total_bytes == 10
        assert stats.wire_type_counts[WireType.VARINT] == 2
        assert stats.wire_type_counts[WireType.LENGTH_DELIMITED] == 2
        assert stats.wire_type_counts[WireType.FIXED32] == 1
        assert stats.wire_type_counts[WireType.FIXED64] == 0

    def test_flat_message(self, repeated_varints):
        stats = analyze_nodes(decode(repeated_varints))

        assert stats.total_nodes == 3
        assert stats.nested_nodes == 0
        assert stats.max_depth == 1

    def test_empty(self):
        stats = analyze_nodes([])

        assert stats.total_nodes == 0
        assert stats.max_depth == 0
        assert stats.min_field_number is None
        assert stats.max_field_number is None

    def test_to_dict(self, mixed_message):
        d = analyze_nodes(decode(mixed_message)).to_dict()

        assert d["total_nodes"] == 5
        assert d["wire_types"] == {"Varint": 2, "LengthDelimited": 2, "Fixed32": 1}


class TestContainsWireType:
    """Tests for recursive wire type search."""

    def test_found_at_top_level(self, mixed_message):
        assert contains_wire_type(decode(mixed_message), WireType.FIXED32)

    def test_found_in_nested(self):
        nodes = decode(bytes.fromhex("1a050d01020304"))

        assert contains_wire_type(nodes, WireType.FIXED32)

    def test_missing(self, mixed_message):
        assert not contains_wire_type(decode(mixed_message), WireType.FIXED64)
