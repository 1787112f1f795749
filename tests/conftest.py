"""
Pytest configuration and shared fixtures for protodecode tests.
"""

import pytest
import tempfile
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def simple_varint():
    """Field 1 = varint 150."""
    return bytes.fromhex("089601")


@pytest.fixture
def string_field():
    """Field 2 = "testing"."""
    return bytes.fromhex("120774657374696e67")


@pytest.fixture
def nested_message():
    """Field 3 = { field 1 = 150 }."""
    return bytes.fromhex("1a03089601")


@pytest.fixture
def repeated_varints():
    """Field 4 = 1, 2, 3 as three separate entries."""
    return bytes.fromhex("200120022003")


@pytest.fixture
def mixed_message():
    """
    A message touching every wire type:

        1: varint 1
        3: { 1: { 1: 150 } }
        4: fixed32 0x3F800000 (1.0f)
    """
    return bytes.fromhex("0801" "1a050a03089601" "250000803f")
