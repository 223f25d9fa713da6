"""Shared pytest configuration: path setup and common fixtures."""

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parent.parent

# Allow ``from credgraph import ...`` without an install (src is the package root)
sys.path.insert(0, str(_ROOT / "src"))

from credgraph import Preparator, TransformationGraph  # noqa: E402


@pytest.fixture
def graph():
    return TransformationGraph()


@pytest.fixture
def preparator():
    return Preparator()


@pytest.fixture
def credential():
    return {
        "isr": {"id": {"t": 1, "k": "123456"}},
        "sch": 1,
        "isd": 1700000000000,
        "exd": 1700000050000,
        "sbj": {
            "id": {"k": "2345678", "t": 2},
            "eth": "0x2...3",
            "alias": "Test",
        },
    }


@pytest.fixture
def schema():
    return {
        "isr": {
            "id": {
                "t": ["uint32-bytes", "bytes-uint32", "uint32-boolean"],
                "k": ["utf8-bytes"],
            },
        },
        "sch": ["uint32-bytes", "bytes-base16"],
        "isd": ["uint64-bytes", "bytes-base32"],
        "exd": ["uint64-bytes", "bytes-utf8"],
        "sbj": {
            "id": {
                "t": ["uint32-bytes"],
                "k": ["utf8-bytes", "bytes-base16"],
            },
            "alias": ["ascii-bytes", "bytes-uint128"],
            "eth": ["utf8-bytes", "bytes-uint256"],
        },
    }
