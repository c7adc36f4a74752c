"""Shared fixtures for the minigps tests."""

import io
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).parent.parent / 'src'
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# 2022-06-20 21:13:45 UTC, 55.78781266666667, 37.5387715, 154.7 m
AID_BYTES = bytes.fromhex('9c 5a a3 0b d7 e4 4b 40 29 42 ea 76 f6 c4 42 40'
                          '66 66 66 66 66 56 63 40 09 e3 b0 62 00 00 00 00')

# 2022-01-15 06:59:15 UTC, 55.78938888888889, 37.536833333333334
POI_BYTES = bytes.fromhex('c3 70 e2 61 00 00 00 00 41 cd f2 b1 0a e5 4b 40'
                          'e0 08 65 f4 b6 c4 42 40 00 00 00 00 00 00 00 00')

# 55.788067, 37.538875833333336, 1972 points, 3011.489339109006 m, 1983 s, 3.57
TRAIL_BYTES = bytes.fromhex('00 00 00 00 00 00 00 00 46 07 24 61 df e4 4b 40'
                            'be 62 20 e2 f9 c4 42 40 00 00 00 00 b4 07 00 00'
                            'ab db a7 8a fa 86 a7 40 bf 07 00 00 e1 7a 64 40')


@pytest.fixture
def aid_file():
    return io.BytesIO(AID_BYTES)


@pytest.fixture
def trail_file():
    return io.BytesIO(TRAIL_BYTES)


@pytest.fixture
def poi_file():
    """A full POI.DAT file."""
    return io.BytesIO(POI_BYTES * 16)
