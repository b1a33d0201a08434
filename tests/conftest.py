import pytest
import sys
import os

# Add src to path so tests can run without installing package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from oxibloom.entropy.sources import EntropySource


class CountingSource(EntropySource):
    """Deterministic source: fill N writes the byte value N everywhere."""

    name = "counting"

    def __init__(self):
        self.fills = 0

    def fill(self, dest):
        self.fills += 1
        dest[:] = bytes([self.fills % 256]) * len(dest)


class SequenceSource(EntropySource):
    """Each fill writes 0, 1, 2, ... so every offset is distinguishable."""

    name = "sequence"

    def __init__(self):
        self.fills = 0

    def fill(self, dest):
        self.fills += 1
        dest[:] = bytes((self.fills * 7 + i) % 256 for i in range(len(dest)))


@pytest.fixture
def counting_source():
    return CountingSource()


@pytest.fixture
def sequence_source():
    return SequenceSource()


@pytest.fixture
def fixed_keys():
    return (b"k" * 16, b"s" * 16)
