"""Probabilistic membership testing with Bloom filters."""

import hashlib
import io
import logging
import pickle
import secrets
from typing import Any, Iterable, Optional, Tuple

import numpy as np

from oxibloom.bloom.params import BloomParams

logger = logging.getLogger(__name__)

U64_MASK = (1 << 64) - 1
KEY_SIZE = 16
# Bit 0 is the most significant bit of a byte.
BITMASKS = (0x80, 0x40, 0x20, 0x10, 0x08, 0x04, 0x02, 0x01)
_BITMASKS_NP = np.array(BITMASKS, dtype=np.uint8)


def _framed(item: Any) -> bytes:
    data = item_bytes(item)
    return len(data).to_bytes(8, "little") + data


def _fast_pickle(item: Any) -> bytes:
    out = io.BytesIO()
    pickler = pickle.Pickler(out, protocol=pickle.HIGHEST_PROTOCOL)
    # No memo, so equal objects pickle the same whatever their identity.
    pickler.fast = True
    pickler.dump(item)
    return out.getvalue()


def item_bytes(item: Any) -> bytes:
    """Deterministic byte form of ``item``; values that compare equal map alike.

    Integral floats encode as the equal int. Tuples and sets are encoded member
    by member, with set members sorted, so neither object identity nor
    iteration order leaks into the result.
    """
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)
    if isinstance(item, str):
        return item.encode("utf-8")
    if isinstance(item, float) and item.is_integer():
        item = int(item)
    if isinstance(item, int):
        length = (item.bit_length() + 8) // 8
        return item.to_bytes(length, "little", signed=True)
    if isinstance(item, tuple):
        return b"T" + b"".join(_framed(member) for member in item)
    if isinstance(item, (frozenset, set)):
        return b"S" + b"".join(sorted(_framed(member) for member in item))
    try:
        return _fast_pickle(item)
    except (pickle.PicklingError, TypeError, AttributeError, ValueError):
        return str(item).encode()


class BloomFilter:
    """Fixed-size Bloom filter using double hashing over two keyed BLAKE2b states.

    The ``k`` probe positions of an item are ``h1 + i * h2`` (mod 2**64) for
    ``i`` in ``range(k)``, where ``h1`` and ``h2`` are 64-bit digests taken
    with the filter's two keys. Each position selects byte ``pos // 8`` (folded
    into the bitmap with a modulo) and bit ``pos % 8`` counted from the most
    significant end.
    """

    def __init__(
        self,
        item_count: int,
        fp_rate: float,
        keys: Optional[Tuple[bytes, bytes]] = None,
    ) -> None:
        self.params = BloomParams.from_capacity(item_count, fp_rate)
        self.optimal_m = self.params.optimal_m
        self.optimal_k = self.params.optimal_k
        self.byte_count = self.params.byte_count
        self._bitmap = bytearray(self.byte_count)
        self._view = np.frombuffer(self._bitmap, dtype=np.uint8)
        if keys is None:
            keys = (secrets.token_bytes(KEY_SIZE), secrets.token_bytes(KEY_SIZE))
        if len(keys) != 2:
            raise ValueError("exactly two hash keys are required")
        self._hashers = tuple(
            hashlib.blake2b(key=key, digest_size=8) for key in keys
        )
        logger.debug(
            "BloomFilter sized for %d items at fp_rate=%s: m=%d k=%d bytes=%d",
            item_count,
            fp_rate,
            self.optimal_m,
            self.optimal_k,
            self.byte_count,
        )

    @property
    def bit_count(self) -> int:
        return self.byte_count * 8

    @property
    def bitmap(self) -> bytes:
        return bytes(self._bitmap)

    def _base_hashes(self, item: Any) -> Tuple[int, int]:
        data = item_bytes(item)
        h1 = self._hashers[0].copy()
        h2 = self._hashers[1].copy()
        h1.update(data)
        h2.update(data)
        return (
            int.from_bytes(h1.digest(), "little"),
            int.from_bytes(h2.digest(), "little"),
        )

    @staticmethod
    def _index(hash1: int, hash2: int, round_: int) -> Tuple[int, int]:
        combined = (hash1 + round_ * hash2) & U64_MASK
        return (combined >> 3, combined & 7)

    def _set_bit(self, byte_index: int, bit_index: int) -> None:
        self._bitmap[byte_index % self.byte_count] |= BITMASKS[bit_index]

    def _bit_is_set(self, byte_index: int, bit_index: int) -> bool:
        return bool(self._bitmap[byte_index % self.byte_count] & BITMASKS[bit_index])

    def insert(self, item: Any) -> None:
        h1, h2 = self._base_hashes(item)
        for i in range(self.optimal_k):
            self._set_bit(*self._index(h1, h2, i))

    add = insert

    def contains(self, item: Any) -> bool:
        h1, h2 = self._base_hashes(item)
        for i in range(self.optimal_k):
            if not self._bit_is_set(*self._index(h1, h2, i)):
                return False
        return True

    def __contains__(self, item: Any) -> bool:
        return self.contains(item)

    def _index_arrays(self, items: Iterable[Any]) -> Tuple[np.ndarray, np.ndarray]:
        pairs = [self._base_hashes(item) for item in items]
        h1 = np.fromiter((p[0] for p in pairs), dtype=np.uint64, count=len(pairs))
        h2 = np.fromiter((p[1] for p in pairs), dtype=np.uint64, count=len(pairs))
        rounds = np.arange(self.optimal_k, dtype=np.uint64)
        # uint64 array arithmetic wraps, matching the scalar path.
        combined = h1[:, None] + rounds[None, :] * h2[:, None]
        byte_idx = (combined >> np.uint64(3)) % np.uint64(self.byte_count)
        masks = _BITMASKS_NP[(combined & np.uint64(7)).astype(np.intp)]
        return byte_idx.astype(np.intp), masks

    def insert_many(self, items: Iterable[Any]) -> None:
        byte_idx, masks = self._index_arrays(items)
        np.bitwise_or.at(self._view, byte_idx.ravel(), masks.ravel())

    def contains_many(self, items: Iterable[Any]) -> np.ndarray:
        byte_idx, masks = self._index_arrays(items)
        return np.all((self._view[byte_idx] & masks) != 0, axis=1)

    def population_count(self) -> int:
        return int(np.unpackbits(self._view).sum())

    def fill_ratio(self) -> float:
        return self.population_count() / self.bit_count

    def estimated_fp_rate(self) -> float:
        return self.fill_ratio() ** self.optimal_k

    def __repr__(self) -> str:
        return (
            f"BloomFilter(item_count={self.params.item_count}, "
            f"fp_rate={self.params.fp_rate}, m={self.optimal_m}, "
            f"k={self.optimal_k}, bytes={self.byte_count})"
        )
