"""Optimal Bloom filter sizing."""

import math
from dataclasses import dataclass

LN_2 = math.log(2)


def validate(item_count: int, fp_rate: float) -> None:
    if item_count <= 0:
        raise ValueError(f"item_count must be positive, got {item_count}")
    if not 0.0 < fp_rate < 1.0:
        raise ValueError(f"fp_rate must be in (0, 1), got {fp_rate}")


def bitmap_size(item_count: int, fp_rate: float) -> int:
    return math.ceil((-1.0 * item_count * math.log(fp_rate)) / (LN_2 * LN_2))


def hasher_count(fp_rate: float) -> int:
    return math.ceil((-1.0 * math.log(fp_rate)) / LN_2)


def expected_fp_rate(bit_count: int, hash_count: int, item_count: int) -> float:
    return (1.0 - math.exp(-hash_count * item_count / bit_count)) ** hash_count


@dataclass(frozen=True)
class BloomParams:
    item_count: int
    fp_rate: float
    optimal_m: int
    optimal_k: int
    byte_count: int

    @classmethod
    def from_capacity(cls, item_count: int, fp_rate: float) -> "BloomParams":
        validate(item_count, fp_rate)
        optimal_m = bitmap_size(item_count, fp_rate)
        return cls(
            item_count=item_count,
            fp_rate=fp_rate,
            optimal_m=optimal_m,
            optimal_k=hasher_count(fp_rate),
            # Tiny filters still need one byte to fold indexes into.
            byte_count=max(1, optimal_m // 8),
        )

    @property
    def bit_count(self) -> int:
        return self.byte_count * 8

    @property
    def expected_fp_rate(self) -> float:
        return expected_fp_rate(self.bit_count, self.optimal_k, self.item_count)
