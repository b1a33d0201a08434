"""End-to-end smoke test: random u128 values through a Bloom filter."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from oxibloom.bloom.bloom_filter import BloomFilter
from oxibloom.entropy.buffer import ENTROPY_BUFFER, EntropyBuffer

logger = logging.getLogger(__name__)


@dataclass
class SmokeTestResult:
    item_count: int
    fp_rate: float
    sample_count: int
    false_negatives: int
    false_positives: int
    fill_ratio: float

    @property
    def observed_fp_rate(self) -> float:
        if self.sample_count == 0:
            return 0.0
        return self.false_positives / self.sample_count

    def passed(self, tolerance: float) -> bool:
        return (
            self.false_negatives == 0
            and abs(self.observed_fp_rate - self.fp_rate) <= tolerance
        )


def _batches(total: int, batch_size: int):
    done = 0
    while done < total:
        size = min(batch_size, total - done)
        yield size
        done += size


def run_smoke_test(
    item_count: int,
    fp_rate: float,
    sample_count: int,
    buffer: Optional[EntropyBuffer] = None,
    batch_size: int = 10_000,
    progress: Optional[Callable[[str, int], None]] = None,
) -> SmokeTestResult:
    """Insert ``item_count`` random values, then check them and ``sample_count`` fresh ones.

    ``progress`` is called with a phase name ("insert", "verify", "sample") and
    the number of values just processed. Fresh samples are not checked against
    the inserted set; a 128-bit collision is negligible at any practical size.
    """
    buffer = buffer if buffer is not None else ENTROPY_BUFFER
    bloom = BloomFilter(item_count, fp_rate)
    inserted: List[int] = []

    for size in _batches(item_count, batch_size):
        batch = [buffer.get_random_u128() for _ in range(size)]
        bloom.insert_many(batch)
        inserted.extend(batch)
        if progress:
            progress("insert", size)

    false_negatives = 0
    for start in range(0, len(inserted), batch_size):
        batch = inserted[start:start + batch_size]
        false_negatives += int((~bloom.contains_many(batch)).sum())
        if progress:
            progress("verify", len(batch))
    if false_negatives:
        logger.error("%d inserted values were reported absent", false_negatives)

    false_positives = 0
    for size in _batches(sample_count, batch_size):
        batch = [buffer.get_random_u128() for _ in range(size)]
        false_positives += int(bloom.contains_many(batch).sum())
        if progress:
            progress("sample", size)

    result = SmokeTestResult(
        item_count=item_count,
        fp_rate=fp_rate,
        sample_count=sample_count,
        false_negatives=false_negatives,
        false_positives=false_positives,
        fill_ratio=bloom.fill_ratio(),
    )
    logger.debug(
        "Smoke test finished: observed fp rate %.5f, fill ratio %.4f",
        result.observed_fp_rate,
        result.fill_ratio,
    )
    return result
