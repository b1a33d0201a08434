from oxibloom.bloom.bloom_filter import BITMASKS, BloomFilter
from oxibloom.bloom.params import BloomParams, bitmap_size, hasher_count

__all__ = ["BITMASKS", "BloomFilter", "BloomParams", "bitmap_size", "hasher_count"]
