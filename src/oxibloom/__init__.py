from oxibloom.bloom import BITMASKS, BloomFilter, BloomParams, bitmap_size, hasher_count
from oxibloom.config import CONFIG, OxibloomConfig, load_config
from oxibloom.driver import SmokeTestResult, run_smoke_test
from oxibloom.entropy import (
    ENTROPY_BUFFER,
    EntropyBuffer,
    EntropySource,
    SysError,
    get_random_i8,
    get_random_i16,
    get_random_i32,
    get_random_i64,
    get_random_i128,
    get_random_u8,
    get_random_u16,
    get_random_u32,
    get_random_u64,
    get_random_u128,
    select_source,
)

__all__ = [
    "BITMASKS",
    "BloomFilter",
    "BloomParams",
    "bitmap_size",
    "hasher_count",
    "CONFIG",
    "OxibloomConfig",
    "load_config",
    "SmokeTestResult",
    "run_smoke_test",
    "ENTROPY_BUFFER",
    "EntropyBuffer",
    "EntropySource",
    "SysError",
    "get_random_i8",
    "get_random_i16",
    "get_random_i32",
    "get_random_i64",
    "get_random_i128",
    "get_random_u8",
    "get_random_u16",
    "get_random_u32",
    "get_random_u64",
    "get_random_u128",
    "select_source",
]
