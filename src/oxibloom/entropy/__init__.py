from oxibloom.entropy.buffer import (
    BUFFER_LENGTH,
    ENTROPY_BUFFER,
    EntropyBuffer,
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
)
from oxibloom.entropy.errors import SysError
from oxibloom.entropy.sources import (
    EntropySource,
    LinuxEntropySource,
    SystemEntropySource,
    UnsupportedEntropySource,
    WindowsEntropySource,
    select_source,
)

__all__ = [
    "BUFFER_LENGTH",
    "ENTROPY_BUFFER",
    "EntropyBuffer",
    "EntropySource",
    "LinuxEntropySource",
    "SysError",
    "SystemEntropySource",
    "UnsupportedEntropySource",
    "WindowsEntropySource",
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
