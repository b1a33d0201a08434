"""Refillable byte buffer over a platform entropy source."""

import logging
import sys
import threading
from typing import Optional

from oxibloom.entropy.sources import EntropySource, select_source

logger = logging.getLogger(__name__)

BUFFER_LENGTH = 1024


class EntropyBuffer:
    """Hands out random bytes from a fixed buffer, refilling it when exhausted.

    Nothing is read from the source until the first request. A request that
    would reach the end of the buffer triggers a full refill and is served from
    offset 0, so unread tail bytes are dropped and no byte is handed out twice
    within one fill. Source failures surface as ``SysError``; the buffer is then
    left uninitialized and the next request retries the fill.
    """

    def __init__(
        self,
        source: Optional[EntropySource] = None,
        buffer_length: int = BUFFER_LENGTH,
    ) -> None:
        if buffer_length < 2:
            raise ValueError("buffer_length must be at least 2")
        self.source = source if source is not None else select_source()
        self.buffer_length = buffer_length
        self._buffer = bytearray(buffer_length)
        self.buffer_index = 0
        self.initialized = False
        self.refills = 0
        self._lock = threading.Lock()

    def _fill(self) -> None:
        self.initialized = False
        self.source.fill(self._buffer)
        self.initialized = True
        self.refills += 1
        logger.debug(
            "Filled %d byte entropy buffer from %s source (refill #%d)",
            self.buffer_length,
            self.source.name,
            self.refills,
        )

    def read(self, width: int) -> bytes:
        if not 0 < width < self.buffer_length:
            raise ValueError(
                f"width must be between 1 and {self.buffer_length - 1}, got {width}"
            )
        with self._lock:
            if not self.initialized:
                self._fill()
                self.buffer_index = 0
            start = self.buffer_index
            if start + width >= self.buffer_length:
                self._fill()
                start = 0
            end = start + width
            self.buffer_index = end
            return bytes(self._buffer[start:end])

    def get_random_int(self, bits: int, signed: bool = False) -> int:
        if bits % 8 or bits <= 0:
            raise ValueError(f"bits must be a positive multiple of 8, got {bits}")
        width = bits // 8
        data = self.read(width)
        if len(data) != width:
            raise ValueError(f"Unable to convert from slice of length {len(data)}")
        if width == 1:
            value = data[0]
            return value - 0x100 if signed and value & 0x80 else value
        return int.from_bytes(data, sys.byteorder, signed=signed)

    def get_random_u8(self) -> int:
        return self.get_random_int(8)

    def get_random_i8(self) -> int:
        return self.get_random_int(8, signed=True)

    def get_random_u16(self) -> int:
        return self.get_random_int(16)

    def get_random_i16(self) -> int:
        return self.get_random_int(16, signed=True)

    def get_random_u32(self) -> int:
        return self.get_random_int(32)

    def get_random_i32(self) -> int:
        return self.get_random_int(32, signed=True)

    def get_random_u64(self) -> int:
        return self.get_random_int(64)

    def get_random_i64(self) -> int:
        return self.get_random_int(64, signed=True)

    def get_random_u128(self) -> int:
        return self.get_random_int(128)

    def get_random_i128(self) -> int:
        return self.get_random_int(128, signed=True)


ENTROPY_BUFFER = EntropyBuffer()


def get_random_u8() -> int:
    return ENTROPY_BUFFER.get_random_u8()


def get_random_i8() -> int:
    return ENTROPY_BUFFER.get_random_i8()


def get_random_u16() -> int:
    return ENTROPY_BUFFER.get_random_u16()


def get_random_i16() -> int:
    return ENTROPY_BUFFER.get_random_i16()


def get_random_u32() -> int:
    return ENTROPY_BUFFER.get_random_u32()


def get_random_i32() -> int:
    return ENTROPY_BUFFER.get_random_i32()


def get_random_u64() -> int:
    return ENTROPY_BUFFER.get_random_u64()


def get_random_i64() -> int:
    return ENTROPY_BUFFER.get_random_i64()


def get_random_u128() -> int:
    return ENTROPY_BUFFER.get_random_u128()


def get_random_i128() -> int:
    return ENTROPY_BUFFER.get_random_i128()
