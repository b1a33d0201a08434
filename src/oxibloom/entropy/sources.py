"""Platform entropy sources that fill a byte buffer in place."""

import ctypes
import logging
import os
import sys
from typing import Callable, Optional

from oxibloom.entropy.errors import (
    ERRNO_NOT_POSITIVE,
    INTERNAL_START,
    UNSUPPORTED,
    SysError,
)

logger = logging.getLogger(__name__)

BCRYPT_USE_SYSTEM_PREFERRED_RNG = 0x00000002
# BCryptGenRandom takes a ULONG byte count.
MAX_CHUNK = 0xFFFFFFFF


class EntropySource:
    name = "abstract"

    def fill(self, dest: bytearray) -> None:
        raise NotImplementedError


class LinuxEntropySource(EntropySource):
    name = "linux"

    def __init__(self, path: str = "/dev/urandom") -> None:
        self.path = path

    def fill(self, dest: bytearray) -> None:
        view = memoryview(dest)
        filled = 0
        try:
            with open(self.path, "rb", buffering=0) as f:
                while filled < len(dest):
                    n = f.readinto(view[filled:])
                    if not n:
                        # The device hit EOF, which never happens for a real
                        # random device.
                        raise SysError(ERRNO_NOT_POSITIVE)
                    filled += n
        except OSError as exc:
            raise SysError.from_os_error(exc) from exc
        finally:
            view.release()


def _load_bcrypt_gen_random() -> Callable[..., int]:
    bcrypt = ctypes.WinDLL("bcrypt")
    func = bcrypt.BCryptGenRandom
    func.argtypes = [
        ctypes.c_void_p,
        ctypes.c_void_p,
        ctypes.c_uint32,
        ctypes.c_uint32,
    ]
    func.restype = ctypes.c_uint32
    return func


def _is_failure_status(status: int) -> bool:
    # NTSTATUS severity "error" has both top bits set.
    return status >> 30 == 0b11


class WindowsEntropySource(EntropySource):
    name = "windows"

    def __init__(self, gen_random: Optional[Callable[..., int]] = None) -> None:
        self._gen_random = gen_random

    def fill(self, dest: bytearray) -> None:
        if self._gen_random is None:
            self._gen_random = _load_bcrypt_gen_random()
        for offset in range(0, len(dest), MAX_CHUNK):
            length = min(MAX_CHUNK, len(dest) - offset)
            chunk = (ctypes.c_ubyte * length).from_buffer(dest, offset)
            status = self._gen_random(
                None, chunk, length, BCRYPT_USE_SYSTEM_PREFERRED_RNG
            )
            del chunk
            if _is_failure_status(status):
                logger.debug("BCryptGenRandom failed with status %#x", status)
                raise SysError(status ^ INTERNAL_START)


class SystemEntropySource(EntropySource):
    """``os.urandom`` source, usable on any platform when injected explicitly."""

    name = "system"

    def fill(self, dest: bytearray) -> None:
        try:
            dest[:] = os.urandom(len(dest))
        except OSError as exc:
            raise SysError.from_os_error(exc) from exc


class UnsupportedEntropySource(EntropySource):
    name = "unsupported"

    def __init__(self, platform: str = "") -> None:
        self.platform = platform

    def fill(self, dest: bytearray) -> None:
        raise SysError(UNSUPPORTED)


def select_source(platform: Optional[str] = None) -> EntropySource:
    platform = platform or sys.platform
    if platform.startswith("linux"):
        return LinuxEntropySource()
    if platform == "win32":
        return WindowsEntropySource()
    logger.debug("No entropy source for platform %s", platform)
    return UnsupportedEntropySource(platform)
