"""Status-code errors reported by the platform entropy sources."""

from typing import Optional

INTERNAL_START = 0x80000000
CUSTOM_START = 0xC0000000
_MAX_CODE = 0xFFFFFFFF


def _internal(n: int) -> int:
    return INTERNAL_START + n


UNSUPPORTED = _internal(0)
ERRNO_NOT_POSITIVE = _internal(1)
WINDOWS_RTL_GEN_RANDOM = _internal(4)
FAILED_RDRAND = _internal(5)
NO_RDRAND = _internal(6)

_DESCRIPTIONS = {
    UNSUPPORTED: "getrandom: this target is not supported",
    ERRNO_NOT_POSITIVE: "errno: did not return a positive value",
    WINDOWS_RTL_GEN_RANDOM: "RtlGenRandom: Windows system function failure",
    FAILED_RDRAND: "RDRAND: failed multiple times: CPU issue likely",
    NO_RDRAND: "RDRAND: instruction not supported",
}


class SysError(Exception):
    """A nonzero 32-bit status code.

    Codes below ``INTERNAL_START`` are raw OS errors. Codes at or above it are
    internal to this package, and codes at or above ``CUSTOM_START`` are
    reserved for custom use.
    """

    INTERNAL_START = INTERNAL_START
    CUSTOM_START = CUSTOM_START
    UNSUPPORTED = UNSUPPORTED
    ERRNO_NOT_POSITIVE = ERRNO_NOT_POSITIVE
    WINDOWS_RTL_GEN_RANDOM = WINDOWS_RTL_GEN_RANDOM
    FAILED_RDRAND = FAILED_RDRAND
    NO_RDRAND = NO_RDRAND

    def __init__(self, code: int) -> None:
        if not 0 < code <= _MAX_CODE:
            raise ValueError(f"SysError code must be a nonzero u32, got {code}")
        self.code = code
        super().__init__(code)

    @classmethod
    def from_os_error(cls, exc: OSError) -> "SysError":
        if exc.errno is not None and exc.errno > 0:
            return cls(exc.errno)
        return cls(ERRNO_NOT_POSITIVE)

    def raw_os_error(self) -> Optional[int]:
        if self.code < INTERNAL_START:
            return self.code
        return None

    @property
    def description(self) -> Optional[str]:
        return _DESCRIPTIONS.get(self.code)

    @property
    def is_custom(self) -> bool:
        return self.code >= CUSTOM_START

    def __str__(self) -> str:
        errno = self.raw_os_error()
        if errno is not None:
            return f"OS Error: {errno}"
        if self.description is not None:
            return self.description
        return f"Unknown Error: {self.code}"

    def __repr__(self) -> str:
        errno = self.raw_os_error()
        if errno is not None:
            return f"SysError(os_error={errno})"
        if self.description is not None:
            return (
                f"SysError(internal_code={self.code}, "
                f"description={self.description!r})"
            )
        return f"SysError(unknown_code={self.code})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SysError):
            return self.code == other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)
