import ctypes
import errno
from unittest.mock import MagicMock, patch

import pytest

from oxibloom.entropy.errors import ERRNO_NOT_POSITIVE, UNSUPPORTED, SysError
from oxibloom.entropy.sources import (
    BCRYPT_USE_SYSTEM_PREFERRED_RNG,
    LinuxEntropySource,
    SystemEntropySource,
    UnsupportedEntropySource,
    WindowsEntropySource,
    select_source,
)


class TestSelectSource:
    def test_linux(self) -> None:
        assert isinstance(select_source("linux"), LinuxEntropySource)

    def test_windows(self) -> None:
        assert isinstance(select_source("win32"), WindowsEntropySource)

    @pytest.mark.parametrize("platform", ["darwin", "freebsd13", "emscripten"])
    def test_other_platforms_unsupported(self, platform) -> None:
        source = select_source(platform)
        assert isinstance(source, UnsupportedEntropySource)
        with pytest.raises(SysError) as info:
            source.fill(bytearray(4))
        assert info.value.code == UNSUPPORTED


class TestLinuxEntropySource:
    def test_fills_whole_buffer_from_device(self, tmp_path) -> None:
        device = tmp_path / "random"
        device.write_bytes(bytes(range(256)) * 8)
        dest = bytearray(1024)
        LinuxEntropySource(str(device)).fill(dest)
        assert bytes(dest) == (bytes(range(256)) * 4)

    def test_short_device_is_an_error(self, tmp_path) -> None:
        device = tmp_path / "short"
        device.write_bytes(b"abc")
        with pytest.raises(SysError) as info:
            LinuxEntropySource(str(device)).fill(bytearray(16))
        assert info.value.code == ERRNO_NOT_POSITIVE

    def test_missing_device_carries_errno(self, tmp_path) -> None:
        with pytest.raises(SysError) as info:
            LinuxEntropySource(str(tmp_path / "nope")).fill(bytearray(4))
        assert info.value.raw_os_error() == errno.ENOENT

    def test_partial_reads_are_retried(self) -> None:
        chunks = [b"ab", b"cd", b"e"]

        class Trickle:
            def readinto(self, view):
                data = chunks.pop(0)
                view[: len(data)] = data
                return len(data)

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        dest = bytearray(5)
        with patch("builtins.open", return_value=Trickle()):
            LinuxEntropySource().fill(dest)
        assert bytes(dest) == b"abcde"


class TestWindowsEntropySource:
    def test_fills_through_gen_random(self) -> None:
        calls = []

        def fake_gen_random(handle, buf, length, flags):
            calls.append((handle, length, flags))
            for i in range(length):
                buf[i] = 0xAB
            return 0

        dest = bytearray(64)
        WindowsEntropySource(fake_gen_random).fill(dest)
        assert bytes(dest) == b"\xab" * 64
        assert calls == [(None, 64, BCRYPT_USE_SYSTEM_PREFERRED_RNG)]

    def test_chunks_large_requests(self) -> None:
        gen_random = MagicMock(return_value=0)
        with patch("oxibloom.entropy.sources.MAX_CHUNK", 10):
            WindowsEntropySource(gen_random).fill(bytearray(25))
        lengths = [c.args[2] for c in gen_random.call_args_list]
        assert lengths == [10, 10, 5]

    def test_failure_status_becomes_sys_error(self) -> None:
        status = 0xC0000001
        gen_random = MagicMock(return_value=status)
        with pytest.raises(SysError) as info:
            WindowsEntropySource(gen_random).fill(bytearray(8))
        assert info.value.code == status ^ 0x80000000
        # Clearing the top bit of an NTSTATUS error lands in the OS code range.
        assert info.value.raw_os_error() == 0x40000001

    def test_warning_status_is_not_failure(self) -> None:
        gen_random = MagicMock(return_value=0x80000005)
        WindowsEntropySource(gen_random).fill(bytearray(8))

    def test_loads_bcrypt_lazily(self) -> None:
        source = WindowsEntropySource()
        fake = MagicMock(return_value=0)
        with patch(
            "oxibloom.entropy.sources._load_bcrypt_gen_random", return_value=fake
        ) as loader:
            source.fill(bytearray(4))
            source.fill(bytearray(4))
        loader.assert_called_once()
        assert isinstance(fake.call_args.args[1], ctypes.Array)


class TestSystemEntropySource:
    def test_fills_in_place(self) -> None:
        dest = bytearray(32)
        SystemEntropySource().fill(dest)
        assert len(dest) == 32

    def test_os_failure_is_wrapped(self) -> None:
        with patch("os.urandom", side_effect=OSError(errno.EIO, "io")):
            with pytest.raises(SysError) as info:
                SystemEntropySource().fill(bytearray(4))
        assert info.value.raw_os_error() == errno.EIO
