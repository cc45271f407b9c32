"""Byte streams over files, caller-owned buffers and growable buffers."""

from __future__ import annotations

import os
import struct
from abc import ABC, abstractmethod
from typing import BinaryIO, Union

from .mathutil import Endian

_PIPE_CHUNK = 4096

_BYTE_ORDER = {Endian.LITTLE: "<", Endian.BIG: ">"}

BytesLike = Union[bytes, bytearray, memoryview]


class Stream(ABC):
    """Base class for readable and writable byte streams."""

    @abstractmethod
    def length(self) -> int:
        """Total length of the stream in bytes."""

    @abstractmethod
    def position(self) -> int:
        """Current read/write position."""

    @abstractmethod
    def seek(self, position: int) -> int:
        """Move to ``position`` and return the new position."""

    @abstractmethod
    def is_open(self) -> bool:
        """Whether the stream is open."""

    @abstractmethod
    def is_readable(self) -> bool:
        """Whether the stream can be read."""

    @abstractmethod
    def is_writable(self) -> bool:
        """Whether the stream can be written."""

    @abstractmethod
    def _read_data(self, length: int) -> bytes:
        """Read up to ``length`` bytes."""

    @abstractmethod
    def _write_data(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""

    def pipe(self, to: "Stream", length: int) -> int:
        """Copy up to ``length`` bytes into ``to``; return the bytes written."""
        result = 0
        while length > 0:
            step = min(length, _PIPE_CHUNK)
            chunk = self.read(step)
            wrote = to.write(chunk)
            result += wrote
            length -= step
            if len(chunk) < step or wrote < len(chunk):
                break
        return result

    def read(self, length: int) -> bytes:
        """Read up to ``length`` bytes."""
        if length <= 0:
            return b""
        return self._read_data(length)

    def _read_until(self, stops: bytes) -> bytes:
        out = bytearray()
        while True:
            ch = self.read(1)
            if not ch or ch in stops:
                return bytes(out)
            out += ch

    def read_string(self, length: int = -1) -> str:
        """Read a string; a negative ``length`` reads up to a NUL byte."""
        if length < 0:
            raw = self._read_until(b"\0")
        else:
            raw = self.read(length).ljust(length, b"\0")
        return raw.decode("utf-8", errors="replace")

    def read_line(self) -> str:
        """Read up to a newline or NUL byte, which is consumed but not returned."""
        return self._read_until(b"\n\0").decode("utf-8", errors="replace")

    def write(self, data: Union[BytesLike, str]) -> int:
        """Write bytes or a UTF-8 string and return the bytes written."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        data = bytes(data)
        if not data:
            return 0
        return self._write_data(data)

    def _read_struct(self, code: str, endian: Endian):
        size = struct.calcsize(code)
        raw = self.read(size)
        if len(raw) < size:
            raise EOFError(f"expected {size} bytes, got {len(raw)}")
        return struct.unpack(_BYTE_ORDER[endian] + code, raw)[0]

    def _write_struct(self, code: str, value, endian: Endian) -> int:
        return self.write(struct.pack(_BYTE_ORDER[endian] + code, value))

    def read_uint8(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("B", endian)

    def read_uint16(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("H", endian)

    def read_uint32(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("I", endian)

    def read_uint64(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("Q", endian)

    def read_int8(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("b", endian)

    def read_int16(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("h", endian)

    def read_int32(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("i", endian)

    def read_int64(self, endian: Endian = Endian.LITTLE) -> int:
        return self._read_struct("q", endian)

    def read_float32(self, endian: Endian = Endian.LITTLE) -> float:
        return self._read_struct("f", endian)

    def read_float64(self, endian: Endian = Endian.LITTLE) -> float:
        return self._read_struct("d", endian)

    def write_uint8(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("B", value, endian)

    def write_uint16(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("H", value, endian)

    def write_uint32(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("I", value, endian)

    def write_uint64(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("Q", value, endian)

    def write_int8(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("b", value, endian)

    def write_int16(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("h", value, endian)

    def write_int32(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("i", value, endian)

    def write_int64(self, value: int, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("q", value, endian)

    def write_float32(self, value: float, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("f", value, endian)

    def write_float64(self, value: float, endian: Endian = Endian.LITTLE) -> int:
        return self._write_struct("d", value, endian)


class FileStream(Stream):
    """Stream over a binary file object, or a file opened from a path.

    A path that cannot be opened leaves the stream closed rather than raising.
    """

    def __init__(self, source: Union[str, os.PathLike, BinaryIO, None] = None,
                 mode: str = "rb") -> None:
        self._file: BinaryIO | None = None
        if source is None:
            return
        if isinstance(source, (str, os.PathLike)):
            if "b" not in mode:
                raise ValueError("FileStream needs a binary mode")
            try:
                self._file = open(source, mode)
            except OSError:
                self._file = None
        else:
            self._file = source

    def __enter__(self) -> "FileStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def length(self) -> int:
        if self._file is None:
            return 0
        here = self._file.tell()
        end = self._file.seek(0, os.SEEK_END)
        self._file.seek(here)
        return end

    def position(self) -> int:
        return self._file.tell() if self._file is not None else 0

    def seek(self, position: int) -> int:
        if self._file is None:
            return 0
        return self._file.seek(max(0, position))

    def is_open(self) -> bool:
        return self._file is not None

    def is_readable(self) -> bool:
        return self._file is not None and self._file.readable()

    def is_writable(self) -> bool:
        return self._file is not None and self._file.writable()

    def _read_data(self, length: int) -> bytes:
        if not self.is_readable():
            return b""
        return self._file.read(length) or b""

    def _write_data(self, data: bytes) -> int:
        if not self.is_writable():
            return 0
        written = self._file.write(data)
        return len(data) if written is None else written


class MemoryStream(Stream):
    """Stream over a caller-owned buffer of fixed size.

    A ``bytearray`` or writable ``memoryview`` can be written through;
    ``bytes`` gives a read-only stream.
    """

    def __init__(self, data: BytesLike | None = None) -> None:
        self._source = data
        if data is None:
            self._view = memoryview(b"")
            self._writable = False
        else:
            self._view = memoryview(data).cast("B")
            self._writable = not self._view.readonly
        self._position = 0

    def length(self) -> int:
        return len(self._view)

    def position(self) -> int:
        return self._position

    def seek(self, position: int) -> int:
        self._position = max(0, min(position, len(self._view)))
        return self._position

    def is_open(self) -> bool:
        return self._source is not None and len(self._view) > 0

    def is_readable(self) -> bool:
        return self.is_open()

    def is_writable(self) -> bool:
        return self._writable and len(self._view) > 0

    def data(self) -> BytesLike | None:
        """The buffer this stream moves over."""
        return self._source

    def _read_data(self, length: int) -> bytes:
        if not self.is_readable() or self._position >= len(self._view):
            return b""
        end = min(self._position + length, len(self._view))
        chunk = self._view[self._position:end].tobytes()
        self._position = end
        return chunk

    def _write_data(self, data: bytes) -> int:
        if not self.is_writable() or self._position >= len(self._view):
            return 0
        count = min(len(data), len(self._view) - self._position)
        self._view[self._position:self._position + count] = data[:count]
        self._position += count
        return count


class BufferStream(Stream):
    """Stream over an internal buffer that grows as it is written."""

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._buffer = bytearray(capacity)
        self._position = 0

    def length(self) -> int:
        return len(self._buffer)

    def position(self) -> int:
        return self._position

    def seek(self, position: int) -> int:
        self._position = max(0, min(position, len(self._buffer)))
        return self._position

    def is_open(self) -> bool:
        return True

    def is_readable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return True

    def resize(self, length: int) -> None:
        """Truncate or zero-extend the buffer to ``length`` bytes."""
        if length < 0:
            raise ValueError("length must not be negative")
        if length < len(self._buffer):
            del self._buffer[length:]
        else:
            self._buffer.extend(bytes(length - len(self._buffer)))

    def clear(self) -> None:
        """Empty the buffer and rewind."""
        self._buffer.clear()
        self._position = 0

    def data(self) -> bytearray:
        """The internal buffer."""
        return self._buffer

    def _read_data(self, length: int) -> bytes:
        end = min(self._position + length, len(self._buffer))
        if end <= self._position:
            return b""
        chunk = bytes(self._buffer[self._position:end])
        self._position = end
        return chunk

    def _write_data(self, data: bytes) -> int:
        end = self._position + len(data)
        if end > len(self._buffer):
            self.resize(end)
        self._buffer[self._position:end] = data
        self._position = end
        return len(data)