"""Files, directories, lexical path helpers and small desktop services."""

from __future__ import annotations

import io
import os
import posixpath
import shutil
import subprocess
import sys
import webbrowser
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Union

PathLike = Union[str, "os.PathLike[str]"]


class FileMode(Enum):
    """How a file is opened; the value is the matching binary open mode."""

    OPEN_READ = "rb"
    OPEN = "r+b"
    CREATE_WRITE = "wb"
    CREATE = "w+b"


class File:
    """An open binary file that remembers the mode it was opened with."""

    def __init__(self, handle: BinaryIO, mode: FileMode) -> None:
        self._handle = handle
        self._mode = mode

    @classmethod
    def open(cls, path: PathLike, mode: FileMode) -> "File | None":
        """Open ``path`` with ``mode``; return ``None`` if it cannot be opened."""
        try:
            handle = io.open(os.fspath(path), mode.value)
        except OSError:
            return None
        return cls(handle, mode)

    @staticmethod
    def exists(path: PathLike) -> bool:
        """Whether ``path`` is a regular file."""
        return os.path.isfile(os.fspath(path))

    @staticmethod
    def destroy(path: PathLike) -> bool:
        """Delete a file (or empty directory); False if nothing was there."""
        target = os.fspath(path)
        try:
            if os.path.isdir(target) and not os.path.islink(target):
                os.rmdir(target)
            else:
                os.remove(target)
        except FileNotFoundError:
            return False
        return True

    def __enter__(self) -> "File":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def mode(self) -> FileMode:
        """The mode the file was opened with."""
        return self._mode

    def length(self) -> int:
        """Size of the file in bytes."""
        here = self._handle.tell()
        end = self._handle.seek(0, os.SEEK_END)
        self._handle.seek(here)
        return end

    def position(self) -> int:
        """Current offset in the file."""
        return self._handle.tell()

    def seek(self, position: int) -> int:
        """Move to an absolute offset and return it."""
        return self._handle.seek(max(0, position))

    def read(self, length: int) -> bytes:
        """Read up to ``length`` bytes; nothing if the file is not readable."""
        if length <= 0 or not self._handle.readable():
            return b""
        return self._handle.read(length) or b""

    def write(self, data: bytes) -> int:
        """Write ``data``; return the bytes written (0 if not writable)."""
        if not data or not self._handle.writable():
            return 0
        written = self._handle.write(bytes(data))
        return len(data) if written is None else written

    def close(self) -> None:
        """Close the underlying handle."""
        self._handle.close()


def create_directory(path: PathLike) -> bool:
    """Create a directory and its parents; False if it already existed."""
    target = os.fspath(path)
    if os.path.isdir(target):
        return False
    os.makedirs(target)
    return True


def directory_exists(path: PathLike) -> bool:
    """Whether ``path`` is a directory."""
    return os.path.isdir(os.fspath(path))


def delete_directory(path: PathLike) -> bool:
    """Delete a directory tree; False if nothing was removed."""
    target = os.fspath(path)
    if os.path.isdir(target) and not os.path.islink(target):
        shutil.rmtree(target)
        return True
    if os.path.lexists(target):
        os.remove(target)
        return True
    return False


def enumerate_directory(path: PathLike, recursive: bool = True) -> list[str]:
    """List the entries of a directory, with forward-slash separators."""
    root = Path(os.fspath(path))
    if not root.is_dir():
        return []
    entries = root.rglob("*") if recursive else root.iterdir()
    return [str(entry).replace("\\", "/") for entry in entries]


def explore_directory(path: PathLike) -> None:
    """Open ``path`` in the system file browser."""
    target = os.fspath(path)
    if sys.platform.startswith("win"):
        os.startfile(target)  # type: ignore[attr-defined]
    elif sys.platform.startswith("linux"):
        subprocess.Popen(["xdg-open", target])
    else:
        subprocess.Popen(["open", target])


def _generic(path: PathLike) -> str:
    return os.fspath(path).replace("\\", "/")


def get_file_name(path: PathLike) -> str:
    """The last component of the path ('' for a trailing separator)."""
    return posixpath.basename(_generic(path))


def get_path_no_extension(path: PathLike) -> str:
    """The file name of the path with its final extension removed."""
    return posixpath.splitext(get_file_name(path))[0]


def get_file_name_no_extension(path: PathLike) -> str:
    """The file name of the path, without the file extension."""
    return get_path_no_extension(get_file_name(path))


def get_directory_name(path: PathLike) -> str:
    """Everything before the last component of the path."""
    return posixpath.dirname(_generic(path))


def get_path_after(path: PathLike, after: PathLike) -> str:
    """The part of ``path`` after the first occurrence of ``after``, or ''."""
    text = _generic(path)
    marker = _generic(after)
    pos = text.find(marker)
    if pos < 0:
        return ""
    return text[pos + len(marker):]


def normalize(path: PathLike) -> str:
    """Lexically normalise a path: resolve '.', '..' and redundant separators."""
    text = _generic(path)
    if not text:
        return ""
    absolute = text.startswith("/")
    parts: list[str] = []
    trailing = False
    for name in filter(None, text.split("/")):
        if name == ".":
            trailing = True
        elif name == "..":
            if parts and parts[-1] != "..":
                parts.pop()
                trailing = True
            elif not absolute:
                parts.append("..")
                trailing = False
        else:
            parts.append(name)
            trailing = False
    if text.endswith("/"):
        trailing = True
    body = "/".join(parts)
    if trailing and parts and parts[-1] != "..":
        body += "/"
    if absolute:
        return "/" + body
    return body or "."


def join(*args: PathLike) -> str:
    """Join two or more paths and normalise the result."""
    if len(args) < 2:
        raise TypeError("join() needs at least two paths")
    if len(args) > 2:
        return join(args[0], join(*args[1:]))
    a, b = _generic(args[0]), _generic(args[1])
    if not a:
        return normalize(b)
    if not b:
        return normalize(a)
    return normalize(posixpath.join(a, b))


def _video():
    import pygame

    if not pygame.display.get_init():
        pygame.display.init()
    return pygame


def set_clipboard(text: str) -> None:
    """Replace the clipboard contents with ``text``."""
    _video().scrap.put_text(text)


def get_clipboard() -> str:
    """The current text on the clipboard."""
    return _video().scrap.get_text()


def open_url(url: str) -> bool:
    """Open ``url`` in a web browser; True if a browser was launched."""
    return webbrowser.open(url)