# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Host directory backend.

Wraps a directory on the local disk. Blocking calls run in worker threads
via :func:`asyncio.to_thread` so the event loop stays responsive. Writable
streams stage content in a hidden sibling file that atomically replaces the
target when the stream is closed.

Example usage::

    from handlenav import Navigator
    from handlenav.backends import HostDirectoryHandle

    nav = Navigator(HostDirectoryHandle("/path/to/workspace"))
    await nav.copy_directory("/src", "/backup/src")
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
import threading
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

from ..errors import ExpectedDirectoryError, ExpectedFileError, NotFoundError
from ._protocol import Handle
from ._streams import ReaderBase, WritableBase
from ._types import HandleKind, validate_entry_name

__all__ = ["HostDirectoryHandle", "HostFileHandle"]

_SWAP_SUFFIX = ".swap"

# Absolute paths of swap files opened by this process and not yet finished.
# Only these are hidden from listings; user files ending in ".swap" are not.
_live_swaps: set[str] = set()
_live_swaps_lock = threading.Lock()


class _HostEntry:
    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._path)!r})"

    @property
    def path(self) -> Path:
        """Location of the entry on the host."""
        return self._path

    @property
    def name(self) -> str:
        return self._path.name

    async def is_same_entry(self, other: Handle) -> bool:
        if not isinstance(other, _HostEntry) or type(other) is not type(self):
            return False
        return await asyncio.to_thread(_same_path, self._path, other.path)


def _same_path(first: Path, second: Path) -> bool:
    try:
        return os.path.samefile(first, second)
    except FileNotFoundError:
        return first.resolve() == second.resolve()


class HostFileHandle(_HostEntry):
    """Handle to a regular file on the host."""

    __slots__ = ()

    @property
    def kind(self) -> HandleKind:
        return "file"

    async def size(self) -> int:
        stat = await asyncio.to_thread(self._path.stat)
        return stat.st_size

    def open_read(self) -> _HostReader:
        return _HostReader(self._path)

    async def create_writable(
        self, *, keep_existing_data: bool = False
    ) -> _HostWritable:
        stream = await asyncio.to_thread(
            _open_swap_file, self._path, keep_existing_data
        )
        return _HostWritable(self._path, *stream)


class HostDirectoryHandle(_HostEntry):
    """Handle to a directory on the host.

    Raises:
        NotADirectoryError: ``path`` exists but is not a directory.
    """

    __slots__ = ()

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__(path)
        if self._path.exists() and not self._path.is_dir():
            msg = f"Not a directory: {str(self._path)!r}"
            raise ExpectedDirectoryError(msg)

    @property
    def kind(self) -> HandleKind:
        return "directory"

    async def get_directory(
        self, name: str, *, create: bool = False
    ) -> HostDirectoryHandle:
        child = self._path / validate_entry_name(name)
        await asyncio.to_thread(_ensure_entry, child, directory=True, create=create)
        return HostDirectoryHandle(child)

    async def get_file(self, name: str, *, create: bool = False) -> HostFileHandle:
        child = self._path / validate_entry_name(name)
        await asyncio.to_thread(_ensure_entry, child, directory=False, create=create)
        return HostFileHandle(child)

    async def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        listing = await asyncio.to_thread(_scan, self._path)
        for name, is_dir in listing:
            child = self._path / name
            if is_dir:
                yield name, HostDirectoryHandle(child)
            else:
                yield name, HostFileHandle(child)

    async def resolve(self, handle: Handle) -> list[str] | None:
        if not isinstance(handle, _HostEntry):
            return None
        return await asyncio.to_thread(_relative_parts, self._path, handle.path)


def _ensure_entry(path: Path, *, directory: bool, create: bool) -> None:
    if path.exists():
        if path.is_dir() != directory:
            if directory:
                msg = f"Not a directory: {path.name!r}"
                raise ExpectedDirectoryError(msg)
            msg = f"Is a directory: {path.name!r}"
            raise ExpectedFileError(msg)
        return
    if not create:
        kind = "directory" if directory else "file"
        msg = f"No such {kind}: {path.name!r}"
        raise NotFoundError(msg)
    if directory:
        path.mkdir()
    else:
        path.touch()


def _scan(path: Path) -> list[tuple[str, bool]]:
    with _live_swaps_lock:
        hidden = set(_live_swaps)
    with os.scandir(path) as iterator:
        listing = [
            (entry.name, entry.is_dir())
            for entry in iterator
            if os.path.abspath(entry.path) not in hidden
        ]
    return sorted(listing)


def _relative_parts(root: Path, target: Path) -> list[str] | None:
    try:
        relative = target.resolve().relative_to(root.resolve())
    except ValueError:
        return None
    return list(relative.parts)


def _open_swap_file(path: Path, keep_existing_data: bool) -> tuple[Path, BinaryIO]:
    descriptor, swap_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=_SWAP_SUFFIX, dir=path.parent
    )
    os.close(descriptor)
    swap = Path(swap_name)
    _track_swap(swap, live=True)
    try:
        if path.exists():
            shutil.copymode(path, swap)
            if keep_existing_data:
                _ = shutil.copyfile(path, swap)
        stream = swap.open("r+b")
    except BaseException:
        _release_swap(swap)
        raise
    return swap, stream


def _track_swap(swap: Path, *, live: bool) -> None:
    key = os.path.abspath(swap)
    with _live_swaps_lock:
        if live:
            _live_swaps.add(key)
        else:
            _live_swaps.discard(key)


def _release_swap(swap: Path) -> None:
    try:
        swap.unlink(missing_ok=True)
    finally:
        _track_swap(swap, live=False)


class _HostReader(ReaderBase):
    def __init__(self, path: Path) -> None:
        super().__init__(path.name)
        self._path = path
        self._stream: BinaryIO | None = None

    async def _read(self, size: int) -> bytes:
        if self._stream is None:
            self._stream = await asyncio.to_thread(self._path.open, "rb")
        return await asyncio.to_thread(self._stream.read, size)

    async def _release(self) -> None:
        if self._stream is not None:
            await asyncio.to_thread(self._stream.close)


class _HostWritable(WritableBase):
    def __init__(self, target: Path, swap: Path, stream: BinaryIO) -> None:
        super().__init__(target.name)
        self._target = target
        self._swap = swap
        self._stream = stream

    async def _write_at(self, position: int, data: bytes) -> None:
        await asyncio.to_thread(_write_at, self._stream, position, data)

    async def _truncate(self, size: int) -> None:
        await asyncio.to_thread(self._stream.truncate, size)

    async def _commit(self) -> None:
        await asyncio.to_thread(self._finish, replace=True)

    async def _discard(self) -> None:
        await asyncio.to_thread(self._finish, replace=False)

    def _finish(self, *, replace: bool) -> None:
        try:
            self._stream.close()
            if replace:
                os.replace(self._swap, self._target)
        finally:
            _release_swap(self._swap)


def _write_at(stream: BinaryIO, position: int, data: bytes) -> None:
    # Seeking past EOF and writing zero-fills the gap on POSIX hosts.
    _ = stream.seek(position)
    _ = stream.write(data)
