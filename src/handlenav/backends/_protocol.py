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

"""Capability protocols implemented by storage backends.

A backend exposes a tree of opaque handles. The navigator only ever asks a
directory handle for a named child (optionally creating it), enumerates its
entries, compares handles for identity, and opens byte streams on file
handles. Any storage (process memory, a host directory, a remote blob store)
can sit behind these protocols.

Every method that may touch storage is a coroutine so that backends can
suspend without blocking other tasks on the event loop.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from types import TracebackType
from typing import Protocol, Self, runtime_checkable

from ..config import DEFAULT_CHUNK_SIZE
from ._types import HandleKind, WriteChunk

__all__ = [
    "ByteReader",
    "DirectoryHandle",
    "FileHandle",
    "Handle",
    "WritableStream",
]


@runtime_checkable
class Handle(Protocol):
    """Opaque capability for a single entry of a backend tree."""

    @property
    def name(self) -> str:
        """Entry name within its parent (``""`` for a root)."""
        ...

    @property
    def kind(self) -> HandleKind:
        """``"file"`` or ``"directory"``."""
        ...

    async def is_same_entry(self, other: Handle) -> bool:
        """Return ``True`` when ``other`` refers to the same underlying entry."""
        ...


@runtime_checkable
class ByteReader(Protocol):
    """Sequential reader over the content of a file.

    Example::

        async with handle.open_read() as reader:
            async for chunk in reader.chunks(65536):
                digest.update(chunk)
    """

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes; ``-1`` reads to EOF. ``b""`` at EOF."""
        ...

    def chunks(self, size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Iterate over the remaining content in chunks of ``size`` bytes."""
        ...

    async def close(self) -> None:
        """Release the reader."""
        ...

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class WritableStream(Protocol):
    """Scoped writer for a file.

    Writes are staged and become visible atomically on :meth:`close`.
    :meth:`abort` discards them. Used as an async context manager the stream
    is always released: closed on success, aborted when the block raises.
    """

    @property
    def closed(self) -> bool:
        """True once the stream was closed or aborted."""
        ...

    async def write(self, chunk: WriteChunk) -> None:
        """Write data or apply a :class:`WriteCommand`."""
        ...

    async def seek(self, position: int) -> None:
        """Move the write offset to ``position``."""
        ...

    async def truncate(self, size: int) -> None:
        """Resize the staged content to ``size`` bytes."""
        ...

    async def close(self) -> None:
        """Commit staged content and release the file."""
        ...

    async def abort(self) -> None:
        """Discard staged content and release the file."""
        ...

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class FileHandle(Handle, Protocol):
    """Handle to a leaf resource holding bytes."""

    async def size(self) -> int:
        """Current committed size in bytes."""
        ...

    def open_read(self) -> ByteReader:
        """Open a reader over the committed content."""
        ...

    async def create_writable(
        self, *, keep_existing_data: bool = False
    ) -> WritableStream:
        """Open a writable stream.

        Args:
            keep_existing_data: Start from the current content instead of an
                empty file.
        """
        ...


@runtime_checkable
class DirectoryHandle(Handle, Protocol):
    """Handle to a sub-tree."""

    async def get_directory(
        self, name: str, *, create: bool = False
    ) -> DirectoryHandle:
        """Return the child directory ``name``.

        Raises:
            NotFoundError: ``name`` is absent and ``create`` is false.
            ExpectedDirectoryError: ``name`` exists but is a file.
            InvalidPathError: ``name`` is not a single entry name.
        """
        ...

    async def get_file(self, name: str, *, create: bool = False) -> FileHandle:
        """Return the child file ``name``.

        Raises:
            NotFoundError: ``name`` is absent and ``create`` is false.
            ExpectedFileError: ``name`` exists but is a directory.
            InvalidPathError: ``name`` is not a single entry name.
        """
        ...

    def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        """Enumerate immediate children as ``(name, handle)`` pairs."""
        ...

    async def resolve(self, handle: Handle) -> list[str] | None:
        """Return the names leading from this directory to ``handle``.

        Returns ``[]`` for this directory itself and ``None`` when ``handle``
        is not inside this tree.
        """
        ...
