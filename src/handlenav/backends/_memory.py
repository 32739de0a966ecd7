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

"""In-memory backend.

Handles are the tree nodes themselves, so identity comparison is plain
object identity. Useful for tests and for scratch trees that never touch
the disk.

Example usage::

    from handlenav import Navigator
    from handlenav.backends import MemoryDirectoryHandle

    nav = Navigator(MemoryDirectoryHandle())
    await nav.write("/notes/todo.txt", "buy milk")
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from ..errors import ExpectedDirectoryError, ExpectedFileError, NotFoundError
from ._protocol import Handle
from ._streams import ReaderBase, WritableBase
from ._types import HandleKind, validate_entry_name

__all__ = ["MemoryDirectoryHandle", "MemoryFileHandle"]


class _MemoryNode:
    __slots__ = ("_name", "_parent")

    def __init__(self, name: str, parent: MemoryDirectoryHandle | None) -> None:
        self._name = name
        self._parent = parent

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> MemoryDirectoryHandle | None:
        return self._parent

    async def is_same_entry(self, other: Handle) -> bool:
        return other is self


class MemoryFileHandle(_MemoryNode):
    """File node holding its committed content as ``bytes``."""

    __slots__ = ("_data", "_writers")

    def __init__(
        self,
        name: str,
        parent: MemoryDirectoryHandle | None = None,
        data: bytes = b"",
    ) -> None:
        super().__init__(name, parent)
        self._data = data
        self._writers = 0

    def __repr__(self) -> str:
        return f"MemoryFileHandle(name={self._name!r}, size={len(self._data)})"

    @property
    def kind(self) -> HandleKind:
        return "file"

    @property
    def data(self) -> bytes:
        """Committed content."""
        return self._data

    @property
    def open_writers(self) -> int:
        """Number of writable streams not yet closed or aborted."""
        return self._writers

    async def size(self) -> int:
        return len(self._data)

    def open_read(self) -> _MemoryReader:
        return _MemoryReader(self._data, label=self._name)

    async def create_writable(
        self, *, keep_existing_data: bool = False
    ) -> _MemoryWritable:
        initial = self._data if keep_existing_data else b""
        self._writers += 1
        return _MemoryWritable(self, initial)


class MemoryDirectoryHandle(_MemoryNode):
    """Directory node; a node without parent is the root of its own tree."""

    __slots__ = ("_children",)

    def __init__(
        self, name: str = "", parent: MemoryDirectoryHandle | None = None
    ) -> None:
        super().__init__(name, parent)
        self._children: dict[str, MemoryDirectoryHandle | MemoryFileHandle] = {}

    def __repr__(self) -> str:
        return (
            f"MemoryDirectoryHandle(name={self._name!r}, "
            f"children={len(self._children)})"
        )

    @property
    def kind(self) -> HandleKind:
        return "directory"

    async def get_directory(
        self, name: str, *, create: bool = False
    ) -> MemoryDirectoryHandle:
        child = self._children.get(validate_entry_name(name))
        if isinstance(child, MemoryDirectoryHandle):
            return child
        if child is not None:
            msg = f"Not a directory: {name!r}"
            raise ExpectedDirectoryError(msg)
        if not create:
            msg = f"No such directory: {name!r}"
            raise NotFoundError(msg)
        directory = MemoryDirectoryHandle(name, self)
        self._children[name] = directory
        return directory

    async def get_file(self, name: str, *, create: bool = False) -> MemoryFileHandle:
        child = self._children.get(validate_entry_name(name))
        if isinstance(child, MemoryFileHandle):
            return child
        if child is not None:
            msg = f"Is a directory: {name!r}"
            raise ExpectedFileError(msg)
        if not create:
            msg = f"No such file: {name!r}"
            raise NotFoundError(msg)
        file = MemoryFileHandle(name, self)
        self._children[name] = file
        return file

    async def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        # Snapshot so that entries created while iterating are not visited.
        for name, child in list(self._children.items()):
            yield name, child

    async def resolve(self, handle: Handle) -> list[str] | None:
        if not isinstance(handle, _MemoryNode):
            return None
        names: list[str] = []
        node: _MemoryNode | None = handle
        while node is not None:
            if node is self:
                names.reverse()
                return names
            names.append(node.name)
            node = node.parent
        return None


class _MemoryReader(ReaderBase):
    def __init__(self, data: bytes, *, label: str) -> None:
        super().__init__(label)
        self._data = data
        self._offset = 0

    async def _read(self, size: int) -> bytes:
        end = len(self._data) if size < 0 else self._offset + size
        chunk = self._data[self._offset : end]
        self._offset += len(chunk)
        return chunk


class _MemoryWritable(WritableBase):
    def __init__(self, file: MemoryFileHandle, initial: bytes) -> None:
        super().__init__(file.name)
        self._file = file
        self._buffer = bytearray(initial)

    async def _write_at(self, position: int, data: bytes) -> None:
        if position > len(self._buffer):
            self._buffer.extend(bytes(position - len(self._buffer)))
        self._buffer[position : position + len(data)] = data

    async def _truncate(self, size: int) -> None:
        if size < len(self._buffer):
            del self._buffer[size:]
        else:
            self._buffer.extend(bytes(size - len(self._buffer)))

    async def _commit(self) -> None:
        self._file._data = bytes(self._buffer)  # noqa: SLF001
        self._file._writers -= 1  # noqa: SLF001

    async def _discard(self) -> None:
        self._file._writers -= 1  # noqa: SLF001
