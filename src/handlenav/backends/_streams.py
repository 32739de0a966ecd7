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

"""Stream base classes shared by the bundled backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Self

from ..config import DEFAULT_CHUNK_SIZE
from ._types import WriteChunk, coerce_chunk

__all__ = ["ReaderBase", "WritableBase"]


class ReaderBase(ABC):
    """Implements chunk iteration and scoping on top of ``_read``."""

    def __init__(self, label: str) -> None:
        self._label = label
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            msg = f"I/O operation on closed reader: {self._label}"
            raise ValueError(msg)

    @abstractmethod
    async def _read(self, size: int) -> bytes: ...

    async def _release(self) -> None:  # noqa: B027 - optional hook
        """Free backend resources; called once by :meth:`close`."""

    async def read(self, size: int = -1) -> bytes:
        self._ensure_open()
        return await self._read(size)

    async def chunks(self, size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        if size <= 0:
            msg = f"Chunk size must be positive, got {size}."
            raise ValueError(msg)
        while chunk := await self.read(size):
            yield chunk

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._release()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


class WritableBase(ABC):
    """Writable stream that applies :class:`WriteCommand` semantics.

    Subclasses provide positional storage primitives plus ``_commit`` and
    ``_discard``; this class tracks the write offset and closed state.
    """

    def __init__(self, label: str) -> None:
        self._label = label
        self._position = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def position(self) -> int:
        return self._position

    def _ensure_open(self) -> None:
        if self._closed:
            msg = f"I/O operation on closed stream: {self._label}"
            raise ValueError(msg)

    @abstractmethod
    async def _write_at(self, position: int, data: bytes) -> None: ...

    @abstractmethod
    async def _truncate(self, size: int) -> None: ...

    @abstractmethod
    async def _commit(self) -> None: ...

    @abstractmethod
    async def _discard(self) -> None: ...

    async def write(self, chunk: WriteChunk) -> None:
        self._ensure_open()
        command = coerce_chunk(chunk)
        match command.type:
            case "seek":
                await self.seek(command.position or 0)
            case "truncate":
                await self.truncate(command.size or 0)
            case "write":
                position = (
                    self._position if command.position is None else command.position
                )
                data = command.payload
                await self._write_at(position, data)
                self._position = position + len(data)

    async def seek(self, position: int) -> None:
        self._ensure_open()
        if position < 0:
            msg = f"Cannot seek to negative position {position}."
            raise ValueError(msg)
        self._position = position

    async def truncate(self, size: int) -> None:
        self._ensure_open()
        if size < 0:
            msg = f"Cannot truncate to negative size {size}."
            raise ValueError(msg)
        await self._truncate(size)
        self._position = min(self._position, size)

    async def close(self) -> None:
        if self._closed:
            return
        try:
            await self._commit()
        finally:
            self._closed = True

    async def abort(self) -> None:
        if self._closed:
            return
        try:
            await self._discard()
        finally:
            self._closed = True

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            await self.close()
        else:
            await self.abort()
