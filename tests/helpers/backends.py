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

"""Backend wrappers that record or break handle calls."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Coroutine
from typing import Any, TypeAlias, TypeVar

from handlenav.backends import DirectoryHandle, FileHandle, Handle, HandleKind
from handlenav.paths import ROOT_NAME, join

Call: TypeAlias = tuple[str, str, str]
"""``(kind, parent path, child name)`` for one child lookup."""


def _unwrap(handle: Handle) -> Handle:
    return handle.inner if isinstance(handle, RecordingDirectory) else handle


class RecordingDirectory:
    """Directory handle proxy logging every child lookup.

    Directories returned from lookups or enumeration are wrapped as well, so
    a whole walk shows up in ``calls``. Names listed in ``fail_on`` make
    ``get_file`` raise ``OSError`` to simulate a backend I/O failure.
    """

    def __init__(
        self,
        inner: DirectoryHandle,
        *,
        calls: list[Call] | None = None,
        path: tuple[str, ...] = (ROOT_NAME,),
        fail_on: frozenset[str] = frozenset(),
    ) -> None:
        self.inner = inner
        self.calls: list[Call] = [] if calls is None else calls
        self._path = path
        self._fail_on = fail_on

    def _child(self, inner: DirectoryHandle, name: str) -> RecordingDirectory:
        return RecordingDirectory(
            inner,
            calls=self.calls,
            path=(*self._path, name),
            fail_on=self._fail_on,
        )

    @property
    def name(self) -> str:
        return self.inner.name

    @property
    def kind(self) -> HandleKind:
        return "directory"

    async def is_same_entry(self, other: Handle) -> bool:
        return await self.inner.is_same_entry(_unwrap(other))

    async def get_directory(
        self, name: str, *, create: bool = False
    ) -> RecordingDirectory:
        self.calls.append(("directory", join(self._path), name))
        child = await self.inner.get_directory(name, create=create)
        return self._child(child, name)

    async def get_file(self, name: str, *, create: bool = False) -> FileHandle:
        self.calls.append(("file", join(self._path), name))
        if name in self._fail_on:
            msg = f"simulated failure for {name}"
            raise OSError(msg)
        return await self.inner.get_file(name, create=create)

    async def entries(self) -> AsyncIterator[tuple[str, Handle]]:
        async for name, handle in self.inner.entries():
            if isinstance(handle, DirectoryHandle):
                yield name, self._child(handle, name)
            else:
                yield name, handle

    async def resolve(self, handle: Handle) -> list[str] | None:
        return await self.inner.resolve(_unwrap(handle))


T = TypeVar("T")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Drive ``coro`` to completion on a fresh event loop."""
    return asyncio.run(coro)

