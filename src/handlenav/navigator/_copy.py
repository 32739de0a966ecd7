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

"""Streaming file copy and recursive directory mirroring."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from ..backends import DirectoryHandle, FileHandle, Handle
from ._tasks import TaskPool

__all__ = ["TreeCopier", "copy_file_content"]


async def copy_file_content(
    source: FileHandle, destination: FileHandle, *, chunk_size: int
) -> None:
    """Stream every byte of ``source`` into ``destination``, replacing it."""
    async with (
        source.open_read() as reader,
        await destination.create_writable() as writable,
    ):
        async for chunk in reader.chunks(chunk_size):
            await writable.write(chunk)


@dataclass(frozen=True, slots=True)
class TreeCopier:
    """Mirror a directory tree into another directory.

    ``origin`` is the top-level destination of the whole copy. Any source
    directory identical to it is skipped, which keeps a copy into one of the
    source's own descendants from recursing into itself.
    """

    origin: DirectoryHandle
    chunk_size: int
    gate: Callable[[], AbstractAsyncContextManager[object]]

    async def copy(self, source: DirectoryHandle, destination: DirectoryHandle) -> None:
        async with TaskPool[None](f"copy of {source.name or '/'!r}") as pool:
            async for name, handle in source.entries():
                pool.spawn(self._copy_entry(name, handle, destination))

    async def _copy_entry(
        self, name: str, handle: Handle, destination: DirectoryHandle
    ) -> None:
        if isinstance(handle, DirectoryHandle):
            if await handle.is_same_entry(self.origin):
                return
            target = await destination.get_directory(name, create=True)
            await self.copy(handle, target)
        elif isinstance(handle, FileHandle):
            target_file = await destination.get_file(name, create=True)
            async with self.gate():
                await copy_file_content(
                    handle, target_file, chunk_size=self.chunk_size
                )
