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

"""Stateful POSIX-style navigation over a backend handle tree."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AbstractAsyncContextManager, nullcontext
from dataclasses import dataclass
from typing import TypeAlias

from ..backends import DirectoryHandle, FileHandle, Handle, WriteChunk
from ..config import NavigatorConfig
from ..errors import InvalidPathError, NotFoundError, TypeMismatchError
from ..logging import StructuredLogger, get_logger
from ..paths import (
    ROOT_NAME,
    PathLike,
    is_child_or_equal,
    join,
    resolve,
    to_segments,
)
from ._copy import TreeCopier, copy_file_content
from ._tasks import TaskPool

__all__ = ["EntryFilter", "Navigator"]

_logger: StructuredLogger = get_logger(__name__, context={"component": "navigator"})

EntryFilter: TypeAlias = Callable[[str, Handle], bool | Awaitable[bool]]
"""Predicate deciding whether ``ls`` keeps an entry; may be a coroutine."""


@dataclass(frozen=True, slots=True)
class _WorkingDirectory:
    """A directory handle together with the absolute path it was reached by.

    Replaced as a whole so the handle and the path can never disagree.
    """

    handle: DirectoryHandle
    path: tuple[str, ...]


def _is_path(value: object) -> bool:
    return isinstance(value, (str, Sequence))


class Navigator:
    """Navigate a backend directory tree with POSIX paths.

    The navigator keeps a current working directory: the directory handle
    and the absolute segment list it corresponds to. Lookups of paths inside
    the working directory start walking from the cached handle; anything else
    is walked from the root handle.

    Every method taking a path accepts a ``/``-joined string or a pre-split
    segment list (see :mod:`handlenav.paths`). Most also accept a handle in
    place of a path.

    Navigation state is not locked. Callers issuing ``cd`` concurrently with
    other calls on the same navigator must serialize those calls themselves.

    Example::

        nav = Navigator(MemoryDirectoryHandle())
        await nav.write("/projects/app/main.py", "print('hi')")
        await nav.cd("/projects")
        assert nav.pwd() == "/projects"
        names = [name for name, _ in await nav.ls("app")]
    """

    def __init__(
        self,
        root: DirectoryHandle,
        *,
        config: NavigatorConfig | None = None,
    ) -> None:
        self._root = root
        self._config = config if config is not None else NavigatorConfig()
        self._current = _WorkingDirectory(handle=root, path=(ROOT_NAME,))
        self._semaphore: asyncio.Semaphore | None = None
        self._semaphore_loop: asyncio.AbstractEventLoop | None = None

    @property
    def root(self) -> DirectoryHandle:
        """Handle the navigator was constructed with."""
        return self._root

    @property
    def config(self) -> NavigatorConfig:
        return self._config

    @property
    def current_handle(self) -> DirectoryHandle:
        """Handle of the current working directory."""
        return self._current.handle

    @property
    def current_path(self) -> list[str]:
        """Absolute segment list of the current working directory."""
        return list(self._current.path)

    # --- Path resolution ---

    def _absolute(self, path: PathLike) -> list[str]:
        # The working directory is absolute, so the result always is too.
        return resolve(self._current.path, to_segments(path))

    async def _walk(self, target: Sequence[str], *, create: bool) -> DirectoryHandle:
        current = self._current
        if is_child_or_equal(current.path, target):
            directory, start = current.handle, len(current.path)
        else:
            _logger.debug(
                "Walking from root.",
                event="navigator.walk_from_root",
                context={"target": join(target), "cwd": join(current.path)},
            )
            directory, start = self._root, 1
        for name in target[start:]:
            directory = await directory.get_directory(name, create=create)
        return directory

    async def get_directory(
        self, path: PathLike, create: bool = False
    ) -> DirectoryHandle:
        """Return the directory handle at ``path``.

        Args:
            path: Absolute or working-directory-relative path.
            create: Create missing directories along the way.

        Raises:
            NotFoundError: A segment is missing and ``create`` is false.
            TypeMismatchError: A segment names a file.
        """
        return await self._walk(self._absolute(path), create=create)

    async def get_file(self, path: PathLike, create: bool = False) -> FileHandle:
        """Return the file handle at ``path``.

        Args:
            path: Absolute or working-directory-relative path.
            create: Create the file and any missing parent directories.

        Raises:
            NotFoundError: A segment is missing and ``create`` is false.
            TypeMismatchError: The leaf is a directory or a parent is a file.
            InvalidPathError: ``path`` resolves to the root directory.
        """
        target = self._absolute(path)
        if len(target) < 2:
            msg = f"Path does not name a file: {join(target)!r}"
            raise InvalidPathError(msg)
        parent = await self._walk(target[:-1], create=create)
        return await parent.get_file(target[-1], create=create)

    async def resolve(self, path: PathLike | Handle) -> str:
        """Return the absolute path string of a path or a handle.

        Handles are looked up through the root handle.

        Raises:
            NotFoundError: The handle is not reachable from the root.
        """
        if _is_path(path):
            return join(self._absolute(path))  # type: ignore[arg-type]
        names = await self._root.resolve(path)  # type: ignore[arg-type]
        if names is None:
            msg = f"Handle is not inside this navigator's root: {path!r}"
            raise NotFoundError(msg)
        return join([ROOT_NAME, *names])

    async def exists(self, path: PathLike) -> bool:
        """Return ``True`` when ``path`` names a reachable file or directory."""
        target = self._absolute(path)
        if len(target) < 2:
            return True
        try:
            parent = await self._walk(target[:-1], create=False)
        except (NotFoundError, TypeMismatchError):
            return False
        try:
            _ = await parent.get_directory(target[-1])
        except TypeMismatchError:
            return True
        except NotFoundError:
            return False
        return True

    # --- Working directory ---

    async def cd(self, path: PathLike) -> DirectoryHandle:
        """Change the working directory and return its handle.

        The working directory is left untouched when the walk fails.
        """
        target = self._absolute(path)
        handle = await self._walk(target, create=False)
        self._current = _WorkingDirectory(handle=handle, path=tuple(target))
        _logger.debug(
            "Changed working directory.",
            event="navigator.cd",
            context={"path": join(target)},
        )
        return handle

    def pwd(self) -> str:
        """Return the working directory as a path string."""
        return join(self._current.path)

    change_directory = cd
    print_working_directory = pwd

    # --- Convenience operations ---

    async def _directory(self, path: PathLike | DirectoryHandle) -> DirectoryHandle:
        if _is_path(path):
            return await self.get_directory(path)  # type: ignore[arg-type]
        return path  # type: ignore[return-value]

    async def _file(
        self, path: PathLike | FileHandle, *, create: bool = False
    ) -> FileHandle:
        if _is_path(path):
            return await self.get_file(path, create=create)  # type: ignore[arg-type]
        return path  # type: ignore[return-value]

    def _gate(self) -> AbstractAsyncContextManager[object]:
        limit = self._config.max_parallel
        if limit is None:
            return nullcontext()
        # One semaphore per event loop: asyncio primitives bind to the first
        # loop they wait on.
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(limit)
            self._semaphore_loop = loop
        return self._semaphore

    async def ls(
        self,
        path: PathLike | DirectoryHandle = ".",
        filter: EntryFilter | None = None,  # noqa: A002
    ) -> list[tuple[str, Handle]]:
        """List the entries of a directory as ``(name, handle)`` pairs.

        ``filter`` is evaluated for every entry concurrently; it may return a
        bool or an awaitable of one. Enumeration order is preserved.

        Example::

            scripts = await nav.ls("/", lambda name, _: name.endswith(".py"))
        """
        directory = await self._directory(path)
        entries = [entry async for entry in directory.entries()]
        if filter is None:
            return entries

        async def keep(name: str, handle: Handle) -> bool:
            async with self._gate():
                verdict = filter(name, handle)
                if inspect.isawaitable(verdict):
                    verdict = await verdict
                return bool(verdict)

        async with TaskPool[bool](f"filter of {directory.name or '/'!r}") as pool:
            for name, handle in entries:
                pool.spawn(keep(name, handle))
        return [
            entry for entry, kept in zip(entries, pool.results, strict=True) if kept
        ]

    async def read_bytes(self, path: PathLike | FileHandle) -> bytes:
        """Return the full content of a file."""
        file = await self._file(path)
        async with file.open_read() as reader:
            return await reader.read()

    async def read_text(
        self, path: PathLike | FileHandle, encoding: str = "utf-8"
    ) -> str:
        """Return the full content of a file decoded as text."""
        return (await self.read_bytes(path)).decode(encoding)

    async def write(
        self,
        path: PathLike | FileHandle,
        content: WriteChunk,
        *,
        append: bool = False,
        keep_existing_data: bool = False,
    ) -> None:
        """Overwrite, patch, or append to a file, creating it when missing.

        The writable stream is opened, written once and released again; a
        failing write aborts the stream so the file keeps its previous
        content.

        Args:
            path: File path or handle.
            content: Bytes, text, or a :class:`~handlenav.backends.WriteCommand`.
            append: Write at the end of the existing content. Implies
                ``keep_existing_data``.
            keep_existing_data: Start from the current content instead of an
                empty file, e.g. to patch bytes at a given position.

        Example::

            await nav.write("/file.txt", "Hello World!!!")
            await nav.write("/file.txt", " append this.", append=True)
            await nav.write(
                "/file.txt",
                WriteCommand(type="write", position=6, data="handle"),
                keep_existing_data=True,
            )
        """
        file = await self._file(path, create=True)
        writable = await file.create_writable(
            keep_existing_data=keep_existing_data or append
        )
        async with writable:
            if append:
                await writable.seek(await file.size())
            await writable.write(content)
        _logger.debug(
            "Wrote file.",
            event="navigator.write",
            context={"file": file.name, "append": append},
        )

    async def copy_file(
        self, source: PathLike | FileHandle, destination: PathLike | FileHandle
    ) -> None:
        """Copy a file, overwriting the destination if it exists.

        Copying a file onto itself does nothing.
        """
        file = await self._file(source)
        target = await self._file(destination, create=True)
        if await file.is_same_entry(target):
            return
        async with self._gate():
            await copy_file_content(file, target, chunk_size=self._config.chunk_size)
        _logger.debug(
            "Copied file.",
            event="navigator.copy_file",
            context={"source": file.name, "destination": target.name},
        )

    async def copy_directory(
        self,
        source: PathLike | DirectoryHandle,
        destination: PathLike | DirectoryHandle,
    ) -> None:
        """Copy a directory tree, merging into an existing destination.

        Files already present at the destination are overwritten. Copying a
        directory into one of its own descendants is safe: the destination is
        never copied into itself.

        Raises:
            ExceptionGroup: One or more entries failed to copy. Raised after
                every sibling copy has finished.
        """
        directory = await self._directory(source)
        target = await self._directory_for_write(destination)
        if await directory.is_same_entry(target):
            return
        copier = TreeCopier(
            origin=target, chunk_size=self._config.chunk_size, gate=self._gate
        )
        await copier.copy(directory, target)
        _logger.debug(
            "Copied directory.",
            event="navigator.copy_directory",
            context={"source": directory.name, "destination": target.name},
        )

    async def _directory_for_write(
        self, path: PathLike | DirectoryHandle
    ) -> DirectoryHandle:
        if _is_path(path):
            return await self.get_directory(path, create=True)  # type: ignore[arg-type]
        return path  # type: ignore[return-value]

    list = ls
