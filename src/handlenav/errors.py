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

"""Base exception hierarchy for :mod:`handlenav`."""

from __future__ import annotations


class HandlenavError(Exception):
    """Base class for all handlenav exceptions.

    Callers can catch every library-specific failure with a single handler
    while opaque backend I/O errors keep propagating as whatever the backend
    raised.

    Example:
        Catch any handlenav-specific error::

            try:
                await nav.cd("/projects/missing")
            except HandlenavError as e:
                logger.error("Navigation failed: %s", e)

    Note:
        Subclasses also inherit from the matching builtin exception
        (``FileNotFoundError``, ``ValueError`` ...) so code written against
        the standard library keeps working.
    """


class NotFoundError(HandlenavError, FileNotFoundError):
    """Raised when a path segment or handle cannot be reached.

    Backends raise it when a child entry is absent and ``create`` was not
    requested. The navigator raises it when a handle cannot be resolved back
    to a path under its root, for example because it belongs to a different
    tree.

    Example::

        try:
            handle = await nav.get_file("/notes/todo.txt")
        except NotFoundError:
            handle = await nav.get_file("/notes/todo.txt", create=True)
    """


class TypeMismatchError(HandlenavError, OSError):
    """Raised when an entry exists but is of the other kind.

    Backends raise one of the two subclasses so that standard library
    handlers see the matching builtin: :class:`ExpectedDirectoryError` is a
    ``NotADirectoryError`` and :class:`ExpectedFileError` is an
    ``IsADirectoryError``. Catch this class to handle both.
    """


class ExpectedDirectoryError(TypeMismatchError, NotADirectoryError):
    """Raised when a directory is requested but the entry is a file.

    Example::

        await nav.write("/notes", "text")
        await nav.cd("/notes")  # ExpectedDirectoryError
    """


class ExpectedFileError(TypeMismatchError, IsADirectoryError):
    """Raised when a file is requested but the entry is a directory."""


class InvalidPathError(HandlenavError, ValueError):
    """Raised when a path or entry name cannot be used.

    Entry names handed to a backend must be a single non-empty segment that
    is neither ``.`` nor ``..`` and contains no separator. The navigator also
    raises it when a file is requested at a path that resolves to the root.
    """


class InvalidTraversalError(InvalidPathError):
    """Raised when a relative path escapes above its own starting point.

    :func:`handlenav.paths.normalize` reports this case by returning an empty
    list; :func:`handlenav.paths.normalize_strict` converts that marker into
    this exception.
    """


__all__ = [
    "ExpectedDirectoryError",
    "ExpectedFileError",
    "HandlenavError",
    "InvalidPathError",
    "InvalidTraversalError",
    "NotFoundError",
    "TypeMismatchError",
]
