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

"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from handlenav import (
    ExpectedDirectoryError,
    ExpectedFileError,
    HandlenavError,
    InvalidPathError,
    InvalidTraversalError,
    Navigator,
    NotFoundError,
    TypeMismatchError,
)
from handlenav.backends import MemoryDirectoryHandle
from tests.helpers import run


@pytest.mark.parametrize(
    ("error", "builtin"),
    [
        (NotFoundError, FileNotFoundError),
        (TypeMismatchError, OSError),
        (ExpectedDirectoryError, NotADirectoryError),
        (ExpectedDirectoryError, TypeMismatchError),
        (ExpectedFileError, IsADirectoryError),
        (ExpectedFileError, TypeMismatchError),
        (InvalidPathError, ValueError),
        (InvalidTraversalError, InvalidPathError),
    ],
)
def test_errors_extend_builtins(
    error: type[HandlenavError], builtin: type[Exception]
) -> None:
    assert issubclass(error, HandlenavError)
    assert issubclass(error, builtin)


def test_builtin_handlers_catch_navigation_errors() -> None:
    nav = Navigator(MemoryDirectoryHandle())

    with pytest.raises(FileNotFoundError):
        _ = run(nav.get_directory("/missing"))

    run(nav.write("/file.txt", "data"))
    with pytest.raises(NotADirectoryError):
        _ = run(nav.cd("/file.txt"))


def test_single_handler_catches_all_library_errors() -> None:
    nav = Navigator(MemoryDirectoryHandle())

    with pytest.raises(HandlenavError):
        _ = run(nav.get_file("/"))


def test_file_lookup_on_directory_is_a_directory_error() -> None:
    nav = Navigator(MemoryDirectoryHandle())
    run(nav.write("/docs/readme.txt", "data"))

    with pytest.raises(IsADirectoryError):
        _ = run(nav.read_text("/docs"))
    with pytest.raises(TypeMismatchError):
        _ = run(nav.get_file("/docs"))


def test_mismatch_kinds_do_not_overlap() -> None:
    assert not issubclass(ExpectedDirectoryError, IsADirectoryError)
    assert not issubclass(ExpectedFileError, NotADirectoryError)
