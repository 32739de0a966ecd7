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

"""POSIX path semantics and directory navigation over storage handles.

``handlenav`` pairs a small path algebra (:mod:`handlenav.paths`) with a
:class:`Navigator` that keeps a current working directory on top of any
backend implementing the handle protocols in :mod:`handlenav.backends`.

Example usage::

    import asyncio

    from handlenav import Navigator
    from handlenav.backends import MemoryDirectoryHandle

    async def main() -> None:
        nav = Navigator(MemoryDirectoryHandle())
        await nav.write("/projects/readme.txt", "hello")
        await nav.cd("/projects")
        print(nav.pwd(), await nav.read_text("readme.txt"))

    asyncio.run(main())
"""

from __future__ import annotations

from .config import DEFAULT_CHUNK_SIZE, NavigatorConfig
from .errors import (
    ExpectedDirectoryError,
    ExpectedFileError,
    HandlenavError,
    InvalidPathError,
    InvalidTraversalError,
    NotFoundError,
    TypeMismatchError,
)
from .navigator import EntryFilter, Navigator

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "EntryFilter",
    "ExpectedDirectoryError",
    "ExpectedFileError",
    "HandlenavError",
    "InvalidPathError",
    "InvalidTraversalError",
    "Navigator",
    "NavigatorConfig",
    "NotFoundError",
    "TypeMismatchError",
]
