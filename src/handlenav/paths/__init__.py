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

"""Path algebra for POSIX-style segment lists.

Example usage::

    from handlenav.paths import join, resolve, split

    target = resolve(split("/projects/app"), split("../notes/todo.txt"))
    assert join(target) == "/projects/notes/todo.txt"
"""

from __future__ import annotations

from ._algebra import (
    CURRENT_DIRECTORY,
    PARENT_DIRECTORY,
    PATH_SEPARATOR,
    ROOT_NAME,
    PathLike,
    is_absolute,
    is_child_or_equal,
    join,
    normalize,
    normalize_strict,
    resolve,
    split,
    to_segments,
)

__all__ = [
    "CURRENT_DIRECTORY",
    "PARENT_DIRECTORY",
    "PATH_SEPARATOR",
    "ROOT_NAME",
    "PathLike",
    "is_absolute",
    "is_child_or_equal",
    "join",
    "normalize",
    "normalize_strict",
    "resolve",
    "split",
    "to_segments",
]
