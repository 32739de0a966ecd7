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

"""POSIX-style path algebra over segment lists.

Paths are handled as lists of segments. A leading :data:`ROOT_NAME` (the
empty string) marks a list as absolute, so ``"/a/b"`` becomes
``["", "a", "b"]`` and the root itself is ``[""]``. Relative lists never start
with the root sentinel.

All functions are pure: they never touch a backend and never mutate their
arguments.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, TypeAlias

from ..dbc import ContractResult, ensure, require
from ..errors import InvalidTraversalError

ROOT_NAME: Final[str] = ""
PATH_SEPARATOR: Final[str] = "/"
CURRENT_DIRECTORY: Final[str] = "."
PARENT_DIRECTORY: Final[str] = ".."

PathLike: TypeAlias = str | Sequence[str]
"""A path given either as a ``/``-joined string or as pre-split segments."""


def split(path: str = "") -> list[str]:
    """Convert a POSIX path string into a segment list.

    Exactly one trailing empty segment is dropped, so a trailing separator
    does not produce an empty name. The empty string yields ``[]`` (no
    segments at all), while ``"/"`` yields ``[""]`` (the root).

    Examples:
        >>> split("/folder/folder2/../file")
        ['', 'folder', 'folder2', '..', 'file']
        >>> split("a/b/")
        ['a', 'b']
        >>> split("")
        []
    """
    segments = path.split(PATH_SEPARATOR)
    if segments[-1] == ROOT_NAME:
        _ = segments.pop()
    return segments


def join(path: Sequence[str]) -> str:
    """Render a segment list as a POSIX path string.

    Examples:
        >>> join([""])
        '/'
        >>> join(["", "a", "b"])
        '/a/b'
        >>> join(["..", "a"])
        '../a'
    """
    if len(path) == 1 and path[0] == ROOT_NAME:
        return PATH_SEPARATOR
    return PATH_SEPARATOR.join(path)


def to_segments(path: PathLike) -> list[str]:
    """Return ``path`` as a fresh segment list, splitting strings."""
    if isinstance(path, str):
        return split(path)
    return list(path)


def is_absolute(path: Sequence[str]) -> bool:
    """Return ``True`` when ``path`` starts with the root sentinel."""
    return len(path) > 0 and path[0] == ROOT_NAME


def _both_absolute(parent: Sequence[str], path: Sequence[str]) -> ContractResult:
    if is_absolute(parent) and is_absolute(path):
        return True
    return False, f"expected absolute paths, got {parent!r} and {path!r}"


@require(_both_absolute)
def is_child_or_equal(parent: Sequence[str], path: Sequence[str]) -> bool:
    """Return ``True`` when ``path`` equals ``parent`` or lies beneath it.

    Both arguments must be absolute and normalized; the test is a plain
    element-wise prefix comparison.
    """
    size = len(parent)
    if len(path) < size:
        return False
    return all(path[index] == parent[index] for index in range(size))


def _absolute_results_are_clean(
    path: Sequence[str], allow_upstream: bool, *, result: list[str]
) -> ContractResult:
    if not is_absolute(result):
        return True
    controls = {CURRENT_DIRECTORY, PARENT_DIRECTORY}
    if any(segment in controls for segment in result):
        return False, f"control segment left in {result!r}"
    return True


@ensure(_absolute_results_are_clean)
def normalize(path: Sequence[str], allow_upstream: bool) -> list[str]:
    """Resolve ``.`` and ``..`` segments in a single left-to-right pass.

    Absolute paths keep their root sentinel and clamp at the root: ``..``
    above ``/`` is ignored. Empty segments and ``.`` are dropped.

    For relative paths ``..`` removes the previous name. When nothing is left
    to remove, ``allow_upstream`` decides: if true a literal ``..`` is kept so
    the result can climb above its starting point; if false the path escapes
    its own start and an empty list is returned to signal the failure.

    Args:
        path: Segment list, see :func:`split`.
        allow_upstream: Allow relative paths to continue upstream.

    Returns:
        The normalized segment list, or ``[]`` for a disallowed escape.

    Examples:
        >>> normalize(split("./folder/../../../../file"), False)
        []
        >>> normalize(split("./folder/../../../../file"), True)
        ['..', '..', '..', 'file']
        >>> normalize(split("/a/../../b"), False)
        ['', 'b']
    """
    result: list[str] = []
    names = 0
    absolute = False

    for index, segment in enumerate(path):
        if index == 0 and segment == ROOT_NAME:
            absolute = True
            result.append(segment)
        elif not segment or segment == CURRENT_DIRECTORY:
            continue
        elif segment == PARENT_DIRECTORY:
            if absolute:
                if len(result) > 1:
                    _ = result.pop()
            elif allow_upstream:
                # Only names pushed by this pass may be cancelled; leading
                # ".." segments accumulate.
                if names > 0:
                    _ = result.pop()
                    names -= 1
                else:
                    result.append(PARENT_DIRECTORY)
            elif result:
                _ = result.pop()
            else:
                return []
        else:
            result.append(segment)
            names += 1

    return result


def normalize_strict(path: Sequence[str]) -> list[str]:
    """Normalize without upstream traversal, raising on escape.

    Raises:
        InvalidTraversalError: The relative path climbs above its start.
    """
    # Upstream mode keeps a leading ".." exactly where the strict pass would
    # have run out of names to cancel.
    result = normalize(path, allow_upstream=True)
    if result and result[0] == PARENT_DIRECTORY:
        msg = f"Path escapes its starting point: {join(path)!r}"
        raise InvalidTraversalError(msg)
    return result


def _resolve_is_never_empty(*paths: Sequence[str], result: list[str]) -> ContractResult:
    return bool(result), "resolve must return at least one segment"


@ensure(_resolve_is_never_empty)
def resolve(*paths: Sequence[str]) -> list[str]:
    """Join segment lists, later absolute paths taking precedence.

    Arguments are folded from last to first. Each earlier path is prepended
    until an absolute path has been consumed, then the combined list is
    normalized with upstream traversal allowed. Empty arguments are skipped.
    An empty outcome becomes ``["."]`` so the result is always navigable.

    Examples:
        >>> resolve(split("/folder/subfolder"), split("../subfolder2/project"))
        ['', 'folder', 'subfolder2', 'project']
        >>> resolve(split("/a"), split("/b"), split("c"))
        ['', 'b', 'c']
        >>> resolve([], [])
        ['.']
    """
    pieces: list[Sequence[str]] = []
    for path in reversed(paths):
        if not path:
            continue
        pieces.append(path)
        if path[0] == ROOT_NAME:
            break

    combined = [segment for piece in reversed(pieces) for segment in piece]
    return normalize(combined, allow_upstream=True) or [CURRENT_DIRECTORY]


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
