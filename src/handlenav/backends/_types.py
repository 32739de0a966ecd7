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

"""Value types shared by backend implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from ..errors import InvalidPathError
from ..paths import PATH_SEPARATOR, normalize_strict

__all__ = [
    "HandleKind",
    "WriteChunk",
    "WriteCommand",
    "WriteCommandType",
    "coerce_chunk",
    "validate_entry_name",
]

HandleKind: TypeAlias = Literal["file", "directory"]
WriteCommandType: TypeAlias = Literal["write", "seek", "truncate"]


@dataclass(frozen=True, slots=True)
class WriteCommand:
    """Explicit instruction for a writable stream.

    Attributes:
        type: ``write`` stores ``data`` (at ``position`` when given, else at
            the current offset), ``seek`` moves the offset to ``position``,
            ``truncate`` resizes the file to ``size`` bytes.
        data: Payload for ``write``. Text is encoded as UTF-8.
        position: Target offset for ``seek`` and optional offset for ``write``.
        size: New length for ``truncate``.
    """

    type: WriteCommandType
    data: bytes | str | None = None
    position: int | None = None
    size: int | None = None

    def __post_init__(self) -> None:
        if self.type == "write" and self.data is None:
            raise ValueError("write commands require data.")
        if self.type == "seek" and self.position is None:
            raise ValueError("seek commands require a position.")
        if self.type == "truncate" and self.size is None:
            raise ValueError("truncate commands require a size.")
        for label, value in (("position", self.position), ("size", self.size)):
            if value is not None and value < 0:
                msg = f"{label} must not be negative, got {value}."
                raise ValueError(msg)

    @property
    def payload(self) -> bytes:
        """The ``data`` field as bytes (empty for non-write commands)."""
        if self.data is None:
            return b""
        if isinstance(self.data, str):
            return self.data.encode("utf-8")
        return self.data


WriteChunk: TypeAlias = bytes | bytearray | memoryview | str | WriteCommand


def coerce_chunk(chunk: WriteChunk) -> WriteCommand:
    """Return ``chunk`` as a :class:`WriteCommand`."""
    if isinstance(chunk, WriteCommand):
        return chunk
    if isinstance(chunk, str):
        return WriteCommand(type="write", data=chunk)
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return WriteCommand(type="write", data=bytes(chunk))
    msg = f"Unsupported write chunk type: {type(chunk).__name__}"
    raise TypeError(msg)


def validate_entry_name(name: str) -> str:
    """Check that ``name`` names exactly one child entry.

    Raises:
        InvalidPathError: The name is empty, ``.``, or contains a separator.
        InvalidTraversalError: The name is ``..``.
    """
    if not name:
        raise InvalidPathError("Entry names must not be empty.")
    if PATH_SEPARATOR in name:
        msg = f"Entry names must not contain {PATH_SEPARATOR!r}: {name!r}"
        raise InvalidPathError(msg)
    if normalize_strict([name]) != [name]:
        msg = f"Not a valid entry name: {name!r}"
        raise InvalidPathError(msg)
    return name

