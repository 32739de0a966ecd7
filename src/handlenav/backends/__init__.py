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

"""Storage backend protocols and bundled implementations.

The navigator talks to storage exclusively through the handle protocols
defined here. Two implementations ship with the package:

- ``MemoryDirectoryHandle``: a tree kept in process memory
- ``HostDirectoryHandle``: a directory on the local disk
"""

from __future__ import annotations

from ._host import HostDirectoryHandle, HostFileHandle
from ._memory import MemoryDirectoryHandle, MemoryFileHandle
from ._protocol import ByteReader, DirectoryHandle, FileHandle, Handle, WritableStream
from ._streams import ReaderBase, WritableBase
from ._types import (
    HandleKind,
    WriteChunk,
    WriteCommand,
    WriteCommandType,
    coerce_chunk,
    validate_entry_name,
)

__all__ = [
    "ByteReader",
    "DirectoryHandle",
    "FileHandle",
    "Handle",
    "HandleKind",
    "HostDirectoryHandle",
    "HostFileHandle",
    "MemoryDirectoryHandle",
    "MemoryFileHandle",
    "ReaderBase",
    "WritableBase",
    "WritableStream",
    "WriteChunk",
    "WriteCommand",
    "WriteCommandType",
    "coerce_chunk",
    "validate_entry_name",
]
