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

"""Navigator configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

__all__ = ["DEFAULT_CHUNK_SIZE", "NavigatorConfig"]

#: Default chunk size for streaming copies (64KB).
DEFAULT_CHUNK_SIZE: Final[int] = 65_536

_CHUNK_SIZE_ENV = "HANDLENAV_CHUNK_SIZE"
_MAX_PARALLEL_ENV = "HANDLENAV_MAX_PARALLEL"


@dataclass(frozen=True, slots=True)
class NavigatorConfig:
    """Tuning knobs for a :class:`~handlenav.navigator.Navigator`.

    Attributes:
        chunk_size: Bytes read from a source file per step while copying.
        max_parallel: Upper bound on leaf operations (file copies, filter
            predicates) running at the same time. ``None`` means unbounded.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_parallel: int | None = None

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            msg = f"chunk_size must be positive, got {self.chunk_size}."
            raise ValueError(msg)
        if self.max_parallel is not None and self.max_parallel <= 0:
            msg = f"max_parallel must be positive, got {self.max_parallel}."
            raise ValueError(msg)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> NavigatorConfig:
        """Build a config from ``HANDLENAV_CHUNK_SIZE``/``HANDLENAV_MAX_PARALLEL``.

        Unset or empty variables keep their defaults.
        """

        env = os.environ if env is None else env
        chunk_size = env.get(_CHUNK_SIZE_ENV, "").strip()
        max_parallel = env.get(_MAX_PARALLEL_ENV, "").strip()
        return cls(
            chunk_size=int(chunk_size) if chunk_size else DEFAULT_CHUNK_SIZE,
            max_parallel=int(max_parallel) if max_parallel else None,
        )
