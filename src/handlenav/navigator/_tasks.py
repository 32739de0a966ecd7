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

"""Sibling task fan-out with pooled failures."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from types import TracebackType
from typing import Any, Generic, Self, TypeVar, cast

__all__ = ["TaskPool"]

T = TypeVar("T")


class TaskPool(Generic[T]):
    """Run sibling coroutines concurrently and join them on exit.

    Leaving the ``async with`` block waits until every spawned task has
    settled. Failures are not raised one by one: once all siblings are done
    they are raised together as an ``ExceptionGroup``. Successful results are
    available from :attr:`results` in spawn order.

    If the block itself raises, spawned tasks are still awaited before the
    block's exception propagates.

    Example::

        async with TaskPool[bool]("filter /docs") as pool:
            for name in names:
                pool.spawn(check(name))
        kept = pool.results
    """

    def __init__(self, label: str) -> None:
        self._label = label
        self._tasks: list[asyncio.Task[T]] = []
        self._results: list[T] | None = None

    def spawn(self, coro: Coroutine[Any, Any, T]) -> None:
        """Schedule ``coro`` as a new sibling task."""
        self._tasks.append(asyncio.create_task(coro))

    @property
    def results(self) -> list[T]:
        """Results of all tasks, in spawn order.

        Raises:
            RuntimeError: The pool has not been joined successfully.
        """
        if self._results is None:
            msg = f"Task pool {self._label!r} has not completed."
            raise RuntimeError(msg)
        return self._results

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        outcomes = await asyncio.gather(*self._tasks, return_exceptions=True)
        if exc_val is not None:
            return
        failures = [
            outcome for outcome in outcomes if isinstance(outcome, BaseException)
        ]
        if failures:
            message = (
                f"{len(failures)} of {len(outcomes)} tasks failed in {self._label}"
            )
            raise BaseExceptionGroup(message, failures)
        self._results = cast(list[T], outcomes)
