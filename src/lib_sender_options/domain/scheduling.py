"""Execution contexts that deliver send-result callbacks.

Purpose
-------
Describe where the sending pipeline runs its completion callbacks. The options
object only carries a :class:`Scheduler`; it never runs one.

Contents
--------
* :class:`Scheduler` – structural contract (``schedule(task)``).
* :class:`ImmediateScheduler` / :data:`IMMEDIATE` – runs tasks inline on the
  calling thread; the default for new options.
* :class:`ExecutorScheduler` – hands tasks to a
  :class:`concurrent.futures.Executor`.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Callable, Final, Protocol, runtime_checkable


@runtime_checkable
class Scheduler(Protocol):
    """Deliver zero-argument callables somewhere (inline, thread pool, loop)."""

    def schedule(self, task: Callable[[], object]) -> None:
        """Arrange for *task* to run."""


class ImmediateScheduler:
    """Run every task synchronously on the caller's thread.

    Examples
    --------
    >>> seen = []
    >>> IMMEDIATE.schedule(lambda: seen.append("done"))
    >>> seen
    ['done']
    """

    __slots__ = ()

    def schedule(self, task: Callable[[], object]) -> None:
        task()

    def __repr__(self) -> str:
        return "ImmediateScheduler()"


IMMEDIATE: Final[ImmediateScheduler] = ImmediateScheduler()
"""Shared inline scheduler used by :meth:`SenderOptions.create`."""


class ExecutorScheduler:
    """Submit tasks to an existing executor.

    The scheduler does not own *executor*; shutting it down remains the
    caller's job. Two instances wrapping the same executor compare equal.
    """

    __slots__ = ("_executor",)

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    @property
    def executor(self) -> Executor:
        return self._executor

    def schedule(self, task: Callable[[], object]) -> None:
        self._executor.submit(task)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExecutorScheduler):
            return NotImplemented
        return self._executor is other._executor

    def __hash__(self) -> int:
        return hash(id(self._executor))

    def __repr__(self) -> str:
        return f"ExecutorScheduler({self._executor!r})"
