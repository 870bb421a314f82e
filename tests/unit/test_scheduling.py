from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from lib_sender_options import IMMEDIATE, ExecutorScheduler, ImmediateScheduler, Scheduler


def test_immediate_scheduler_runs_inline() -> None:
    seen: list[str] = []
    IMMEDIATE.schedule(lambda: seen.append(threading.current_thread().name))
    assert seen == [threading.current_thread().name]


def test_schedulers_satisfy_protocol() -> None:
    with ThreadPoolExecutor(max_workers=1) as executor:
        assert isinstance(ExecutorScheduler(executor), Scheduler)
    assert isinstance(ImmediateScheduler(), Scheduler)


def test_executor_scheduler_submits_to_executor() -> None:
    done = threading.Event()
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="sender") as executor:
        scheduler = ExecutorScheduler(executor)
        scheduler.schedule(done.set)
        assert done.wait(timeout=5)
        assert scheduler.executor is executor


def test_executor_scheduler_equality_follows_executor() -> None:
    with ThreadPoolExecutor(max_workers=1) as first, ThreadPoolExecutor(max_workers=1) as second:
        assert ExecutorScheduler(first) == ExecutorScheduler(first)
        assert hash(ExecutorScheduler(first)) == hash(ExecutorScheduler(first))
        assert ExecutorScheduler(first) != ExecutorScheduler(second)
