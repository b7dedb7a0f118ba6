"""Isolated best-effort sub-tasks.

Each task runs on its own thread and is bounded by a timeout. A task that
raises or times out yields its default value and a warning; nothing
propagates to the caller. A timed-out task keeps running; callers whose
later writes must land after it keep its future and order against it.
"""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from time import monotonic
from typing import Any

from legalrisk.logging.logger import Log


@dataclass(frozen=True)
class SideTask:
    name: str
    func: Callable[[], Any]
    default: Any = None


def start_side_task(task: SideTask) -> Future[Any]:
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="side-task")
    try:
        return executor.submit(task.func)
    finally:
        # The queued call still runs; only the executor is released.
        executor.shutdown(wait=False)


def await_side_task(task: SideTask, future: Future[Any], deadline: float) -> Any:
    """Result of a started task, or its default once `deadline` (monotonic) passes."""
    try:
        return future.result(timeout=max(0.0, deadline - monotonic()))
    except FutureTimeoutError:
        Log.warning(f"Side task '{task.name}' timed out; continuing without it")
    except Exception as exc:
        Log.warning(f"Side task '{task.name}' failed; continuing without it: {exc}")
    return task.default


def run_side_tasks(tasks: list[SideTask], timeout_seconds: float) -> dict[str, Any]:
    """Run tasks concurrently; return each task's result or default by name.

    Returns only after every task has resolved or the shared deadline has
    passed.
    """
    futures = {task.name: start_side_task(task) for task in tasks}
    deadline = monotonic() + timeout_seconds
    return {task.name: await_side_task(task, futures[task.name], deadline) for task in tasks}


def run_side_task(task: SideTask, timeout_seconds: float) -> Any:
    return run_side_tasks([task], timeout_seconds)[task.name]
