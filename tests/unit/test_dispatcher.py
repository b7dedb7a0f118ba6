import threading
from unittest.mock import MagicMock

import pytest

from legalrisk.worker.dispatcher import Dispatcher


def _make_blocking_runner() -> tuple[MagicMock, threading.Event, threading.Event]:
    started = threading.Event()
    release = threading.Event()
    runner = MagicMock()

    def run(document_id: int) -> bool:
        started.set()
        release.wait(5)
        return True

    runner.run.side_effect = run
    return runner, started, release


class TestSubmitForProcessing:
    def test_runs_document_in_pool(self) -> None:
        runner = MagicMock()
        dispatcher = Dispatcher(runner, max_workers=2)

        dispatcher.submit_for_processing(5)
        dispatcher.shutdown(wait=True)

        runner.run.assert_called_once_with(5)

    def test_returns_before_run_completes(self) -> None:
        runner, started, release = _make_blocking_runner()
        dispatcher = Dispatcher(runner, max_workers=1)
        try:
            dispatcher.submit_for_processing(5)
            assert started.wait(2)
            assert dispatcher.is_active(5)
        finally:
            release.set()
            dispatcher.shutdown(wait=True)

    def test_double_trigger_is_noop_while_active(self) -> None:
        runner, started, release = _make_blocking_runner()
        dispatcher = Dispatcher(runner, max_workers=2)
        try:
            dispatcher.submit_for_processing(5)
            assert started.wait(2)
            dispatcher.submit_for_processing(5)
        finally:
            release.set()
            dispatcher.shutdown(wait=True)

        runner.run.assert_called_once_with(5)

    def test_active_set_is_cleared_after_run(self) -> None:
        runner = MagicMock()
        dispatcher = Dispatcher(runner, max_workers=1)

        dispatcher.submit_for_processing(5)
        dispatcher.shutdown(wait=True)

        assert dispatcher.active_count() == 0

    def test_runner_exception_clears_active_set(self) -> None:
        runner = MagicMock()
        runner.run.side_effect = RuntimeError("boom")
        dispatcher = Dispatcher(runner, max_workers=1)

        dispatcher.submit_for_processing(5)
        dispatcher.shutdown(wait=True)

        assert not dispatcher.is_active(5)

    def test_submit_after_shutdown_raises(self) -> None:
        dispatcher = Dispatcher(MagicMock(), max_workers=1)
        dispatcher.shutdown()

        with pytest.raises(RuntimeError, match="shut down"):
            dispatcher.submit_for_processing(5)

    def test_rejected_submit_does_not_leave_document_active(self) -> None:
        dispatcher = Dispatcher(MagicMock(), max_workers=1)
        # Pool closed underneath the dispatcher, as when shutdown races a submit.
        dispatcher._executor.shutdown()

        with pytest.raises(RuntimeError):
            dispatcher.submit_for_processing(5)

        assert not dispatcher.is_active(5)
        assert dispatcher.active_count() == 0
