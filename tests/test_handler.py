"""Tests for callback delivery contexts and cache workers."""

import asyncio
import threading

from silk_cache.core import workers
from silk_cache.core.handler import (
    Handler,
    ImmediateHandler,
    LoopHandler,
    default_handler,
)


class TestHandler:
    """The queue-backed handler."""

    def test_callbacks_wait_for_run_pending(self):
        handler = Handler()
        calls = []

        handler.post(calls.append, 1)
        handler.post(calls.append, 2)
        assert calls == []

        assert handler.run_pending() == 2
        assert calls == [1, 2]
        assert handler.run_pending() == 0

    def test_callbacks_run_on_the_draining_thread(self):
        handler = Handler()
        threads = []
        worker = threading.Thread(
            target=handler.post,
            args=(lambda: threads.append(threading.current_thread()),),
        )
        worker.start()
        worker.join()

        handler.run_pending(timeout=1)
        assert threads == [threading.current_thread()]

    def test_owner_is_the_creating_thread(self):
        assert Handler().owner is threading.current_thread()

    def test_immediate_handler_runs_inline(self):
        calls = []
        ImmediateHandler().post(calls.append, "now")

        assert calls == ["now"]


class TestLoopHandler:
    """Delivery through an asyncio event loop."""

    def test_default_handler_binds_running_loop(self):
        async def scenario():
            handler = default_handler()
            assert isinstance(handler, LoopHandler)

            done = asyncio.Event()
            seen = []

            def deliver(value):
                seen.append(value)
                done.set()

            thread = threading.Thread(target=handler.post, args=(deliver, "value"))
            thread.start()
            await asyncio.wait_for(done.wait(), timeout=5)
            thread.join()
            return seen

        assert asyncio.run(scenario()) == ["value"]

    def test_default_handler_without_loop(self):
        handler = default_handler()

        assert type(handler) is Handler


class TestWorkers:
    """Per-cache serial workers."""

    def test_jobs_for_one_cache_run_in_order(self, tmp_path):
        order = []
        path = tmp_path / "feed.cache"
        futures = [workers.submit(path, order.append, i) for i in range(20)]
        for future in futures:
            future.result(timeout=5)

        assert order == list(range(20))

    def test_one_thread_per_cache(self, tmp_path):
        names = []

        def record():
            names.append(threading.current_thread().name)

        workers.submit(tmp_path / "a.cache", record).result(timeout=5)
        workers.submit(tmp_path / "a.cache", record).result(timeout=5)
        workers.submit(tmp_path / "b.cache", record).result(timeout=5)

        assert names[0] == names[1]
        assert names[0].startswith("silk-a")
        assert names[2].startswith("silk-b")

    def test_workers_restart_after_shutdown(self, tmp_path):
        path = tmp_path / "feed.cache"
        workers.submit(path, lambda: None).result(timeout=5)
        workers.shutdown_workers()

        assert workers.submit(path, lambda: 42).result(timeout=5) == 42
