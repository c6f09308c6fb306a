"""
Background workers for cache I/O.

Every cache file gets its own single-thread executor, so asynchronous reads,
finds and commits against one cache run in the order they were submitted while
different caches proceed in parallel.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

_workers: dict[Path, ThreadPoolExecutor] = {}
_workers_lock = threading.Lock()


def _get_worker(cache_file: Path) -> ThreadPoolExecutor:
    key = cache_file.absolute()
    with _workers_lock:
        worker = _workers.get(key)
        if worker is None:
            worker = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix=f"silk-{cache_file.stem}"
            )
            _workers[key] = worker
            log.debug(f"Started cache worker for {cache_file.name}.")
        return worker


def submit(cache_file: Path, fn: Callable[..., Any], *args: Any) -> Future:
    """Queues `fn(*args)` on the worker that owns `cache_file`."""
    return _get_worker(cache_file).submit(fn, *args)


def shutdown_workers(wait: bool = True) -> None:
    """Stops every cache worker. Workers are recreated on the next submission."""
    with _workers_lock:
        workers = list(_workers.values())
        _workers.clear()
    for worker in workers:
        worker.shutdown(wait=wait)
    if workers:
        log.debug(f"Stopped {len(workers)} cache workers.")
