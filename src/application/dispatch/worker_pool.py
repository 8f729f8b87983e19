"""
Bounded Worker Pool

Thread pool with a steady-state worker count, a burst ceiling and a bounded
backlog. Used by OrderDispatcher to run processor jobs off the request path.

Responsibility:
    - Accept jobs without blocking the caller beyond a backlog append
    - Grow from core_workers up to max_workers under load
    - Retire surplus workers after keep_alive_seconds of idleness
    - Reject jobs when the backlog is full and no worker can be added
    - Isolate job failures (logged, never kill the worker)

Admission Rules (checked in order, under one lock):
    1. Fewer than core_workers threads  -> start a new worker with the job
    2. Backlog below queue_capacity     -> append to backlog, wake a worker
    3. Fewer than max_workers threads   -> start a surplus worker with the job
    4. Otherwise                        -> DispatchRejectedError

Concurrency Invariant:
    Each worker runs at most one job at a time and the number of workers
    never exceeds max_workers, so at most max_workers jobs run at once.

Ordering:
    Backlog is FIFO but jobs started by new workers skip it, so no ordering
    between jobs is guaranteed.
"""

import itertools
import logging
import threading
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Callable, Deque, Optional

from src.application.exceptions import DispatchRejectedError

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass
class _Job:
    fn: Callable[..., Any]
    args: tuple
    kwargs: dict

    @property
    def name(self) -> str:
        return getattr(self.fn, "__qualname__", repr(self.fn))


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Point-in-time view of the pool for health checks and tests.

    Attributes:
        pool_size: Live worker threads
        active: Jobs claimed by workers (running or about to run)
        queued: Jobs waiting in the backlog
        peak_active: Highest value active has ever reached
        completed: Jobs that returned normally
        failed: Jobs that raised
        core_workers / max_workers / queue_capacity: Configured limits
        running: True between start() and shutdown()
    """

    pool_size: int
    active: int
    queued: int
    peak_active: int
    completed: int
    failed: int
    core_workers: int
    max_workers: int
    queue_capacity: int
    running: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BoundedWorkerPool:
    """
    Thread pool with core/max worker counts and a bounded FIFO backlog.

    Lifecycle:
        pool = BoundedWorkerPool(4, 10, 50)
        pool.start()
        pool.submit(fn, arg)
        pool.shutdown(wait=True)

    Cancellation:
        cancel_event is set by shutdown(cancel_running=True). Jobs that can be
        interrupted (e.g. a processor waiting out its delay) should wait on it.

    Examples:
        >>> pool = BoundedWorkerPool(core_workers=1, max_workers=2, queue_capacity=1)
        >>> pool.start()
        >>> pool.submit(print, "hello")
        >>> pool.wait_idle(timeout=1.0)
        True
        >>> pool.shutdown()
        0
    """

    def __init__(
        self,
        core_workers: int,
        max_workers: int,
        queue_capacity: int,
        keep_alive_seconds: float = 60.0,
        thread_name_prefix: str = "worker",
    ) -> None:
        """
        Initialize pool limits. No thread is started here.

        Raises:
            ValueError: If limits are inconsistent
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        if not 0 <= core_workers <= max_workers:
            raise ValueError(
                f"core_workers must be between 0 and {max_workers}, got {core_workers}"
            )
        if queue_capacity < 0:
            raise ValueError(f"queue_capacity must be >= 0, got {queue_capacity}")

        self.core_workers = core_workers
        self.max_workers = max_workers
        self.queue_capacity = queue_capacity
        self.keep_alive_seconds = keep_alive_seconds
        self.thread_name_prefix = thread_name_prefix

        self.cancel_event = threading.Event()

        self._backlog: Deque[_Job] = deque()
        self._lock = threading.RLock()
        self._work_available = threading.Condition(self._lock)
        self._state_changed = threading.Condition(self._lock)
        self._workers: set[threading.Thread] = set()
        self._thread_ids = itertools.count(1)

        self._running = False
        self._shutdown = False
        self._active = 0
        self._peak_active = 0
        self._completed = 0
        self._failed = 0

    # -------------------- lifecycle --------------------

    def start(self) -> None:
        """
        Open the pool for submissions. Workers are started on demand.

        Raises:
            RuntimeError: If the pool was already shut down
        """
        with self._lock:
            if self._shutdown:
                raise RuntimeError("Worker pool was shut down and cannot be restarted")
            self._running = True
        logger.info(
            f"Worker pool started: core={self.core_workers}, max={self.max_workers}, "
            f"queue_capacity={self.queue_capacity}"
        )

    def shutdown(
        self,
        wait: bool = True,
        cancel_running: bool = False,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Stop accepting jobs and let workers exit.

        Args:
            wait: Join worker threads before returning
            cancel_running: Drop the backlog and set cancel_event so
                interruptible jobs abandon their work
            timeout: Per-thread join timeout in seconds (None waits forever)

        Returns:
            Number of backlog jobs dropped (0 unless cancel_running)
        """
        with self._lock:
            self._running = False
            self._shutdown = True
            dropped = 0
            if cancel_running:
                dropped = len(self._backlog)
                self._backlog.clear()
                self.cancel_event.set()
            self._work_available.notify_all()
            self._state_changed.notify_all()
            workers = list(self._workers)

        if wait:
            for worker in workers:
                worker.join(timeout)

        logger.info(
            f"Worker pool shut down: dropped={dropped}, "
            f"completed={self._completed}, failed={self._failed}"
        )
        return dropped

    # -------------------- submission --------------------

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """
        Hand a job to the pool. Never blocks on job execution.

        Raises:
            DispatchRejectedError: If the pool is not running, or the backlog
                is full and max_workers are already running
        """
        job = _Job(fn, args, kwargs)

        with self._lock:
            if not self._running:
                raise DispatchRejectedError(
                    "Worker pool is not accepting jobs",
                    queue_capacity=self.queue_capacity,
                    max_workers=self.max_workers,
                )

            if len(self._workers) < self.core_workers:
                self._spawn_worker(job)
                return

            if len(self._backlog) < self.queue_capacity:
                self._backlog.append(job)
                if not self._workers:
                    # core_workers == 0: somebody has to drain the backlog
                    self._spawn_worker(None)
                else:
                    self._work_available.notify()
                return

            if len(self._workers) < self.max_workers:
                self._spawn_worker(job)
                return

        raise DispatchRejectedError(
            f"Backlog full ({self.queue_capacity}) and all {self.max_workers} workers busy",
            queue_capacity=self.queue_capacity,
            max_workers=self.max_workers,
        )

    # -------------------- introspection --------------------

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return PoolSnapshot(
                pool_size=len(self._workers),
                active=self._active,
                queued=len(self._backlog),
                peak_active=self._peak_active,
                completed=self._completed,
                failed=self._failed,
                core_workers=self.core_workers,
                max_workers=self.max_workers,
                queue_capacity=self.queue_capacity,
                running=self._running,
            )

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the backlog is empty and no job is claimed.

        Returns:
            True if the pool became idle, False on timeout
        """
        with self._lock:
            return self._state_changed.wait_for(
                lambda: not self._backlog and self._active == 0, timeout
            )

    # -------------------- internals --------------------

    def _claim(self) -> None:
        # caller holds the lock
        self._active += 1
        if self._active > self._peak_active:
            self._peak_active = self._active

    def _spawn_worker(self, first_job: Optional[_Job]) -> None:
        # caller holds the lock
        if first_job is not None:
            self._claim()
        thread = threading.Thread(
            target=self._worker_loop,
            args=(first_job,),
            name=f"{self.thread_name_prefix}-{next(self._thread_ids)}",
            daemon=True,
        )
        self._workers.add(thread)
        thread.start()

    def _next_job(self) -> Optional[_Job]:
        """Claim the next backlog job, or return None when this worker should exit."""
        current = threading.current_thread()
        timed_out = False
        with self._lock:
            while True:
                if self._backlog:
                    job = self._backlog.popleft()
                    self._claim()
                    return job
                if self._shutdown:
                    self._workers.discard(current)
                    return None

                surplus = len(self._workers) > self.core_workers
                if surplus and timed_out:
                    self._workers.discard(current)
                    logger.debug(f"Retiring idle worker {current.name}")
                    return None

                timeout = self.keep_alive_seconds if surplus else None
                timed_out = not self._work_available.wait(timeout)

    def _worker_loop(self, first_job: Optional[_Job]) -> None:
        job = first_job
        try:
            while True:
                if job is None:
                    job = self._next_job()
                    if job is None:
                        return
                self._execute(job)
                job = None
        finally:
            with self._lock:
                self._workers.discard(threading.current_thread())
                self._state_changed.notify_all()

    def _execute(self, job: _Job) -> None:
        started = time.perf_counter()
        failed = False
        try:
            job.fn(*job.args, **job.kwargs)
        except Exception:
            failed = True
            logger.exception(
                f"Job {job.name} failed after {time.perf_counter() - started:.3f}s"
            )
        finally:
            with self._lock:
                self._active -= 1
                if failed:
                    self._failed += 1
                else:
                    self._completed += 1
                self._state_changed.notify_all()
