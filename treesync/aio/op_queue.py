"""Serialized asynchronous operation queue.

The OpQueue runs zero-argument operations one at a time, in FIFO order.
An operation may be a plain callable (synchronous work) or return an
awaitable (asynchronous work); the next operation starts only once the
previous one has fully completed. A failing operation is reported to the
queue's ErrorPolicy and never stalls the queue.

The queue knows nothing about trees.
"""

import asyncio
import functools
import inspect
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, NamedTuple, Optional, Union

from .error_policies import ErrorPolicy, ContinueOnErrorsPolicy

logger = logging.getLogger(__name__)

Operation = Callable[[], Union[None, Awaitable[Any]]]


class QueuedOperation(NamedTuple):
    """An operation waiting in (or running from) the queue."""
    op: Operation
    name: str
    node: Any


class OpQueue:
    """FIFO, single-concurrency runner for structural mutations.

    Example:
        queue = OpQueue()
        queue.enqueue_operation(some_coroutine_function)
        queue.enqueue_operation(another_one)
        await queue.join()
    """

    def __init__(self, policy: Optional[ErrorPolicy] = None):
        """Initialize an idle queue.

        Args:
            policy: Reporter for failed operations (defaults to ContinueOnErrorsPolicy)
        """
        self._pending: Deque[QueuedOperation] = deque()
        self._current: Optional[QueuedOperation] = None
        self._busy = False
        # Created on first use so it binds to the loop that runs the queue
        self._idle: Optional[asyncio.Event] = None
        self._policy = policy or ContinueOnErrorsPolicy()

        # Track execution statistics
        self.stats = {
            'enqueued': 0,
            'completed': 0,
            'failed': 0,
        }

    @property
    def busy(self) -> bool:
        """True while an operation is running or waiting."""
        return self._busy

    @property
    def pending(self) -> int:
        """Number of operations waiting behind the current one."""
        return len(self._pending)

    @property
    def current(self) -> Optional[QueuedOperation]:
        """The operation currently in flight, if any."""
        return self._current

    def enqueue_operation(self, op: Operation, name: Optional[str] = None, node: Any = None) -> None:
        """Append an operation to the tail of the queue.

        If the queue is idle the operation is started before this call
        returns; otherwise it waits for every earlier operation to finish.

        Args:
            op: Zero-argument callable, returning None or an awaitable
            name: Operation name used in error reports (defaults to op.__name__)
            node: Tree node the operation acts on, used in error reports
        """
        if name is None:
            name = getattr(op, '__name__', repr(op))
        self._pending.append(QueuedOperation(op, name, node))
        self.stats['enqueued'] += 1
        logger.debug("enqueued %s (pending=%d, busy=%s)", name, len(self._pending), self._busy)

        if not self._busy:
            self._busy = True
            self._idle_event().clear()
            self._run_next()

    async def join(self) -> None:
        """Wait until every queued operation (and anything it enqueued) has finished."""
        await self._idle_event().wait()

    def _idle_event(self) -> asyncio.Event:
        if self._idle is None:
            self._idle = asyncio.Event()
            if not self._busy:
                self._idle.set()
        return self._idle

    def _run_next(self) -> None:
        """Start queued operations until one suspends or the queue drains."""
        while self._pending:
            entry = self._pending.popleft()
            self._current = entry
            try:
                result = entry.op()
                if inspect.isawaitable(result):
                    future = asyncio.ensure_future(result)
                    future.add_done_callback(functools.partial(self._on_done, entry))
                    return
            except Exception as e:
                self._fail(entry, e)
                continue
            self.stats['completed'] += 1

        self._current = None
        self._busy = False
        self._idle_event().set()

    def _on_done(self, entry: QueuedOperation, future: 'asyncio.Future[Any]') -> None:
        """Done callback of an asynchronous operation."""
        try:
            if future.cancelled():
                self._fail(entry, asyncio.CancelledError())
            elif future.exception() is not None:
                self._fail(entry, future.exception())
            else:
                self.stats['completed'] += 1
        finally:
            self._run_next()

    def _fail(self, entry: QueuedOperation, error: BaseException) -> None:
        self.stats['failed'] += 1
        logger.debug("operation %s failed: %r", entry.name, error)
        try:
            self._policy.handle(error, entry.name, entry.node)
        except Exception:
            # A broken reporter must not stop the queue from draining
            logger.exception("error policy failed while reporting %s", entry.name)

    def get_policy(self) -> ErrorPolicy:
        """
        Get the current error policy.

        Returns:
            The configured ErrorPolicy instance
        """
        return self._policy

    def set_policy(self, policy: ErrorPolicy) -> None:
        """
        Change the error policy.

        Args:
            policy: The new ErrorPolicy to use
        """
        self._policy = policy

    def __repr__(self) -> str:
        return (f"OpQueue(busy={self._busy}, pending={len(self._pending)}, "
                f"policy={self._policy.__class__.__name__})")
