"""
Clock capabilities

The engine never calls asyncio.sleep() directly; it suspends through an
injected clock. Cancelling the awaiting task cancels the pending sleep.

- AsyncioClock: wall-clock time on the running event loop
- VirtualClock: manually advanced virtual time. Sleeps only complete when
  advance() or run_until() moves time past their deadline, which makes
  animations deterministic for tests and lets the recorder play a whole
  sequence instantly.
"""

import asyncio
import heapq
from typing import Awaitable, List, Protocol, Tuple


class Clock(Protocol):
    """Timer capability consumed by the engine"""

    def now(self) -> float:
        """Current time in seconds"""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend for at least `seconds`"""
        ...


class AsyncioClock:
    """Real time on the running asyncio loop"""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))


class VirtualClock:
    """
    Virtual time driven by the caller.

    Each sleep registers a deadline; advance() releases sleepers in deadline
    order (ties in registration order) and lets the event loop run between
    releases, so the woken task can schedule its next sleep before the
    following deadline is considered.

    Example:
        clock = VirtualClock()
        engine = TypingEngine(sink, clock=clock)
        engine.text_play("Hi")
        await clock.advance(2.0)
    """

    def __init__(self, start: float = 0.0, settle_rounds: int = 10):
        """
        Args:
            start: Initial virtual time
            settle_rounds: Event loop iterations granted after each release
        """
        self._now = start
        self._sequence = 0
        self._waiters: List[Tuple[float, int, asyncio.Future]] = []
        self.settle_rounds = settle_rounds
        self.tolerance = 1e-9
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        seconds = max(0.0, seconds)
        self.sleeps.append(seconds)
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._waiters, (self._now + seconds, self._sequence, future))
        self._sequence += 1
        await future

    def pending_count(self) -> int:
        """Number of sleeps still waiting for their deadline"""
        return sum(1 for _, _, future in self._waiters if not future.done())

    def deadline_next(self) -> float:
        """Earliest pending deadline, or -1 when nothing is sleeping"""
        self.waiters_prune()
        return self._waiters[0][0] if self._waiters else -1.0

    def waiters_prune(self) -> None:
        """Drop sleeps whose task was cancelled"""
        while self._waiters and self._waiters[0][2].done():
            heapq.heappop(self._waiters)

    async def settle(self) -> None:
        """Let ready tasks run until they block again"""
        for _ in range(self.settle_rounds):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        """
        Move virtual time forward, releasing every sleep that falls due.

        Args:
            seconds: Amount of virtual time to elapse
        """
        target = self._now + max(0.0, seconds)
        await self.settle()

        while True:
            self.waiters_prune()
            if not self._waiters or self._waiters[0][0] > target + self.tolerance:
                break
            deadline, _, future = heapq.heappop(self._waiters)
            self._now = max(self._now, deadline)
            future.set_result(None)
            await self.settle()

        self._now = max(self._now, target)

    async def run_until(self, awaitable: Awaitable, limit: float = 3600.0) -> None:
        """
        Advance time deadline by deadline until awaitable completes.

        Args:
            awaitable: Coroutine, task or future to drive
            limit: Virtual seconds after which driving stops

        Raises:
            TimeoutError: If the awaitable is still pending at the limit or
                          nothing is left sleeping that could complete it
        """
        task = asyncio.ensure_future(awaitable)
        end = self._now + limit
        await self.settle()

        while not task.done():
            deadline = self.deadline_next()
            if deadline < 0 or deadline > end:
                task.cancel()
                raise TimeoutError(f"awaitable still pending at t={self._now:.3f}")
            await self.advance(deadline - self._now)

        task.result()
