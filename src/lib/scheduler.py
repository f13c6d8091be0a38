"""
Timing scheduler for character reveal

Produces one delay per character so that a whole message is revealed in
the configured total typing time, with random per-character jitter.

    baseDelay = totalTypingTime / charCount
    delay_i   = max(0.01, baseDelay + uniform(-noise, noise) * baseDelay)
    delay_last = max(0.01, totalTypingTime - sum(delay_0 .. delay_n-2))

The last delay absorbs whatever budget the jittered delays left over, so
the cumulative duration lands on the total typing time.

Delays are computed lazily from the live EngineConfig: changing the total
time or noise mid-animation affects the next delay only.
"""

import random
from typing import AsyncIterator, Iterator, Optional, TYPE_CHECKING

from ..models.engine import EngineConfig
from .log import LOG

if TYPE_CHECKING:
    from ..config.settings import AppSettings
    from .clock import Clock


class TimingScheduler:
    """
    Cancellable, lazily computed sequence of per-character delays
    """

    def __init__(
        self,
        charCount: int,
        config: EngineConfig,
        rng: Optional[random.Random] = None,
        settings: Optional["AppSettings"] = None,
    ):
        """
        Args:
            charCount: Number of characters to reveal
            config: Engine configuration read at every delay
            rng: Uniform random source (a fresh unseeded Random by default)
            settings: AppSettings providing clamps (defaults to the singleton)
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.charCount = max(0, charCount)
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.index = 0
        self.elapsed = 0.0
        self.cancelled = False

    def delay_next(self) -> Optional[float]:
        """
        Compute the delay before the next character.

        Returns:
            Delay in seconds, or None once every character is scheduled or
            the scheduler was cancelled
        """
        if self.cancelled or self.index >= self.charCount:
            return None

        total = self.settings.typingTime_clamp(self.config.totalTypingTime)
        floor = self.settings.min_char_delay

        if self.index == self.charCount - 1:
            delay = max(floor, total - self.elapsed)
        else:
            base = total / self.charCount
            noise = self.settings.noise_clamp(self.config.noiseVariation)
            delay = max(floor, base + self.rng.uniform(-noise, noise) * base)

        self.index += 1
        self.elapsed += delay
        return delay

    def __iter__(self) -> Iterator[float]:
        while True:
            delay = self.delay_next()
            if delay is None:
                return
            yield delay

    async def ticks(self, clock: "Clock") -> AsyncIterator[int]:
        """
        Wait out each delay on clock, yielding the new reveal count.

        Cancelling the consuming task interrupts the pending sleep; calling
        cancel() ends the iteration at the next suspension point without
        yielding again.
        """
        for delay in self:
            LOG(f"Next character in {delay:.3f}s", level=3)
            await clock.sleep(delay)
            if self.cancelled:
                return
            yield self.index

    def cancel(self) -> None:
        """Stop producing delays"""
        self.cancelled = True

    def remaining_count(self) -> int:
        """Characters not yet scheduled"""
        return 0 if self.cancelled else self.charCount - self.index


def schedule(
    totalDuration: float,
    noise: float,
    charCount: int,
    rng: Optional[random.Random] = None,
) -> TimingScheduler:
    """
    Build a scheduler for fixed timing values.

    Args:
        totalDuration: Total reveal time in seconds (floored at 0.1)
        noise: Jitter fraction (clamped to [0, 1])
        charCount: Number of characters

    Returns:
        TimingScheduler; iterate it for the delays

    Example:
        >>> delays = list(schedule(1.0, 0.0, 4))
        >>> delays
        [0.25, 0.25, 0.25, 0.25]
    """
    from ..config import appsettings

    config = EngineConfig(
        totalTypingTime=appsettings.typingTime_clamp(totalDuration),
        noiseVariation=appsettings.noise_clamp(noise),
    )
    return TimingScheduler(charCount, config, rng=rng)
