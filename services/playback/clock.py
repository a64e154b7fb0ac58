"""Fixed-rate playback clock for the editor timeline."""

import asyncio
import math
from collections.abc import Awaitable, Callable

from shared.config import config
from shared.enums import PlaybackState
from shared.utils import clamp, is_positive_duration, setup_logging

logger = setup_logging("playback-clock")

# Decimal places kept for every clock time.
TIME_PRECISION = 6


class PlaybackClock:
    """Logical timeline clock advanced in fixed steps.

    While playing, every tick adds ``tick_step`` seconds. Reaching the end of
    the timeline rewinds to zero and stops. Consumers observe a step function
    of time; there is no interpolation between ticks.
    """

    def __init__(
        self,
        duration: float | None = None,
        tick_step: float | None = None,
        tick_interval: float | None = None,
    ) -> None:
        self.duration = float(
            duration if duration is not None
            else config.get_editor_value("timeline.default_duration", 15.0)
        )
        self.tick_step = float(
            tick_step if tick_step is not None
            else config.get_editor_value("timeline.tick_step", 0.1)
        )
        self.tick_interval = float(
            tick_interval if tick_interval is not None
            else config.get_editor_value("timeline.tick_interval", 0.1)
        )
        self.current_time = 0.0
        self.state = PlaybackState.STOPPED

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    def play(self) -> None:
        if self.is_playing:
            return
        self.state = PlaybackState.PLAYING
        logger.debug(f"Playback started at {self.current_time:.2f}s")

    def pause(self) -> None:
        self.state = PlaybackState.STOPPED

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        self.current_time = 0.0
        self.state = PlaybackState.STOPPED

    def seek(self, time: float) -> float:
        """Move to time, clamped to the timeline, without changing play state."""
        if not math.isfinite(time):
            logger.warning(f"Ignoring seek to non-finite time {time!r}")
            return self.current_time
        self.current_time = round(clamp(time, 0.0, self.duration), TIME_PRECISION)
        return self.current_time

    def extend_duration(self, discovered: float | None) -> float:
        """Grow the timeline to cover a newly discovered media duration."""
        if is_positive_duration(discovered) and discovered > self.duration:
            logger.info(f"Extending timeline from {self.duration:.2f}s to {discovered:.2f}s")
            self.duration = float(discovered)
        return self.duration

    def tick(self) -> float:
        """Advance one step if playing and return the current time."""
        if not self.is_playing:
            return self.current_time

        next_time = round(self.current_time + self.tick_step, TIME_PRECISION)
        if next_time >= self.duration:
            logger.debug("Reached end of timeline, rewinding")
            self.current_time = 0.0
            self.state = PlaybackState.STOPPED
        else:
            self.current_time = next_time
        return self.current_time

    async def run(self, on_tick: Callable[[float], Awaitable[None] | None] | None = None) -> None:
        """Tick at the configured rate until cancelled.

        Ticks are scheduled against fixed deadlines, so time spent in
        ``on_tick`` does not lower the rate. A failing callback is logged and
        the loop keeps running.
        """
        logger.info(f"Clock loop started ({1 / self.tick_interval:.0f} Hz)")
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        try:
            while True:
                deadline += self.tick_interval
                delay = deadline - loop.time()
                if delay < 0:
                    # Fell behind by more than one tick; resume from now.
                    deadline = loop.time()
                    delay = 0.0
                await asyncio.sleep(delay)
                if not self.is_playing:
                    continue
                current_time = self.tick()
                if on_tick is None:
                    continue
                try:
                    result = on_tick(current_time)
                    if asyncio.iscoroutine(result):
                        await result
                except Exception as e:
                    logger.error(f"Tick callback failed at {current_time:.2f}s: {e}")
        finally:
            logger.info("Clock loop stopped")
