"""Tick loop — asyncio driver for capture and playback ticks.

Runs two independent periodic coroutines against one controller:
- a fixed-rate capture tick that samples the live actor
- a frame-rate playback tick that moves the ghost

Both ticks pass the measured monotonic-clock delta and run on the same
event loop, so the controller is never entered concurrently.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ghostreplay.engine.replay_controller import ReplayController
    from ghostreplay.loaders.replay_config_loader import ReplayConfig


class TickLoop:
    """Drives a :class:`ReplayController` from asyncio.

    Args:
        controller: The controller to tick.
        config: Supplies the capture and frame intervals.
    """

    def __init__(
        self,
        controller: ReplayController,
        config: Optional[ReplayConfig] = None,
    ) -> None:
        self._controller = controller
        self._capture_interval = config.capture_interval if config else 0.02
        self._frame_interval = config.frame_interval if config else 1.0 / 60.0
        self._running = False

        # --- Monitoring counters ---
        self.capture_ticks: int = 0
        self.playback_ticks: int = 0
        self.started_at: float = 0.0
        self.last_capture_dt: float = 0.0
        self.last_frame_dt: float = 0.0
        self.avg_tick_duration_ms: float = 0.0
        self._tick_duration_sum: float = 0.0

    async def run(self) -> None:
        """Start both ticks. Runs until stop() is called."""
        self._running = True
        self.started_at = time.monotonic()
        await asyncio.gather(self._capture_loop(), self._playback_loop())

    async def _capture_loop(self) -> None:
        last = time.monotonic()
        while self._running:
            await asyncio.sleep(self._capture_interval)
            if not self._running:
                break
            now = time.monotonic()
            dt = now - last
            last = now

            self._timed(self._controller.capture_tick, dt)
            self.capture_ticks += 1
            self.last_capture_dt = dt

    async def _playback_loop(self) -> None:
        last = time.monotonic()
        while self._running:
            await asyncio.sleep(self._frame_interval)
            if not self._running:
                break
            now = time.monotonic()
            dt = now - last
            last = now

            self._timed(self._controller.playback_tick, dt)
            self.playback_ticks += 1
            self.last_frame_dt = dt

    def _timed(self, tick, dt: float) -> None:
        t0 = time.monotonic()
        tick(dt)
        self._tick_duration_sum += (time.monotonic() - t0) * 1000
        total = self.capture_ticks + self.playback_ticks + 1
        self.avg_tick_duration_ms = self._tick_duration_sum / total

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the loop started."""
        if self.started_at == 0.0:
            return 0.0
        return time.monotonic() - self.started_at

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal both ticks to stop."""
        self._running = False
