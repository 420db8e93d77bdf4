"""Frame Loop - Per-frame callbacks on an asyncio task.

Drives the idle ring rotation and live force simulation. Only one task runs
per loop: ``start()`` cancels the previous one before scheduling a new one.
"""

import asyncio
import math
import time
from collections.abc import Callable

import structlog

from src.config import FRAME_INTERVAL

from .force import ForceSimulation

logger = structlog.get_logger()

# Callback receives seconds since the previous frame; returns False to stop
FrameCallback = Callable[[float], bool | None]


class FrameLoop:
    """Calls ``callback(dt)`` every ``interval`` seconds until stopped."""

    def __init__(
        self,
        callback: FrameCallback,
        interval: float = FRAME_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.callback = callback
        self.interval = interval
        self._clock = clock
        self._task: asyncio.Task | None = None
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start (or restart) the loop. Must be called from a running event loop."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        last = self._clock()
        while True:
            await asyncio.sleep(self.interval)
            now = self._clock()
            self.frames += 1
            try:
                result = self.callback(now - last)
            except Exception as e:
                logger.warning("frame_callback_failed", frames=self.frames, error=repr(e))
                result = None
            if result is False:
                logger.debug("frame_loop_finished", frames=self.frames)
                return
            last = now


class RotationAnimator:
    """Continuous angle for the idle ring rotation.

    The angle only advances while no node is selected, and wraps at 2π.
    """

    def __init__(self, speed: float = 0.1, interval: float = FRAME_INTERVAL):
        self.speed = speed
        self.angle = 0.0
        self.paused = False
        self.loop = FrameLoop(self.advance, interval)

    def advance(self, dt: float) -> None:
        if self.paused or self.speed == 0:
            return
        self.angle = (self.angle + self.speed * dt) % (2 * math.pi)

    def set_selection(self, selected_node_id: str | None) -> None:
        self.paused = bool(selected_node_id)

    def start(self) -> asyncio.Task:
        return self.loop.start()

    async def stop(self) -> None:
        await self.loop.stop()


class SimulationAnimator:
    """Steps a force simulation once per frame until it cools.

    Dragging pins the node and restarts the loop so the rest of the graph
    follows without resetting the layout.
    """

    def __init__(self, simulation: ForceSimulation, interval: float = FRAME_INTERVAL):
        self.simulation = simulation
        self.loop = FrameLoop(lambda _dt: self.simulation.step(), interval)

    def start(self) -> asyncio.Task:
        return self.loop.start()

    def drag(self, node_id: str, x: float, y: float) -> bool:
        """Pin ``node_id`` at (x, y) and reheat. Must be called from a running event loop."""
        if not self.simulation.drag(node_id, x, y, ticks=0):
            return False
        self.start()
        return True

    def release(self, node_id: str) -> bool:
        return self.simulation.release(node_id)

    async def stop(self) -> None:
        await self.loop.stop()
