"""Auto-Play - Step the viewer's selection through nodes on a timer.

While auto-play is on, the selection advances to the next node by weight
every ``cycle_interval`` ms. A manual selection pauses cycling and moves
the cycle position to the clicked node.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

import structlog

from src.config import MANUAL_PAUSE_SECONDS
from src.graph.neighbors import neighbor_ids
from src.graph.types import GraphData, WeightedNode

from .interaction import InteractionContext
from .state import SessionPatch

logger = structlog.get_logger()

Publisher = Callable[[SessionPatch], Awaitable[object]]


class AutoPlayCycler:
    """Selection cycler for one viewer.

    Every step is published as a patch. A remote patching the same session
    at the same moment races with it; the later write wins.
    """

    def __init__(
        self,
        context: InteractionContext,
        weighted: list[WeightedNode],
        graph: GraphData,
        publish: Publisher,
        cycle_interval_ms: int = 5000,
        pause_seconds: float = MANUAL_PAUSE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.context = context
        self.weighted = weighted
        self.graph = graph
        self.publish = publish
        self.cycle_interval_ms = cycle_interval_ms
        self.pause_seconds = pause_seconds
        self._clock = clock
        self.cycle_index = -1
        self._paused_until = 0.0
        self._task: asyncio.Task | None = None

    @property
    def paused(self) -> bool:
        return self._clock() < self._paused_until

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def reset(self, weighted: list[WeightedNode], graph: GraphData) -> None:
        """Swap in a new dataset and restart from the top."""
        self.weighted = weighted
        self.graph = graph
        self.cycle_index = -1

    async def advance(self) -> str | None:
        """Select the next node. Returns its id, or None when not cycling."""
        if not self.weighted or not self.context.auto_play or self.paused:
            return None
        self.cycle_index = (self.cycle_index + 1) % len(self.weighted)
        node_id = self.weighted[self.cycle_index].id
        self.context.selected_node_id = node_id
        self.context.highlighted_node_ids = neighbor_ids(self.graph, node_id)
        await self.publish(
            SessionPatch(
                selected_node_id=node_id,
                highlighted_node_ids=tuple(self.context.highlighted_node_ids),
            )
        )
        return node_id

    async def manual_select(self, node_id: str) -> None:
        """Apply a user click: pause cycling, toggle selection, publish."""
        if self.context.auto_play:
            self._paused_until = self._clock() + self.pause_seconds
        for index, node in enumerate(self.weighted):
            if node.id == node_id:
                self.cycle_index = index
                break
        self.context.select_node(self.graph, node_id)
        await self.publish(
            SessionPatch(
                selected_node_id=self.context.selected_node_id or "",
                highlighted_node_ids=tuple(self.context.highlighted_node_ids),
            )
        )

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.cycle_interval_ms / 1000)
            try:
                node_id = await self.advance()
            except Exception as e:
                logger.warning("autoplay_publish_failed", index=self.cycle_index, error=repr(e))
                continue
            if node_id:
                logger.debug("autoplay_advanced", node_id=node_id, index=self.cycle_index)

    def start(self) -> asyncio.Task:
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
