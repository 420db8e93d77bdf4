"""Remote Controller - Phone-style commands that drive a viewer's session.

Each command reads the current session through the transport, patches it,
and returns a short status line for display.
"""

from collections.abc import Awaitable, Callable

import structlog

from src.config import REMOTE_POLL_INTERVAL
from src.graph.neighbors import neighbor_at_index
from src.graph.types import GraphData

from .state import ZOOM_LEVELS, SessionPatch, SessionState
from .sync import SessionPoller, SessionTransport

logger = structlog.get_logger()

GraphSource = Callable[[], Awaitable[GraphData | None]]


class RemoteController:
    """Command set for one session.

    ``graph_source`` is awaited for neighbor lookups; returning None means the
    graph is unavailable.
    """

    def __init__(
        self,
        transport: SessionTransport,
        session_id: str,
        graph_source: GraphSource,
    ):
        self.transport = transport
        self.session_id = session_id
        self.graph_source = graph_source
        self.auto_play = True
        self.neighbor_index = 0
        self.last_path_id: str | None = None
        self.last_export: str | None = None

    async def _patch(self, **changes) -> SessionState | None:
        return await self.transport.patch(self.session_id, SessionPatch(**changes))

    def _apply(self, state: SessionState) -> None:
        self.auto_play = state.auto_play

    def poller(self, interval: float = REMOTE_POLL_INTERVAL) -> SessionPoller:
        """Poller that keeps the local auto-play flag in step with the session."""
        return SessionPoller(self.transport, self.session_id, self._apply, interval)

    async def sync(self) -> SessionState | None:
        state = await self.transport.get(self.session_id)
        if state is not None:
            self._apply(state)
        return state

    async def toggle_auto_play(self) -> str:
        value = not self.auto_play
        await self._patch(auto_play=value)
        self.auto_play = value
        return f"Auto-Play: {'ON' if value else 'OFF'}"

    async def _zoom(self, step: int) -> str:
        state = await self.transport.get(self.session_id)
        if state is None:
            return "Session not found"
        index = ZOOM_LEVELS.index(state.zoom_state) + step
        if not 0 <= index < len(ZOOM_LEVELS):
            return f"Zoom: {state.zoom_state.value}"
        await self._patch(zoom_state=ZOOM_LEVELS[index])
        return f"Zoom: {ZOOM_LEVELS[index].value}"

    async def zoom_in(self) -> str:
        return await self._zoom(1)

    async def zoom_out(self) -> str:
        return await self._zoom(-1)

    async def clear_selection(self) -> str:
        await self._patch(selected_node_id="")
        self.neighbor_index = 0
        return "Selection cleared"

    async def next_neighbor(self) -> str:
        state = await self.transport.get(self.session_id)
        if state is None or not state.selected_node_id:
            return "No node selected"

        graph = await self.graph_source()
        if graph is None:
            return "Could not load graph"

        picked = neighbor_at_index(graph, state.selected_node_id, self.neighbor_index)
        if picked is None:
            return "No neighbors"

        neighbor_id, self.neighbor_index = picked
        await self._patch(selected_node_id=neighbor_id)
        return f"Selected: {neighbor_id}"

    async def previous_node(self) -> str:
        state = await self.transport.get(self.session_id)
        if state is None or len(state.path) < 2:
            return "No previous node"
        previous = state.path[-2]
        await self._patch(selected_node_id=previous)
        return f"Back to: {previous}"

    async def save_path(self) -> str:
        state = await self.transport.get(self.session_id)
        if state is None or not state.path:
            return "No path to save"
        self.last_path_id = await self.transport.save_path(self.session_id, state.path)
        logger.info("remote_path_saved", session_id=self.session_id, path_id=self.last_path_id)
        return "Path saved!"

    async def export_path(self) -> str:
        if not self.last_path_id:
            return "Save a path first"
        text = await self.transport.export_path(self.last_path_id)
        if text is None:
            return "Path not found"
        self.last_export = text
        return "Exported"

    COMMANDS = (
        "toggle_auto_play",
        "zoom_in",
        "zoom_out",
        "clear_selection",
        "next_neighbor",
        "previous_node",
        "save_path",
        "export_path",
    )

    async def run(self, command: str) -> str:
        """Run a command by name.

        Raises:
            ValueError: If ``command`` is not one of COMMANDS
        """
        if command not in self.COMMANDS:
            raise ValueError(f"Unknown command: {command}")
        return await getattr(self, command)()
