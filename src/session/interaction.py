"""Interaction Context - Client-side mirror of the session state.

Each viewer or remote owns one context. Local clicks mutate it directly and
are published as patches; server state arriving through the poller replaces
it wholesale (view settings are merged).
"""

from dataclasses import dataclass, field

from src.graph.neighbors import neighbor_ids
from src.graph.types import GraphData

from .state import SessionPatch, SessionState, ZoomState
from .view_settings import DEFAULT_VIEW_MODE, ViewMode, ViewSettingsMap


@dataclass
class InteractionContext:
    selected_node_id: str | None = None
    highlighted_node_ids: list[str] = field(default_factory=list)
    zoom_state: ZoomState = ZoomState.OVERVIEW
    auto_play: bool = True
    view_mode: ViewMode = DEFAULT_VIEW_MODE
    view_settings: ViewSettingsMap = field(default_factory=ViewSettingsMap)

    def select_node(self, graph: GraphData, node_id: str | None) -> None:
        """Toggle selection: re-clicking the selected node clears it."""
        if node_id is None or node_id == self.selected_node_id:
            self.selected_node_id = None
            self.highlighted_node_ids = []
            return
        self.selected_node_id = node_id
        self.highlighted_node_ids = neighbor_ids(graph, node_id)

    def apply_server_state(self, state: SessionState) -> None:
        self.selected_node_id = state.selected_node_id
        self.highlighted_node_ids = list(state.highlighted_node_ids)
        self.zoom_state = state.zoom_state
        self.auto_play = state.auto_play
        self.view_mode = state.view_mode
        self.view_settings = self.view_settings.merge(state.view_settings.to_dict())

    def clear(self) -> None:
        self.selected_node_id = None
        self.highlighted_node_ids = []
        self.zoom_state = ZoomState.OVERVIEW
        self.auto_play = True

    def to_patch(self) -> SessionPatch:
        return SessionPatch(
            selected_node_id=self.selected_node_id or "",
            highlighted_node_ids=tuple(self.highlighted_node_ids),
            zoom_state=self.zoom_state,
            auto_play=self.auto_play,
            view_mode=self.view_mode,
        )
