"""Session State - The shared viewer/remote state and partial updates to it."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .view_settings import DEFAULT_VIEW_MODE, ViewMode, ViewSettingsMap


class ZoomState(Enum):
    """Zoom levels, ordered from widest to closest."""

    OVERVIEW = "overview"
    CLUSTER = "cluster"
    DETAIL = "detail"


ZOOM_LEVELS: list[ZoomState] = list(ZoomState)


@dataclass
class SessionState:
    """Authoritative state for one session.

    ``path`` is append-only and only grows when a patch changes the
    selection. ``updated_at`` is milliseconds since the epoch.
    """

    selected_node_id: str | None = None
    highlighted_node_ids: list[str] = field(default_factory=list)
    view_mode: ViewMode = DEFAULT_VIEW_MODE
    view_settings: ViewSettingsMap = field(default_factory=ViewSettingsMap)
    zoom_state: ZoomState = ZoomState.OVERVIEW
    auto_play: bool = True
    path: list[str] = field(default_factory=list)
    updated_at: int = 0

    def copy(self) -> "SessionState":
        return replace(
            self,
            highlighted_node_ids=list(self.highlighted_node_ids),
            path=list(self.path),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "selectedNodeId": self.selected_node_id,
            "highlightedNodeIds": list(self.highlighted_node_ids),
            "viewMode": self.view_mode.value,
            "viewSettings": self.view_settings.to_dict(),
            "zoomState": self.zoom_state.value,
            "autoPlay": self.auto_play,
            "path": list(self.path),
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionState":
        """Parse the wire shape. Missing fields take their defaults."""
        return cls(
            selected_node_id=data.get("selectedNodeId") or None,
            highlighted_node_ids=list(data.get("highlightedNodeIds") or []),
            view_mode=ViewMode(data.get("viewMode", DEFAULT_VIEW_MODE.value)),
            view_settings=ViewSettingsMap.from_dict(data.get("viewSettings") or {}),
            zoom_state=ZoomState(data.get("zoomState", ZoomState.OVERVIEW.value)),
            auto_play=bool(data.get("autoPlay", True)),
            path=list(data.get("path") or []),
            updated_at=int(data.get("updatedAt", 0)),
        )


@dataclass(frozen=True)
class SessionPatch:
    """A partial update. ``None`` means "leave unchanged".

    An empty-string ``selected_node_id`` clears the selection and its
    highlights; it is never recorded in the path.
    """

    selected_node_id: str | None = None
    highlighted_node_ids: tuple[str, ...] | None = None
    view_mode: ViewMode | None = None
    view_settings: dict[str, dict[str, Any]] | None = None
    zoom_state: ZoomState | None = None
    auto_play: bool | None = None

    @property
    def clears_selection(self) -> bool:
        return self.selected_node_id == ""

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.selected_node_id,
                self.highlighted_node_ids,
                self.view_mode,
                self.view_settings,
                self.zoom_state,
                self.auto_play,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire shape containing only the fields this patch sets."""
        data: dict[str, Any] = {}
        if self.selected_node_id is not None:
            data["selectedNodeId"] = self.selected_node_id
        if self.highlighted_node_ids is not None:
            data["highlightedNodeIds"] = list(self.highlighted_node_ids)
        if self.view_mode is not None:
            data["viewMode"] = self.view_mode.value
        if self.view_settings is not None:
            data["viewSettings"] = self.view_settings
        if self.zoom_state is not None:
            data["zoomState"] = self.zoom_state.value
        if self.auto_play is not None:
            data["autoPlay"] = self.auto_play
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionPatch":
        """Parse a wire-shaped partial.

        An explicit ``"selectedNodeId": null`` is treated as a clear.

        Raises:
            ValueError: On an unknown view mode or zoom level
        """
        selected = data.get("selectedNodeId")
        if "selectedNodeId" in data and selected is None:
            selected = ""
        highlights = data.get("highlightedNodeIds")
        view_mode = data.get("viewMode")
        zoom = data.get("zoomState")
        auto_play = data.get("autoPlay")
        return cls(
            selected_node_id=selected,
            highlighted_node_ids=tuple(highlights) if highlights is not None else None,
            view_mode=ViewMode(view_mode) if view_mode is not None else None,
            view_settings=data.get("viewSettings"),
            zoom_state=ZoomState(zoom) if zoom is not None else None,
            auto_play=bool(auto_play) if auto_play is not None else None,
        )
