"""Session module - shared viewer/remote state, paths and sync."""

from .autoplay import AutoPlayCycler
from .interaction import InteractionContext
from .path_store import PathStore, SavedPath
from .remote import RemoteController
from .state import ZOOM_LEVELS, SessionPatch, SessionState, ZoomState
from .store import SessionStore
from .sync import HttpSessionTransport, SessionPoller, SessionTransport, StoreTransport
from .view_settings import (
    DEFAULT_VIEW_MODE,
    SETTING_DEFS,
    SETTINGS_TYPES,
    ViewMode,
    ViewSettingsMap,
    settings_defs_to_dict,
)

__all__ = [
    "DEFAULT_VIEW_MODE",
    "SETTINGS_TYPES",
    "SETTING_DEFS",
    "ZOOM_LEVELS",
    "AutoPlayCycler",
    "HttpSessionTransport",
    "InteractionContext",
    "PathStore",
    "RemoteController",
    "SavedPath",
    "SessionPatch",
    "SessionPoller",
    "SessionState",
    "SessionStore",
    "SessionTransport",
    "StoreTransport",
    "ViewMode",
    "ViewSettingsMap",
    "ZoomState",
    "settings_defs_to_dict",
]
