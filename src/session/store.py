"""Session Store - In-memory, expiring session state keyed by session id.

Sessions are created on demand and purged lazily: every create, get and
patch first drops sessions idle longer than the expiry window. Nothing is
persisted across restarts.
"""

import time
from collections.abc import Callable
from typing import Any

import structlog

from src.config import SESSION_EXPIRY_SECONDS

from .state import SessionPatch, SessionState

logger = structlog.get_logger()


class SessionStore:
    """Single-process store. Callers get copies, never the stored object.

    Mutation is expected from one execution context; concurrent patches
    resolve last-write-wins.
    """

    def __init__(
        self,
        expiry_seconds: float = SESSION_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.expiry_ms = int(expiry_seconds * 1000)
        self._clock = clock
        self._sessions: dict[str, SessionState] = {}

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def purge_expired(self) -> int:
        """Drop idle sessions. Returns how many were removed."""
        now = self._now_ms()
        expired = [
            sid for sid, state in self._sessions.items() if now - state.updated_at > self.expiry_ms
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("sessions_expired", count=len(expired))
        return len(expired)

    def create(self, session_id: str) -> SessionState:
        """Install a fresh default state, replacing any existing one."""
        self.purge_expired()
        state = SessionState(updated_at=self._now_ms())
        self._sessions[session_id] = state
        logger.info("session_created", session_id=session_id)
        return state.copy()

    def get(self, session_id: str) -> SessionState | None:
        self.purge_expired()
        state = self._sessions.get(session_id)
        return state.copy() if state else None

    def ensure(self, session_id: str) -> SessionState:
        """Get the session, creating it first if it is missing or expired."""
        state = self.get(session_id)
        if state is None:
            state = self.create(session_id)
        return state

    def patch(
        self,
        session_id: str,
        partial: SessionPatch | dict[str, Any],
    ) -> SessionState | None:
        """Apply a partial update.

        Scalars are last-write-wins and ``view_settings`` is merged two
        levels deep. When the patch changes the selection the new id is
        appended to ``path``.

        Returns:
            The updated state, or None if the session does not exist

        Raises:
            ValueError: If the patch names an unknown view, setting or level.
                The stored state is left untouched.
        """
        if isinstance(partial, dict):
            partial = SessionPatch.from_dict(partial)

        self.purge_expired()
        current = self._sessions.get(session_id)
        if current is None:
            return None

        state = current.copy()
        previous = state.selected_node_id

        if partial.view_settings is not None:
            state.view_settings = state.view_settings.merge(partial.view_settings)
        if partial.view_mode is not None:
            state.view_mode = partial.view_mode
        if partial.zoom_state is not None:
            state.zoom_state = partial.zoom_state
        if partial.auto_play is not None:
            state.auto_play = partial.auto_play
        if partial.highlighted_node_ids is not None:
            state.highlighted_node_ids = list(partial.highlighted_node_ids)

        if partial.clears_selection:
            state.selected_node_id = None
            if partial.highlighted_node_ids is None:
                state.highlighted_node_ids = []
        elif partial.selected_node_id is not None:
            state.selected_node_id = partial.selected_node_id
            if partial.selected_node_id != previous:
                state.path.append(partial.selected_node_id)

        state.updated_at = self._now_ms()
        self._sessions[session_id] = state
        logger.debug(
            "session_patched",
            session_id=session_id,
            selected_node_id=state.selected_node_id,
            path_length=len(state.path),
        )
        return state.copy()
