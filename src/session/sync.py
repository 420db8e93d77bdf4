"""Session Sync - Polling protocol between viewers, remotes and the store.

A poller fetches the session every ``interval`` seconds and hands the state
to ``on_state`` only when ``updated_at`` moved. There is no ordering beyond
that timestamp: concurrent writers resolve last-write-wins.
"""

import asyncio
from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

import httpx
import structlog

from src.config import API_BASE_URL, VIEWER_POLL_INTERVAL
from src.graph.types import GraphData

from .path_store import PathStore
from .state import SessionPatch, SessionState
from .store import SessionStore

logger = structlog.get_logger()


@runtime_checkable
class SessionTransport(Protocol):
    """How a client reaches the session store."""

    async def get(self, session_id: str) -> SessionState | None: ...

    async def patch(self, session_id: str, patch: SessionPatch) -> SessionState | None: ...

    async def save_path(self, session_id: str, path: Iterable[str]) -> str: ...

    async def export_path(self, path_id: str) -> str | None: ...


class StoreTransport:
    """In-process transport over a store pair. Patches auto-create sessions."""

    def __init__(self, store: SessionStore, paths: PathStore | None = None):
        self.store = store
        self.paths = paths or PathStore()

    async def get(self, session_id: str) -> SessionState | None:
        return self.store.get(session_id)

    async def patch(self, session_id: str, patch: SessionPatch) -> SessionState | None:
        self.store.ensure(session_id)
        return self.store.patch(session_id, patch)

    async def save_path(self, session_id: str, path: Iterable[str]) -> str:
        return self.paths.save(session_id, path)

    async def export_path(self, path_id: str) -> str | None:
        saved = self.paths.get(path_id)
        return saved.export_text() if saved else None


class HttpSessionTransport:
    """Transport against the HTTP API.

    Use as an async context manager. ``transport`` is passed through to
    httpx (e.g. ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpSessionTransport":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with.")
        return self._client

    async def get(self, session_id: str) -> SessionState | None:
        response = await self._require_client().get(f"/api/session/{session_id}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return SessionState.from_dict(response.json())

    async def patch(self, session_id: str, patch: SessionPatch) -> SessionState | None:
        response = await self._require_client().post(
            f"/api/session/{session_id}", json=patch.to_dict()
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return SessionState.from_dict(response.json())

    async def save_path(self, session_id: str, path: Iterable[str]) -> str:
        response = await self._require_client().post(
            "/api/paths", json={"sessionId": session_id, "path": list(path)}
        )
        response.raise_for_status()
        return response.json()["pathId"]

    async def export_path(self, path_id: str) -> str | None:
        response = await self._require_client().get(f"/api/paths/{path_id}/export")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.text

    async def fetch_graph(self) -> GraphData | None:
        """The graph served by the API, or None when it is unavailable."""
        response = await self._require_client().get("/api/bonfire/activities")
        if not response.is_success:
            return None
        return GraphData.from_dict(response.json())


class SessionPoller:
    """Polls one session and reports each new ``updated_at`` once."""

    def __init__(
        self,
        transport: SessionTransport,
        session_id: str,
        on_state: Callable[[SessionState], None],
        interval: float = VIEWER_POLL_INTERVAL,
    ):
        self.transport = transport
        self.session_id = session_id
        self.on_state = on_state
        self.interval = interval
        self.last_updated_at: int | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> bool:
        """Fetch once. Returns True if a new state was delivered.

        Transport failures are logged and dropped; the next tick retries.
        """
        try:
            state = await self.transport.get(self.session_id)
        except Exception as e:
            logger.debug("session_poll_failed", session_id=self.session_id, error=str(e))
            return False

        if state is None or state.updated_at == self.last_updated_at:
            return False
        self.last_updated_at = state.updated_at
        self.on_state(state)
        return True

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception as e:
                logger.warning(
                    "session_poll_callback_failed", session_id=self.session_id, error=repr(e)
                )
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        """Start polling immediately, then every ``interval`` seconds."""
        if self.running:
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
