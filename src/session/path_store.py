"""Path Store - Immutable snapshots of a session's selection path."""

import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class SavedPath:
    path_id: str
    session_id: str
    path: tuple[str, ...]
    created_at: int  # ms since epoch

    def export_text(self) -> str:
        """One node id per line."""
        return "\n".join(self.path)

    @property
    def export_filename(self) -> str:
        return f"path-{self.path_id}.txt"

    def to_dict(self) -> dict:
        return {
            "pathId": self.path_id,
            "sessionId": self.session_id,
            "path": list(self.path),
            "createdAt": self.created_at,
        }


class PathStore:
    """Saved paths for the lifetime of the process."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._paths: dict[str, SavedPath] = {}

    def __len__(self) -> int:
        return len(self._paths)

    def save(self, session_id: str, path: Iterable[str]) -> str:
        """Copy ``path`` into a new SavedPath and return its id."""
        path_id = str(uuid.uuid4())
        saved = SavedPath(
            path_id=path_id,
            session_id=session_id,
            path=tuple(path),
            created_at=int(self._clock() * 1000),
        )
        self._paths[path_id] = saved
        logger.info("path_saved", path_id=path_id, session_id=session_id, length=len(saved.path))
        return path_id

    def get(self, path_id: str) -> SavedPath | None:
        return self._paths.get(path_id)
