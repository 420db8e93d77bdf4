"""FastAPI application for the graph views and session sync."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..config import FORCE_SEED, FORCE_TICKS, bonfires_configured
from ..graph import parse_group_filter
from ..ingestion import GraphRepository, UpstreamGraphError
from ..layout import LayoutContext, compute_layout
from ..session import PathStore, SessionPatch, SessionStore, ViewMode, settings_defs_to_dict

logger = structlog.get_logger()

# Global instances
session_store: SessionStore | None = None
path_store: PathStore | None = None
graph_repo: GraphRepository | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global session_store, path_store, graph_repo

    logger.info("starting_application", graph_source="bonfires" if bonfires_configured() else "mock")

    session_store = SessionStore()
    path_store = PathStore()
    graph_repo = GraphRepository()

    yield

    logger.info("application_shutdown", sessions=len(session_store), paths=len(path_store))


app = FastAPI(
    title="Bonfire Graph Views API",
    description="Graph layouts and viewer/remote session sync",
    version="0.1.0",
    lifespan=lifespan,
)


# Request/Response models

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionPatchRequest(CamelModel):
    """Partial session update. Omitted fields are left unchanged."""
    selected_node_id: str | None = Field(
        default=None, description="Node to select; empty string or null clears"
    )
    highlighted_node_ids: list[str] | None = None
    view_mode: str | None = None
    view_settings: dict[str, dict[str, Any]] | None = None
    zoom_state: str | None = None
    auto_play: bool | None = None


class SavePathRequest(CamelModel):
    session_id: str = Field(..., min_length=1)
    path: list[str]


class SavePathResponse(CamelModel):
    path_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    sessions_count: int
    paths_count: int
    graph_source: str


# Endpoints

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        sessions_count=len(session_store),
        paths_count=len(path_store),
        graph_source="bonfires" if bonfires_configured() else "mock",
    )


@app.get("/api/session/{session_id}")
async def get_session(session_id: str):
    """Current state of a session; 404 with a null body when unknown."""
    state = session_store.get(session_id)
    if state is None:
        return JSONResponse(content=None, status_code=404)
    return state.to_dict()


@app.post("/api/session/{session_id}")
async def patch_session(session_id: str, request: SessionPatchRequest):
    """Patch a session, creating it on first write."""
    try:
        patch = SessionPatch.from_dict(request.model_dump(exclude_unset=True, by_alias=True))
        session_store.ensure(session_id)
        state = session_store.patch(session_id, patch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if state is None:
        return JSONResponse(content=None, status_code=404)
    return state.to_dict()


@app.post("/api/paths", response_model=SavePathResponse, response_model_by_alias=True)
async def save_path(request: Request):
    """Snapshot a session path."""
    try:
        body = SavePathRequest.model_validate(await request.json())
    except (ValidationError, ValueError):
        return JSONResponse(content={"error": "Invalid body"}, status_code=400)

    path_id = path_store.save(body.session_id, body.path)
    return SavePathResponse(path_id=path_id)


@app.get("/api/paths/{path_id}/export")
async def export_path(path_id: str):
    """Download a saved path as text, one node id per line."""
    saved = path_store.get(path_id)
    if saved is None:
        return JSONResponse(content=None, status_code=404)
    return PlainTextResponse(
        saved.export_text(),
        headers={"Content-Disposition": f'attachment; filename="{saved.export_filename}"'},
    )


@app.get("/api/bonfire/activities")
async def get_activities():
    """The activity graph (live Bonfires data or the bundled mock)."""
    try:
        graph = await graph_repo.fetch()
    except UpstreamGraphError as e:
        logger.warning("graph_fetch_failed", error=str(e))
        return JSONResponse(content={"error": str(e)}, status_code=502)
    return graph.to_dict()


@app.get("/api/settings/definitions")
async def get_setting_definitions():
    """Slider and toggle metadata for every view's settings."""
    return settings_defs_to_dict()


@app.get("/api/layout/{view_mode}")
async def get_layout(view_mode: str, session: str | None = None, filter: str | None = None):
    """Layout items for the current graph.

    ``session`` supplies the selection and view settings; ``filter`` is a
    comma-separated list of groups to keep.
    """
    try:
        mode = ViewMode(view_mode)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=f"Unknown view mode: {view_mode}") from e

    try:
        group_filter = parse_group_filter(filter)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        graph = await graph_repo.fetch()
    except UpstreamGraphError as e:
        return JSONResponse(content={"error": str(e)}, status_code=502)

    context = LayoutContext(
        group_filter=group_filter,
        force_seed=FORCE_SEED,
        force_ticks=FORCE_TICKS,
    )
    if session:
        state = session_store.get(session)
        if state is None:
            raise HTTPException(status_code=404, detail=f"Session {session} not found")
        context.selected_node_id = state.selected_node_id
        context.view_settings = state.view_settings

    result = compute_layout(mode, graph, context)
    return {"viewMode": mode.value, **result.to_dict()}
