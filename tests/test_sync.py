"""Tests for session sync: transports, polling, remote commands and auto-play."""

import asyncio
import json

import httpx
import pytest

from src.graph import compute_node_weights
from src.session.autoplay import AutoPlayCycler
from src.session.interaction import InteractionContext
from src.session.path_store import PathStore
from src.session.remote import RemoteController
from src.session.state import SessionPatch, SessionState, ZoomState
from src.session.store import SessionStore
from src.session.sync import HttpSessionTransport, SessionPoller, SessionTransport, StoreTransport
from src.session.view_settings import ViewMode, ViewSettingsMap


@pytest.fixture
def transport(clock):
    return StoreTransport(SessionStore(clock=clock), PathStore(clock=clock))


class TestStoreTransport:
    """Tests for the in-process transport."""

    def test_satisfies_protocol(self, transport):
        assert isinstance(transport, SessionTransport)

    def test_patch_auto_creates(self, transport):
        state = asyncio.run(transport.patch("s1", SessionPatch(selected_node_id="n1")))

        assert state.selected_node_id == "n1"
        assert state.path == ["n1"]

    def test_get_missing(self, transport):
        assert asyncio.run(transport.get("nope")) is None

    def test_save_and_export(self, transport):
        async def run():
            path_id = await transport.save_path("s1", ["n1", "n2"])
            return await transport.export_path(path_id), await transport.export_path("nope")

        text, missing = asyncio.run(run())

        assert text == "n1\nn2"
        assert missing is None


class TestSessionPoller:
    """Tests for change detection in the poller."""

    def test_delivers_each_update_once(self, transport, clock):
        received = []
        poller = SessionPoller(transport, "s1", received.append)

        async def run():
            await transport.patch("s1", SessionPatch(selected_node_id="n1"))
            first = await poller.poll_once()
            repeat = await poller.poll_once()
            clock.advance(1)
            await transport.patch("s1", SessionPatch(selected_node_id="n2"))
            changed = await poller.poll_once()
            return first, repeat, changed

        assert asyncio.run(run()) == (True, False, True)
        assert [s.selected_node_id for s in received] == ["n1", "n2"]

    def test_missing_session_delivers_nothing(self, transport):
        received = []
        poller = SessionPoller(transport, "nope", received.append)

        assert asyncio.run(poller.poll_once()) is False
        assert received == []

    def test_transport_errors_are_dropped(self):
        class Failing:
            async def get(self, session_id):
                raise httpx.ConnectError("down")

        poller = SessionPoller(Failing(), "s1", lambda state: None)

        assert asyncio.run(poller.poll_once()) is False

    def test_callback_error_keeps_polling(self, transport, clock):
        delivered = []

        def on_state(state):
            delivered.append(state.selected_node_id)
            if len(delivered) == 1:
                raise ValueError("render failed")

        async def run():
            await transport.patch("s1", SessionPatch(selected_node_id="n1"))
            poller = SessionPoller(transport, "s1", on_state, interval=0.01)
            poller.start()
            await asyncio.sleep(0.03)
            clock.advance(1)
            await transport.patch("s1", SessionPatch(selected_node_id="n2"))
            await asyncio.sleep(0.05)
            alive = poller.running
            await poller.stop()
            return alive

        assert asyncio.run(run()) is True
        assert delivered == ["n1", "n2"]

    def test_start_and_stop(self, transport):
        received = []

        async def run():
            await transport.patch("s1", SessionPatch(auto_play=False))
            poller = SessionPoller(transport, "s1", received.append, interval=0.01)
            poller.start()
            await asyncio.sleep(0.05)
            assert poller.running
            await poller.stop()
            return poller

        poller = asyncio.run(run())

        assert not poller.running
        assert len(received) == 1
        assert received[0].auto_play is False


def make_api_handler(state: dict):
    """Handler standing in for the session API."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/session/s1" and request.method == "GET":
            return httpx.Response(200, json=state)
        if path == "/api/session/s1" and request.method == "POST":
            state.update(json.loads(request.content))
            state["updatedAt"] += 1
            return httpx.Response(200, json=state)
        if path == "/api/paths":
            return httpx.Response(200, json={"pathId": "p1"})
        if path == "/api/paths/p1/export":
            return httpx.Response(200, text="n1\nn2")
        if path == "/api/bonfire/activities":
            return httpx.Response(
                200,
                json={"nodes": [{"id": "a", "label": "A", "group": "actor"}], "edges": []},
            )
        return httpx.Response(404, json=None)

    return handler


class TestHttpSessionTransport:
    """Tests for the HTTP transport against a mock API."""

    def test_requires_context_manager(self):
        with pytest.raises(RuntimeError, match="Use async with"):
            asyncio.run(HttpSessionTransport().get("s1"))

    def test_get_and_patch(self):
        state = SessionState(updated_at=1).to_dict()
        mock = httpx.MockTransport(make_api_handler(state))

        async def run():
            async with HttpSessionTransport("http://test", transport=mock) as client:
                before = await client.get("s1")
                after = await client.patch("s1", SessionPatch(zoom_state=ZoomState.DETAIL))
                missing = await client.get("other")
                return before, after, missing

        before, after, missing = asyncio.run(run())

        assert before.zoom_state == ZoomState.OVERVIEW
        assert after.zoom_state == ZoomState.DETAIL
        assert after.updated_at == 2
        assert missing is None

    def test_paths_and_graph(self):
        mock = httpx.MockTransport(make_api_handler(SessionState().to_dict()))

        async def run():
            async with HttpSessionTransport("http://test", transport=mock) as client:
                path_id = await client.save_path("s1", ["n1", "n2"])
                text = await client.export_path(path_id)
                missing = await client.export_path("nope")
                graph = await client.fetch_graph()
                return path_id, text, missing, graph

        path_id, text, missing, graph = asyncio.run(run())

        assert path_id == "p1"
        assert text == "n1\nn2"
        assert missing is None
        assert [n.id for n in graph.nodes] == ["a"]

    def test_fetch_graph_upstream_failure(self):
        mock = httpx.MockTransport(lambda request: httpx.Response(502, json={"error": "x"}))

        async def run():
            async with HttpSessionTransport("http://test", transport=mock) as client:
                return await client.fetch_graph()

        assert asyncio.run(run()) is None


class TestInteractionContext:
    """Tests for client-side selection state."""

    def test_select_highlights_neighbors(self, path_graph):
        context = InteractionContext()

        context.select_node(path_graph, "b")

        assert context.selected_node_id == "b"
        assert context.highlighted_node_ids == ["a", "c"]

    def test_reselect_clears(self, path_graph):
        context = InteractionContext()
        context.select_node(path_graph, "b")

        context.select_node(path_graph, "b")

        assert context.selected_node_id is None
        assert context.highlighted_node_ids == []

    def test_apply_server_state(self):
        context = InteractionContext()
        state = SessionState(
            selected_node_id="n1",
            highlighted_node_ids=["n2"],
            view_mode=ViewMode.FORCE,
            view_settings=ViewSettingsMap().merge({"force": {"linkDistance": 150}}),
            zoom_state=ZoomState.CLUSTER,
            auto_play=False,
        )

        context.apply_server_state(state)

        assert context.selected_node_id == "n1"
        assert context.highlighted_node_ids == ["n2"]
        assert context.view_mode == ViewMode.FORCE
        assert context.view_settings.get(ViewMode.FORCE).link_distance == 150
        assert context.auto_play is False

    def test_to_patch_without_selection_clears(self):
        patch = InteractionContext().to_patch()

        assert patch.clears_selection
        assert patch.highlighted_node_ids == ()


class TestRemoteController:
    """Tests for remote commands against the in-process store."""

    @pytest.fixture
    def remote(self, transport, path_graph):
        async def graph_source():
            return path_graph

        return RemoteController(transport, "s1", graph_source)

    def test_toggle_auto_play(self, remote, transport):
        async def run():
            off = await remote.toggle_auto_play()
            state = await transport.get("s1")
            on = await remote.toggle_auto_play()
            return off, state, on

        off, state, on = asyncio.run(run())

        assert off == "Auto-Play: OFF"
        assert state.auto_play is False
        assert on == "Auto-Play: ON"

    def test_zoom_steps_and_clamps(self, remote, transport):
        async def run():
            await transport.patch("s1", SessionPatch())
            return [
                await remote.zoom_out(),
                await remote.zoom_in(),
                await remote.zoom_in(),
                await remote.zoom_in(),
            ]

        assert asyncio.run(run()) == [
            "Zoom: overview",
            "Zoom: cluster",
            "Zoom: detail",
            "Zoom: detail",
        ]

    def test_zoom_without_session(self, remote):
        assert asyncio.run(remote.zoom_in()) == "Session not found"

    def test_next_neighbor_cycles(self, remote, transport):
        async def run():
            await transport.patch("s1", SessionPatch(selected_node_id="b"))
            first = await remote.next_neighbor()
            await transport.patch("s1", SessionPatch(selected_node_id="b"))
            second = await remote.next_neighbor()
            return first, second

        assert asyncio.run(run()) == ("Selected: a", "Selected: c")

    def test_next_neighbor_edge_cases(self, transport, path_graph):
        async def no_graph():
            return None

        async def graph_source():
            return path_graph

        async def run():
            without_selection = await RemoteController(transport, "s1", graph_source).next_neighbor()
            await transport.patch("s1", SessionPatch(selected_node_id="e"))
            isolated = await RemoteController(transport, "s1", graph_source).next_neighbor()
            unavailable = await RemoteController(transport, "s1", no_graph).next_neighbor()
            return without_selection, isolated, unavailable

        assert asyncio.run(run()) == ("No node selected", "No neighbors", "Could not load graph")

    def test_previous_node(self, remote, transport):
        async def run():
            empty = await remote.previous_node()
            await transport.patch("s1", SessionPatch(selected_node_id="a"))
            await transport.patch("s1", SessionPatch(selected_node_id="b"))
            back = await remote.previous_node()
            return empty, back, await transport.get("s1")

        empty, back, state = asyncio.run(run())

        assert empty == "No previous node"
        assert back == "Back to: a"
        assert state.selected_node_id == "a"
        assert state.path == ["a", "b", "a"]

    def test_clear_selection(self, remote, transport):
        async def run():
            await transport.patch("s1", SessionPatch(selected_node_id="a"))
            remote.neighbor_index = 3
            message = await remote.clear_selection()
            return message, await transport.get("s1")

        message, state = asyncio.run(run())

        assert message == "Selection cleared"
        assert state.selected_node_id is None
        assert remote.neighbor_index == 0

    def test_save_and_export_path(self, remote, transport):
        async def run():
            early_export = await remote.export_path()
            empty = await remote.save_path()
            await transport.patch("s1", SessionPatch(selected_node_id="a"))
            await transport.patch("s1", SessionPatch(selected_node_id="b"))
            saved = await remote.save_path()
            exported = await remote.export_path()
            return early_export, empty, saved, exported

        assert asyncio.run(run()) == ("Save a path first", "No path to save", "Path saved!", "Exported")
        assert remote.last_export == "a\nb"

    def test_run_by_name(self, remote):
        assert asyncio.run(remote.run("toggle_auto_play")) == "Auto-Play: OFF"

        with pytest.raises(ValueError, match="Unknown command"):
            asyncio.run(remote.run("self_destruct"))

    def test_poller_syncs_auto_play(self, remote, transport):
        async def run():
            await transport.patch("s1", SessionPatch(auto_play=False))
            await remote.poller().poll_once()

        asyncio.run(run())

        assert remote.auto_play is False


class TestAutoPlayCycler:
    """Tests for timed selection cycling."""

    @pytest.fixture
    def published(self):
        return []

    @pytest.fixture
    def cycler(self, path_graph, published, clock):
        async def publish(patch):
            published.append(patch)

        return AutoPlayCycler(
            InteractionContext(),
            compute_node_weights(path_graph),
            path_graph,
            publish,
            pause_seconds=10,
            clock=clock,
        )

    def test_cycles_by_weight_and_wraps(self, cycler, published):
        order = [w.id for w in cycler.weighted]

        async def run():
            return [await cycler.advance() for _ in range(len(order) + 1)]

        assert asyncio.run(run()) == order + order[:1]
        assert published[0].selected_node_id == order[0]
        assert cycler.context.highlighted_node_ids == list(published[-1].highlighted_node_ids)

    def test_stops_when_auto_play_off(self, cycler, published):
        cycler.context.auto_play = False

        assert asyncio.run(cycler.advance()) is None
        assert published == []

    def test_manual_select_pauses_and_moves_index(self, cycler, published, clock):
        async def run():
            await cycler.manual_select("c")
            paused = await cycler.advance()
            clock.advance(11)
            resumed = await cycler.advance()
            return paused, resumed

        paused, resumed = asyncio.run(run())

        index = [w.id for w in cycler.weighted].index("c")
        assert paused is None
        assert published[0].selected_node_id == "c"
        assert resumed == cycler.weighted[(index + 1) % len(cycler.weighted)].id

    def test_manual_reselect_publishes_clear(self, cycler, published):
        async def run():
            await cycler.manual_select("c")
            await cycler.manual_select("c")

        asyncio.run(run())

        assert published[-1].clears_selection
        assert cycler.context.selected_node_id is None

    def test_empty_dataset(self, cycler, path_graph):
        cycler.reset([], path_graph)

        assert asyncio.run(cycler.advance()) is None

    def test_publish_error_keeps_cycling(self, path_graph, clock):
        attempts = []

        async def publish(patch):
            attempts.append(patch.selected_node_id)
            if len(attempts) == 1:
                raise httpx.ConnectError("down")

        cycler = AutoPlayCycler(
            InteractionContext(),
            compute_node_weights(path_graph),
            path_graph,
            publish,
            cycle_interval_ms=10,
            clock=clock,
        )

        async def run():
            cycler.start()
            await asyncio.sleep(0.1)
            alive = cycler.running
            await cycler.stop()
            return alive

        assert asyncio.run(run()) is True
        assert len(attempts) > 1
