"""Force-Directed Layout - Iterative spring/charge simulation with pinning.

Forces per tick, in order:
- Link springs pulling connected nodes toward ``link_distance``
- Many-body charge between every pair (negative strength repels)
- Centering shift toward the canvas center
- Collision avoidance sized by node radius

Alpha starts at 1 and cools geometrically, so ``settle()`` converges after a
fixed number of ticks. Dragging a node pins it and reheats the simulation for
a partial run instead of starting over.
"""

import math
import random
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from src.graph.types import GraphEdge, WeightedNode
from src.graph.weights import interpolate_size
from src.session.view_settings import ForceSettings

from .base import DEFAULT_CANVAS, LayoutItem, LayoutResult

logger = structlog.get_logger()

COLLIDE_PADDING = 4.0
SETTLE_TICKS = 300
REHEAT_ALPHA = 0.3
REHEAT_TICKS = 30
ALPHA_MIN = 0.001
VELOCITY_DECAY = 0.4
# Tiny random offset used to separate coincident nodes
JIGGLE_SCALE = 1e-6


@dataclass
class SimNode:
    """Mutable simulation state for one node."""

    id: str
    weight: int
    radius: float
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None


@dataclass
class SimLink:
    source: SimNode
    target: SimNode
    type: str | None = None


class ForceSimulation:
    """Force simulation over a weighted node set.

    The random source is seedable. With ``seed=None`` initial placement is
    unseeded, matching the historical behavior; a fixed seed makes every run
    reproducible.
    """

    def __init__(
        self,
        weighted: list[WeightedNode],
        edges: Iterable[GraphEdge],
        settings: ForceSettings | None = None,
        *,
        seed: int | None = None,
        canvas_size: float = DEFAULT_CANVAS,
    ):
        self.settings = settings or ForceSettings()
        self.center = canvas_size / 2
        self._rng = random.Random(seed)

        s = self.settings
        top = max((n.weight for n in weighted), default=0)
        # Original radius scale treats an all-zero graph as max weight 1
        top = max(top, 1)

        self.nodes: list[SimNode] = [
            SimNode(
                id=n.id,
                weight=n.weight,
                radius=interpolate_size(n.weight, top, s.min_radius, s.max_radius),
            )
            for n in weighted
        ]
        self._by_id = {n.id: n for n in self.nodes}

        self.links: list[SimLink] = [
            SimLink(self._by_id[e.source], self._by_id[e.target], e.type)
            for e in edges
            if e.source in self._by_id and e.target in self._by_id and e.source != e.target
        ]
        self._link_count: dict[str, int] = {n.id: 0 for n in self.nodes}
        for link in self.links:
            self._link_count[link.source.id] += 1
            self._link_count[link.target.id] += 1

        self.alpha = 1.0
        self.alpha_target = 0.0
        self.alpha_decay = 1 - ALPHA_MIN ** (1 / SETTLE_TICKS)

        self._place_initial()

    def _place_initial(self) -> None:
        spread = max(10.0, math.sqrt(len(self.nodes)) * self.settings.link_distance / 2)
        for node in self.nodes:
            angle = self._rng.uniform(0, 2 * math.pi)
            distance = spread * math.sqrt(self._rng.random())
            node.x = self.center + distance * math.cos(angle)
            node.y = self.center + distance * math.sin(angle)

    def _jiggle(self) -> float:
        return (self._rng.random() - 0.5) * JIGGLE_SCALE

    # ------------------------------------------------------------------
    # Forces
    # ------------------------------------------------------------------

    def _apply_links(self, alpha: float) -> None:
        distance = self.settings.link_distance
        for link in self.links:
            s, t = link.source, link.target
            count_s = self._link_count[s.id]
            count_t = self._link_count[t.id]
            strength = 1 / min(count_s, count_t)
            bias = count_s / (count_s + count_t)

            dx = t.x + t.vx - s.x - s.vx or self._jiggle()
            dy = t.y + t.vy - s.y - s.vy or self._jiggle()
            length = math.sqrt(dx * dx + dy * dy)
            factor = (length - distance) / length * alpha * strength
            dx *= factor
            dy *= factor
            t.vx -= dx * bias
            t.vy -= dy * bias
            s.vx += dx * (1 - bias)
            s.vy += dy * (1 - bias)

    def _apply_charge(self, alpha: float) -> None:
        strength = self.settings.charge_strength
        nodes = self.nodes
        for i, a in enumerate(nodes):
            for b in nodes[i + 1 :]:
                dx = b.x - a.x or self._jiggle()
                dy = b.y - a.y or self._jiggle()
                dist2 = dx * dx + dy * dy
                if dist2 < 1:
                    dist2 = math.sqrt(dist2)
                push = strength * alpha / dist2
                a.vx += dx * push
                a.vy += dy * push
                b.vx -= dx * push
                b.vy -= dy * push

    def _apply_center(self) -> None:
        if not self.nodes:
            return
        mean_x = sum(n.x for n in self.nodes) / len(self.nodes)
        mean_y = sum(n.y for n in self.nodes) / len(self.nodes)
        shift_x = mean_x - self.center
        shift_y = mean_y - self.center
        for node in self.nodes:
            node.x -= shift_x
            node.y -= shift_y

    def _apply_collide(self) -> None:
        nodes = self.nodes
        for i, a in enumerate(nodes):
            ra = a.radius + COLLIDE_PADDING
            for b in nodes[i + 1 :]:
                rb = b.radius + COLLIDE_PADDING
                reach = ra + rb
                dx = (a.x + a.vx) - (b.x + b.vx)
                dy = (a.y + a.vy) - (b.y + b.vy)
                dist2 = dx * dx + dy * dy
                if dist2 >= reach * reach:
                    continue
                if dx == 0:
                    dx = self._jiggle()
                    dist2 += dx * dx
                if dy == 0:
                    dy = self._jiggle()
                    dist2 += dy * dy
                dist = math.sqrt(dist2)
                overlap = (reach - dist) / dist
                dx *= overlap
                dy *= overlap
                share = (rb * rb) / (ra * ra + rb * rb)
                a.vx += dx * share
                a.vy += dy * share
                b.vx -= dx * (1 - share)
                b.vy -= dy * (1 - share)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self, iterations: int = 1) -> None:
        """Advance the simulation."""
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
            alpha = self.alpha

            self._apply_links(alpha)
            self._apply_charge(alpha)
            self._apply_center()
            self._apply_collide()

            for node in self.nodes:
                if node.fx is None:
                    node.vx *= 1 - VELOCITY_DECAY
                    node.x += node.vx
                else:
                    node.x = node.fx
                    node.vx = 0.0
                if node.fy is None:
                    node.vy *= 1 - VELOCITY_DECAY
                    node.y += node.vy
                else:
                    node.y = node.fy
                    node.vy = 0.0

    @property
    def is_hot(self) -> bool:
        return self.alpha >= ALPHA_MIN

    def step(self) -> bool:
        """One frame of a live simulation. Returns False once cooled."""
        if not self.is_hot:
            return False
        self.tick()
        return self.is_hot

    def settle(self, ticks: int = SETTLE_TICKS) -> None:
        """Run the fixed relaxation schedule."""
        self.tick(ticks)
        logger.debug("force_layout_settled", nodes=len(self.nodes), links=len(self.links), alpha=self.alpha)

    def reheat(self, alpha: float = REHEAT_ALPHA, ticks: int = REHEAT_TICKS) -> None:
        """Raise alpha and run a partial relaxation from current positions."""
        self.alpha = max(self.alpha, alpha)
        self.tick(ticks)

    # ------------------------------------------------------------------
    # Pinning
    # ------------------------------------------------------------------

    def pin(self, node_id: str, x: float | None = None, y: float | None = None) -> bool:
        """Hold a node fixed, at its current position unless x/y are given."""
        node = self._by_id.get(node_id)
        if node is None:
            return False
        node.fx = node.x if x is None else x
        node.fy = node.y if y is None else y
        node.x, node.y = node.fx, node.fy
        return True

    def drag(self, node_id: str, x: float, y: float, ticks: int = REHEAT_TICKS) -> bool:
        """Move a pinned node and reheat so its neighbors follow."""
        if not self.pin(node_id, x, y):
            return False
        self.reheat(ticks=ticks)
        return True

    def release(self, node_id: str) -> bool:
        """Drop the pin; the node rejoins the simulation on the next tick."""
        node = self._by_id.get(node_id)
        if node is None:
            return False
        node.fx = None
        node.fy = None
        return True

    def node(self, node_id: str) -> SimNode | None:
        return self._by_id.get(node_id)

    def items(self) -> list[LayoutItem]:
        return [LayoutItem(node_id=n.id, x=n.x, y=n.y, size=n.radius) for n in self.nodes]

    def result(self) -> LayoutResult:
        return LayoutResult(items=self.items())


def force_layout(
    weighted: list[WeightedNode],
    edges: Iterable[GraphEdge],
    settings: ForceSettings | None = None,
    *,
    seed: int | None = None,
    ticks: int = SETTLE_TICKS,
    canvas_size: float = DEFAULT_CANVAS,
) -> LayoutResult:
    """Build a simulation, settle it and return the positions."""
    if not weighted:
        return LayoutResult()
    sim = ForceSimulation(weighted, edges, settings, seed=seed, canvas_size=canvas_size)
    sim.settle(ticks)
    return sim.result()
