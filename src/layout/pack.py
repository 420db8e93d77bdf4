"""Hierarchical Pack Layout - Nested circle packing (root -> group -> node).

Siblings are packed with the front-chain algorithm (Wang et al., "Visualization
of large hierarchical data by circle packing") and wrapped in their minimal
enclosing circle (Welzl). Leaf radius is ``sqrt(max(weight, 1))``; the whole
tree is then scaled to fit the canvas.
"""

import math
import random
from dataclasses import dataclass, field

from src.graph.types import NodeGroup, WeightedNode
from src.session.view_settings import BubbleSettings

from .base import DEFAULT_CANVAS, LayoutItem, LayoutResult

CANVAS_MARGIN = 20.0
# Fixed seed for the enclosing-circle shuffle; keeps packing deterministic
ENCLOSE_SEED = 0


@dataclass
class PackCircle:
    """A circle in the pack hierarchy."""

    id: str
    value: float
    r: float = 0.0
    x: float = 0.0
    y: float = 0.0
    depth: int = 0
    group: NodeGroup | None = None
    children: list["PackCircle"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "value": self.value,
            "x": self.x,
            "y": self.y,
            "r": self.r,
            "depth": self.depth,
            "group": self.group.value if self.group else None,
        }


@dataclass
class PackLayout(LayoutResult):
    """Pack layout output. Leaves are the items; groups are reported separately."""

    root: PackCircle | None = None
    groups: list[PackCircle] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["root"] = self.root.to_dict() if self.root else None
        data["groups"] = [g.to_dict() for g in self.groups]
        return data


@dataclass
class _Circle:
    x: float
    y: float
    r: float


# ---------------------------------------------------------------------------
# Minimal enclosing circle
# ---------------------------------------------------------------------------


def _encloses_not(a, b) -> bool:
    dr = a.r - b.r
    dx = b.x - a.x
    dy = b.y - a.y
    return dr < 0 or dr * dr < dx * dx + dy * dy


def _encloses_weak(a, b) -> bool:
    dr = a.r - b.r + max(a.r, b.r, 1) * 1e-9
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _encloses_weak_all(a, basis) -> bool:
    return all(_encloses_weak(a, b) for b in basis)


def _enclose_basis_2(a, b) -> _Circle:
    x21 = b.x - a.x
    y21 = b.y - a.y
    r21 = b.r - a.r
    length = math.sqrt(x21 * x21 + y21 * y21)
    return _Circle(
        x=(a.x + b.x + x21 / length * r21) / 2,
        y=(a.y + b.y + y21 / length * r21) / 2,
        r=(length + a.r + b.r) / 2,
    )


def _enclose_basis_3(a, b, c) -> _Circle:
    x1, y1, r1 = a.x, a.y, a.r
    x2, y2, r2 = b.x, b.y, b.r
    x3, y3, r3 = c.x, c.y, c.r
    a2 = x1 - x2
    a3 = x1 - x3
    b2 = y1 - y2
    b3 = y1 - y3
    c2 = r2 - r1
    c3 = r3 - r1
    d1 = x1 * x1 + y1 * y1 - r1 * r1
    d2 = d1 - x2 * x2 - y2 * y2 + r2 * r2
    d3 = d1 - x3 * x3 - y3 * y3 + r3 * r3
    ab = a3 * b2 - a2 * b3
    xa = (b2 * d3 - b3 * d2) / (ab * 2) - x1
    xb = (b3 * c2 - b2 * c3) / ab
    ya = (a3 * d2 - a2 * d3) / (ab * 2) - y1
    yb = (a2 * c3 - a3 * c2) / ab
    qa = xb * xb + yb * yb - 1
    qb = 2 * (r1 + xa * xb + ya * yb)
    qc = xa * xa + ya * ya - r1 * r1
    if abs(qa) > 1e-6:
        r = -(qb + math.sqrt(qb * qb - 4 * qa * qc)) / (2 * qa)
    else:
        r = -(qc / qb)
    return _Circle(x=x1 + xa + xb * r, y=y1 + ya + yb * r, r=r)


def _enclose_basis(basis) -> _Circle:
    if len(basis) == 1:
        return _Circle(basis[0].x, basis[0].y, basis[0].r)
    if len(basis) == 2:
        return _enclose_basis_2(*basis)
    return _enclose_basis_3(*basis)


def _extend_basis(basis, p) -> list:
    if _encloses_weak_all(p, basis):
        return [p]

    for b in basis:
        if _encloses_not(p, b) and _encloses_weak_all(_enclose_basis_2(b, p), basis):
            return [b, p]

    for i in range(len(basis) - 1):
        for j in range(i + 1, len(basis)):
            bi, bj = basis[i], basis[j]
            if (
                _encloses_not(_enclose_basis_2(bi, bj), p)
                and _encloses_not(_enclose_basis_2(bi, p), bj)
                and _encloses_not(_enclose_basis_2(bj, p), bi)
                and _encloses_weak_all(_enclose_basis_3(bi, bj, p), basis)
            ):
                return [bi, bj, p]

    raise ArithmeticError("No enclosing basis found")


def enclose(circles, rng: random.Random | None = None) -> _Circle | None:
    """Smallest circle enclosing every given circle (anything with x, y, r)."""
    shuffled = list(circles)
    (rng or random.Random(ENCLOSE_SEED)).shuffle(shuffled)

    basis: list = []
    e: _Circle | None = None
    i = 0
    while i < len(shuffled):
        p = shuffled[i]
        if e is not None and _encloses_weak(e, p):
            i += 1
        else:
            basis = _extend_basis(basis, p)
            e = _enclose_basis(basis)
            i = 0
    return e


# ---------------------------------------------------------------------------
# Sibling packing (front chain)
# ---------------------------------------------------------------------------


class _ChainNode:
    __slots__ = ("circle", "next", "previous")

    def __init__(self, circle):
        self.circle = circle
        self.next: "_ChainNode | None" = None
        self.previous: "_ChainNode | None" = None


def _place(b, a, c) -> None:
    """Place circle c tangent to both a and b."""
    dx = b.x - a.x
    dy = b.y - a.y
    d2 = dx * dx + dy * dy
    if d2:
        a2 = (a.r + c.r) ** 2
        b2 = (b.r + c.r) ** 2
        if a2 > b2:
            x = (d2 + b2 - a2) / (2 * d2)
            y = math.sqrt(max(0.0, b2 / d2 - x * x))
            c.x = b.x - x * dx - y * dy
            c.y = b.y - x * dy + y * dx
        else:
            x = (d2 + a2 - b2) / (2 * d2)
            y = math.sqrt(max(0.0, a2 / d2 - x * x))
            c.x = a.x + x * dx - y * dy
            c.y = a.y + x * dy + y * dx
    else:
        c.x = a.x + c.r
        c.y = a.y


def _intersects(a, b) -> bool:
    dr = a.r + b.r - 1e-6
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _score(node: _ChainNode) -> float:
    a = node.circle
    b = node.next.circle
    ab = a.r + b.r
    dx = (a.x * b.r + b.x * a.r) / ab
    dy = (a.y * b.r + b.y * a.r) / ab
    return dx * dx + dy * dy


def pack_siblings(circles: list, rng: random.Random | None = None) -> float:
    """Pack circles around the origin without overlap.

    Mutates each circle's x/y and returns the radius of the enclosing circle,
    which is centered on the origin afterwards.
    """
    n = len(circles)
    if n == 0:
        return 0.0

    a = circles[0]
    a.x = 0.0
    a.y = 0.0
    if n == 1:
        return a.r

    b = circles[1]
    a.x = -b.r
    b.x = a.r
    b.y = 0.0
    if n == 2:
        return a.r + b.r

    c = circles[2]
    _place(b, a, c)

    na, nb, nc = _ChainNode(a), _ChainNode(b), _ChainNode(c)
    na.next = nc.previous = nb
    nb.next = na.previous = nc
    nc.next = nb.previous = na

    i = 3
    while i < n:
        circle = circles[i]
        _place(na.circle, nb.circle, circle)
        new = _ChainNode(circle)

        # Find the closest intersecting circle on the front chain, measured
        # by distance along the chain in either direction.
        j, k = nb.next, na.previous
        sj, sk = nb.circle.r, na.circle.r
        retry = False
        while True:
            if sj <= sk:
                if _intersects(j.circle, new.circle):
                    nb = j
                    na.next = nb
                    nb.previous = na
                    retry = True
                    break
                sj += j.circle.r
                j = j.next
            else:
                if _intersects(k.circle, new.circle):
                    na = k
                    na.next = nb
                    nb.previous = na
                    retry = True
                    break
                sk += k.circle.r
                k = k.previous
            if j is k.next:
                break
        if retry:
            continue

        # Insert between a and b
        new.previous = na
        new.next = nb
        na.next = new
        nb.previous = new
        nb = new

        # Next pair is the one closest to the centroid
        best = _score(na)
        cursor = new.next
        while cursor is not nb:
            candidate = _score(cursor)
            if candidate < best:
                na = cursor
                best = candidate
            cursor = cursor.next
        nb = na.next
        i += 1

    chain = [nb.circle]
    cursor = nb.next
    while cursor is not nb:
        chain.append(cursor.circle)
        cursor = cursor.next
    e = enclose(chain, rng)

    for circle in circles:
        circle.x -= e.x
        circle.y -= e.y
    return e.r


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


def build_hierarchy(weighted: list[WeightedNode]) -> PackCircle:
    """Root -> groups -> leaves. Groups and leaves are both sorted by value, largest first."""
    groups: dict[NodeGroup, list[WeightedNode]] = {}
    for node in weighted:
        groups.setdefault(node.group, []).append(node)

    children = []
    for group, nodes in groups.items():
        leaves = [
            PackCircle(id=n.id, value=max(n.weight, 1), depth=2, group=group) for n in nodes
        ]
        leaves.sort(key=lambda c: c.value, reverse=True)
        children.append(
            PackCircle(
                id=f"group-{group.value}",
                value=sum(leaf.value for leaf in leaves),
                depth=1,
                group=group,
                children=leaves,
            )
        )
    children.sort(key=lambda c: c.value, reverse=True)
    return PackCircle(id="root", value=sum(c.value for c in children), children=children)


def _pack_children(node: PackCircle, padding: float, rng: random.Random) -> None:
    for child in node.children:
        _pack_children(child, padding, rng)
    if not node.children:
        return
    for child in node.children:
        child.r += padding
    enclosing = pack_siblings(node.children, rng)
    for child in node.children:
        child.r -= padding
    node.r = enclosing + padding


def _translate(node: PackCircle, k: float, parent: PackCircle | None) -> None:
    node.r *= k
    if parent is not None:
        node.x = parent.x + k * node.x
        node.y = parent.y + k * node.y
    for child in node.children:
        _translate(child, k, node)


def pack_layout(
    weighted: list[WeightedNode],
    settings: BubbleSettings | None = None,
    *,
    canvas_size: float = DEFAULT_CANVAS,
) -> PackLayout:
    """Pack nodes into group circles inside one root circle.

    Args:
        weighted: Weighted nodes, heaviest first
        settings: Padding between sibling circles (in canvas pixels)
        canvas_size: Square canvas edge; the pack fills it minus a margin

    Returns:
        PackLayout whose items are the leaf circles (ring 2)
    """
    if not weighted:
        return PackLayout()

    s = settings or BubbleSettings()
    size = canvas_size - CANVAS_MARGIN
    rng = random.Random(ENCLOSE_SEED)

    root = build_hierarchy(weighted)
    for group in root.children:
        for leaf in group.children:
            leaf.r = math.sqrt(leaf.value)

    # Padding is specified in output pixels; pack once without it to learn
    # the scale, then again with padding converted to pack units.
    _pack_children(root, 0.0, rng)
    _pack_children(root, s.pack_padding * root.r / size, rng)

    root.x = canvas_size / 2
    root.y = canvas_size / 2
    _translate(root, size / (2 * root.r), None)

    items = [
        LayoutItem(node_id=leaf.id, x=leaf.x, y=leaf.y, size=leaf.r, ring=2)
        for group in root.children
        for leaf in group.children
    ]
    return PackLayout(items=items, root=root, groups=list(root.children))
