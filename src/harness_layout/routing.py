"""
Wire routing for harness-layout.

Computes a 3D polyline for every wire between two positioned nodes.  The
shape of each route is picked by ``select_strategy`` from the endpoint
positions alone:

  - ``direct``: short wires (< 0.3 units) run straight
  - ``corner``: wires between different heights (|dz| > 0.2) go up to a
    single elevated corner above the higher endpoint, then down
  - ``spline``: everything else follows a gentle cubic bezier

The distance check comes first, so a short but steep wire is still direct.

Route endpoints are the node positions themselves, never snapped or
clamped, so the front end can join wire tubes to component meshes exactly.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import (
    CoordinateSystem,
    PositionedNode,
    RouteStrategy,
    WireEdge,
    WireRoute,
    distance,
)
from .styles import resolve_style


logger = logging.getLogger(__name__)


# --- Strategy thresholds ---

DIRECT_MAX_DISTANCE = 0.3
CORNER_MIN_HEIGHT_DIFF = 0.2

# Height of the corner point above the higher endpoint
CORNER_ELEVATION = 0.1

# Spline control points sit at these fractions of the straight line,
# nudged sideways and lifted above their nearer endpoint.
SPLINE_CONTROL_T1 = 0.3
SPLINE_CONTROL_T2 = 0.7
SPLINE_LATERAL_OFFSET = 0.05
SPLINE_LIFT = 0.02
SPLINE_SEGMENTS = 6

# Radial segments of the rendered wire tube
TUBE_SEGMENTS = 8
WIRE_MATERIAL = "copper"

Point = tuple[float, float, float]


def select_strategy(from_pos: Point, to_pos: Point) -> RouteStrategy:
    """Pick the route shape for a wire between two positions."""
    if distance(from_pos, to_pos) < DIRECT_MAX_DISTANCE:
        return "direct"
    if abs(from_pos[2] - to_pos[2]) > CORNER_MIN_HEIGHT_DIFF:
        return "corner"
    return "spline"


# ---------------------------------------------------------------------------
# Path generators
# ---------------------------------------------------------------------------

def direct_path(from_pos: Point, to_pos: Point) -> list[Point]:
    return [from_pos, to_pos]


def corner_path(from_pos: Point, to_pos: Point) -> list[Point]:
    """Route over a single corner above the XY midpoint.

    The corner is lifted ``CORNER_ELEVATION`` above the *higher* endpoint so
    it clears both ends.
    """
    mid = (
        (from_pos[0] + to_pos[0]) / 2,
        (from_pos[1] + to_pos[1]) / 2,
        max(from_pos[2], to_pos[2]) + CORNER_ELEVATION,
    )
    return [from_pos, mid, to_pos]


def bezier_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic bezier at ``t``."""
    u = 1 - t
    tt = t * t
    uu = u * u
    uuu = uu * u
    ttt = tt * t
    return tuple(
        uuu * p0[k] + 3 * uu * t * p1[k] + 3 * u * tt * p2[k] + ttt * p3[k]
        for k in range(3)
    )


def spline_control_points(from_pos: Point, to_pos: Point) -> tuple[Point, Point]:
    dx = to_pos[0] - from_pos[0]
    dy = to_pos[1] - from_pos[1]
    cp1 = (
        from_pos[0] + dx * SPLINE_CONTROL_T1,
        from_pos[1] + dy * SPLINE_CONTROL_T1 + SPLINE_LATERAL_OFFSET,
        from_pos[2] + SPLINE_LIFT,
    )
    cp2 = (
        from_pos[0] + dx * SPLINE_CONTROL_T2,
        from_pos[1] + dy * SPLINE_CONTROL_T2 + SPLINE_LATERAL_OFFSET,
        to_pos[2] + SPLINE_LIFT,
    )
    return cp1, cp2


def spline_path(
    from_pos: Point,
    to_pos: Point,
    segments: int = SPLINE_SEGMENTS,
) -> list[Point]:
    """Sample a cubic bezier between the endpoints.

    Interior samples are taken at ``t = i / segments`` for
    ``i = 1 .. segments - 1``; the endpoints themselves are copied in
    unchanged, giving ``segments + 1`` points.
    """
    cp1, cp2 = spline_control_points(from_pos, to_pos)
    path = [from_pos]
    for i in range(1, segments):
        path.append(bezier_point(from_pos, cp1, cp2, to_pos, i / segments))
    path.append(to_pos)
    return path


PATH_GENERATORS = {
    "direct": direct_path,
    "corner": corner_path,
    "spline": spline_path,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_route(edge: WireEdge, from_pos: Point, to_pos: Point) -> WireRoute:
    """Compute the route and style for a single edge."""
    strategy = select_strategy(from_pos, to_pos)
    generate = PATH_GENERATORS.get(strategy, direct_path)
    style = resolve_style(edge)

    return WireRoute(
        edge_id=edge.id,
        path=generate(tuple(from_pos), tuple(to_pos)),
        color=style.color,
        radius=style.radius,
        segments=TUBE_SEGMENTS,
        material=WIRE_MATERIAL,
        strategy=strategy,
    )


def route_edges(
    nodes: list[PositionedNode],
    edges: list[WireEdge],
    coordinate_system: Optional[CoordinateSystem] = None,
    warnings: Optional[list[str]] = None,
) -> list[WireRoute]:
    """
    Route every edge whose endpoints are both positioned.

    Edges referencing an unknown node id produce no route; each one is
    logged at WARNING level and described in ``warnings`` if given.

    ``coordinate_system`` is accepted so callers can pass the same request
    they positioned with; route shapes depend only on endpoint positions.
    """
    positions: dict[str, Point] = {node.id: node.position for node in nodes}

    routes: list[WireRoute] = []
    for edge in edges:
        from_pos = positions.get(edge.source)
        to_pos = positions.get(edge.target)

        if from_pos is None or to_pos is None:
            message = f"Missing position for edge {edge.id}: {edge.source} -> {edge.target}"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
            continue

        routes.append(build_route(edge, from_pos, to_pos))

    return routes
