"""
Zone-based positioning for harness-layout.

Places every node of a wiring graph inside the box of its vehicle zone,
then relaxes pairs of nodes that ended up too close together.

Placement strategy per zone, by the number of nodes ``n`` in the zone:

  1. ``n == 1``    : the zone center
  2. ``2 <= n <= 4``: the four quarter-points of the zone footprint
  3. ``5 <= n <= 9``: a 3x3 grid
  4. ``n > 9``     : a ceil(sqrt(n)) square grid

Grid placements get a small Z and yaw jitter so stacked components do not
render as a perfectly flat sheet.  The jitter comes from a ``random.Random``
that can be seeded through ``LayoutOptions`` for reproducible layouts.

After placement an **overlap relaxation pass** pushes apart any pair of
nodes closer than ``min_distance``.  Relaxation is local: it stops after
``max_iterations`` passes even if violations remain, and it cannot separate
two nodes at exactly the same position (their direction vector is zero).

Nothing here mutates the caller's models; every result is a new
``PositionedNode``.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from .models import CoordinateSystem, PositionedNode, WireNode, Zone, distance


logger = logging.getLogger(__name__)


# --- Placement constants ---

MIN_DISTANCE = 0.05
MAX_ITERATIONS = 10

MEDIUM_GRID_SIZE = 3
MAX_CORNER_GROUP = 4
MAX_MEDIUM_GROUP = 9

# Fraction of the zone height used for grid Z jitter (total span)
Z_JITTER_FRACTION = 0.1
# Grid yaw jitter is uniform in [-YAW_JITTER, +YAW_JITTER) radians
YAW_JITTER = 0.1

ZERO_ROTATION = (0.0, 0.0, 0.0)
UNIT_SCALE = (1.0, 1.0, 1.0)


@dataclass
class LayoutOptions:
    """Options for the position operation."""
    min_distance: float = MIN_DISTANCE
    max_iterations: int = MAX_ITERATIONS
    jitter: bool = True
    seed: Optional[int] = None

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


def _place(node: WireNode, position, rotation=ZERO_ROTATION) -> PositionedNode:
    """Build a positioned copy of ``node`` keeping all caller fields."""
    data = node.payload()
    data["position"] = tuple(position)
    data["rotation"] = tuple(rotation)
    data["scale"] = UNIT_SCALE
    return PositionedNode.model_validate(data)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def corner_positions(zone: Zone) -> list[tuple[float, float, float]]:
    """The four quarter-points of a zone, at the zone's center height.

    Order: front-left, front-right, back-left, back-right.
    """
    cx, cy, cz = zone.center
    sx, sy, _ = zone.size
    return [
        (cx - sx / 4, cy - sy / 4, cz),
        (cx + sx / 4, cy - sy / 4, cz),
        (cx - sx / 4, cy + sy / 4, cz),
        (cx + sx / 4, cy + sy / 4, cz),
    ]


def position_in_corners(nodes: list[WireNode], zone: Zone) -> list[PositionedNode]:
    corners = corner_positions(zone)
    return [
        _place(node, corners[index % len(corners)])
        for index, node in enumerate(nodes)
    ]


def position_in_grid(
    nodes: list[WireNode],
    zone: Zone,
    grid_size: int,
    rng: Optional[random.Random] = None,
) -> list[PositionedNode]:
    """Lay nodes out row-major on a ``grid_size`` x ``grid_size`` grid.

    Cells are evenly spaced with a margin of one step on each side, so the
    grid never touches the zone boundary in X or Y.  Pass ``rng=None`` to
    disable jitter.
    """
    cx, cy, cz = zone.center
    sx, sy, sz = zone.size

    step_x = sx / (grid_size + 1)
    step_y = sy / (grid_size + 1)

    positioned = []
    for index, node in enumerate(nodes):
        row = index // grid_size
        col = index % grid_size

        x = cx - sx / 2 + (col + 1) * step_x
        y = cy - sy / 2 + (row + 1) * step_y
        z = cz
        yaw = 0.0
        if rng is not None:
            z = cz + (rng.random() - 0.5) * sz * Z_JITTER_FRACTION
            yaw = rng.random() * 2 * YAW_JITTER - YAW_JITTER

        positioned.append(_place(node, (x, y, z), (0.0, 0.0, yaw)))
    return positioned


def grid_size_for(count: int) -> int:
    """Grid side length for a zone holding ``count`` nodes (count > 4)."""
    if count <= MAX_MEDIUM_GROUP:
        return MEDIUM_GRID_SIZE
    return math.ceil(math.sqrt(count))


def position_nodes_in_zone(
    nodes: list[WireNode],
    zone: Zone,
    rng: Optional[random.Random] = None,
) -> list[PositionedNode]:
    """Position the nodes of one zone using the strategy for their count."""
    if not nodes:
        return []
    if len(nodes) == 1:
        return [_place(nodes[0], zone.center)]
    if len(nodes) <= MAX_CORNER_GROUP:
        return position_in_corners(nodes, zone)
    return position_in_grid(nodes, zone, grid_size_for(len(nodes)), rng)


# ---------------------------------------------------------------------------
# Overlap relaxation
# ---------------------------------------------------------------------------

def _normalize(v: list[float]) -> list[float]:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0:
        return [0.0, 0.0, 0.0]
    return [v[0] / length, v[1] / length, v[2] / length]


def resolve_overlaps(
    nodes: list[PositionedNode],
    min_distance: float = MIN_DISTANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> list[PositionedNode]:
    """Push apart pairs of nodes closer than ``min_distance``.

    Each pass visits every pair (i, j) with i < j.  A violating pair is
    moved apart along the unit vector from i to j, each node by half the
    deficit, so the pair ends exactly ``min_distance`` apart unless a later
    pair in the same pass moves one of them again.  Passes repeat until one
    makes no correction or ``max_iterations`` is reached.

    Pairs at identical positions have no direction and stay where they are.
    """
    positions = [list(node.position) for node in nodes]
    passes = 0
    corrections = 0

    for _ in range(max_iterations):
        passes += 1
        moved = False

        for i in range(len(positions)):
            for j in range(i + 1, len(positions)):
                p1 = positions[i]
                p2 = positions[j]
                gap = distance(p1, p2)
                if gap >= min_distance:
                    continue

                direction = _normalize([p2[0] - p1[0], p2[1] - p1[1], p2[2] - p1[2]])
                move = (min_distance - gap) / 2
                positions[i] = [p1[k] - direction[k] * move for k in range(3)]
                positions[j] = [p2[k] + direction[k] * move for k in range(3)]
                moved = True
                corrections += 1

        if not moved:
            break

    logger.debug(f"Overlap relaxation: {len(nodes)} nodes, {passes} passes, {corrections} corrections")

    return [
        node.model_copy(update={"position": tuple(pos)})
        for node, pos in zip(nodes, positions)
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def group_by_zone(
    nodes: list[WireNode],
    coordinate_system: CoordinateSystem,
) -> dict[str, list[WireNode]]:
    """Group nodes by zone name.

    Declared zones come first in declaration order, followed by undeclared
    zones in the order they are first referenced.  Declared zones with no
    nodes map to an empty list.
    """
    groups: dict[str, list[WireNode]] = {name: [] for name in coordinate_system.zones}
    for node in nodes:
        groups.setdefault(node.zone_name, []).append(node)
    return groups


def position_nodes(
    nodes: list[WireNode],
    coordinate_system: CoordinateSystem,
    options: Optional[LayoutOptions] = None,
    warnings: Optional[list[str]] = None,
) -> list[PositionedNode]:
    """
    Compute positions for every node whose zone is declared, then relax
    overlaps.

    Nodes referencing a zone missing from ``coordinate_system`` are left out
    of the result.  Each skipped zone is logged at WARNING level and, if a
    ``warnings`` list is given, described there so the caller can report a
    partial result.
    """
    opts = options or LayoutOptions()
    rng = opts.make_rng() if opts.jitter else None

    positioned: list[PositionedNode] = []
    for zone_name, zone_nodes in group_by_zone(nodes, coordinate_system).items():
        if not zone_nodes:
            continue

        zone = coordinate_system.get_zone(zone_name)
        if zone is None:
            message = (
                f"Unknown zone '{zone_name}': skipped {len(zone_nodes)} node(s) "
                f"({', '.join(n.id for n in zone_nodes)})"
            )
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
            continue

        positioned.extend(position_nodes_in_zone(zone_nodes, zone, rng))

    resolved = resolve_overlaps(positioned, opts.min_distance, opts.max_iterations)

    escaped = [
        node.id for node in resolved
        if not coordinate_system.zones[node.zone_name].contains(node.position)
    ]
    if escaped:
        logger.debug(f"Relaxation moved {len(escaped)} node(s) outside their zone: {', '.join(escaped)}")

    return resolved
