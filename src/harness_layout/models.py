"""
Data models for harness-layout: the wiring scene vocabulary.

A layout request describes a vehicle wiring harness as a flat graph placed
inside a set of named zones:

    CoordinateSystem
    └── Zone         an axis-aligned box (center + full size) in vehicle space
        └── WireNode     an electrical component assigned to a zone
    WireEdge         a wire between two nodes, with physical properties

The engine answers with two kinds of results:

    PositionedNode   a WireNode plus position, rotation (radians) and scale
    WireRoute        a 3D polyline plus rendering attributes for one wire

Wire keys are camelCase (``coordinateSystem``, ``wireGauge``, ``edgeId``)
because the payloads come from, and go back to, JavaScript producers.  The
Python attributes are snake_case; every model accepts either spelling and
dumps the wire spelling with ``model_dump(by_alias=True)``.

Nodes, edges and wire properties carry arbitrary caller metadata (labels,
part numbers, LLM enrichment) that the engine passes through untouched.
"""

from __future__ import annotations

import math
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat


DEFAULT_ZONE = "interior"

Vec3 = tuple[FiniteFloat, FiniteFloat, FiniteFloat]

RouteStrategy = Literal["direct", "corner", "spline"]


# ---------------------------------------------------------------------------
# Coordinate system
# ---------------------------------------------------------------------------

class Zone(BaseModel):
    """A named region of the vehicle, as an axis-aligned box.

    Attributes:
        center: Box center in vehicle coordinates.
        size:   Full extent along each axis (half-extent is ``size / 2``).
    """
    center: Vec3
    size: Vec3

    def contains(self, point: tuple[float, float, float]) -> bool:
        """Return True if ``point`` lies inside the closed box."""
        return all(
            c - s / 2 <= p <= c + s / 2
            for p, c, s in zip(point, self.center, self.size)
        )


class CoordinateSystem(BaseModel):
    """Zone name -> zone box.  Declaration order is preserved."""
    zones: dict[str, Zone] = Field(default_factory=dict)

    def get_zone(self, name: str) -> Optional[Zone]:
        return self.zones.get(name)


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class WireNode(BaseModel):
    """A component in the harness graph.

    Only ``id`` and ``zone`` matter to the layout engine.  Everything else
    the caller sends (``type``, ``label``, enrichment metadata) is kept as
    pydantic extra data and written back unchanged.

    Nodes without a zone are placed in the ``"interior"`` zone; see
    ``zone_name``.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    zone: Optional[str] = None

    @property
    def zone_name(self) -> str:
        """The zone this node is placed in, falling back to ``interior``."""
        return self.zone or DEFAULT_ZONE

    def payload(self, **dump_kwargs) -> dict:
        """Dump the node with all caller metadata.

        Declared fields the caller never sent (e.g. a missing ``zone``) are
        left out, so the output has the same shape as the input.
        """
        data = self.model_dump(by_alias=True, **dump_kwargs)
        for name in type(self).model_fields:
            if name not in self.model_fields_set:
                data.pop(name, None)
        return data


class PositionedNode(WireNode):
    """A node with a computed placement.

    Attributes:
        position: Location in vehicle coordinates.
        rotation: Euler angles in radians.
        scale:    Per-axis scale factor, always (1, 1, 1) from the positioner.
    """
    position: Vec3
    rotation: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)


# ---------------------------------------------------------------------------
# Edges and routes
# ---------------------------------------------------------------------------

class WireProperties(BaseModel):
    """Physical properties of a wire.

    ``wire_color`` is a color name ("red", "Black") and ``wire_gauge`` a
    cross-section label ("2.5mm²").  Other keys such as ``voltage`` are
    carried through as extra data.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    wire_color: Optional[str] = Field(default=None, alias="wireColor")
    wire_gauge: Optional[str] = Field(default=None, alias="wireGauge")


class WireEdge(BaseModel):
    """A wire between two nodes.

    The wire format uses ``from``/``to``, which are exposed in Python as
    ``source``/``target``.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    properties: WireProperties = Field(default_factory=WireProperties)


class WireRoute(BaseModel):
    """The routed geometry and rendering attributes for one wire.

    Attributes:
        edge_id:  Id of the edge this route was computed for.
        path:     Polyline from the source position to the target position.
        color:    Hex color for the wire tube.
        radius:   Tube radius in vehicle units.
        segments: Radial segment count for the tube mesh.
        material: Always "copper".
        strategy: The path generator that produced ``path``.
    """
    model_config = ConfigDict(populate_by_name=True)

    edge_id: str = Field(alias="edgeId")
    path: list[Vec3] = Field(min_length=2)
    color: str
    radius: float = Field(gt=0)
    segments: int = 8
    material: str = "copper"
    strategy: RouteStrategy = "direct"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class PositionRequest(BaseModel):
    """Input of the position operation.

    ``seed`` makes the grid jitter reproducible; omit it for an unseeded
    layout.
    """
    model_config = ConfigDict(populate_by_name=True)

    nodes: list[WireNode]
    coordinate_system: CoordinateSystem = Field(alias="coordinateSystem")
    vehicle_signature: str = Field(alias="vehicleSignature")
    seed: Optional[int] = None


class RouteRequest(BaseModel):
    """Input of the route operation."""
    model_config = ConfigDict(populate_by_name=True)

    nodes: list[PositionedNode]
    edges: list[WireEdge]
    coordinate_system: CoordinateSystem = Field(alias="coordinateSystem")


def distance(a: tuple[float, float, float], b: tuple[float, float, float]) -> float:
    """Euclidean distance between two points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)
