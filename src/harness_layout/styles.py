"""
Wire style tables for harness-layout.

Maps the physical properties of a wire to the attributes the 3D front end
needs to draw it:
- wire color name -> hex color
- wire gauge (cross-section) -> tube radius
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Optional

from .models import WireEdge


@dataclass(frozen=True)
class EdgeStyle:
    """Rendering attributes for one wire."""
    color: str
    radius: float


DEFAULT_WIRE_COLOR = "#000000"
DEFAULT_WIRE_RADIUS = 0.002


# Common automotive insulation colors
WIRE_COLORS: dict[str, str] = {
    "red":    "#FF0000",
    "black":  "#000000",
    "blue":   "#0000FF",
    "green":  "#00FF00",
    "yellow": "#FFFF00",
    "white":  "#FFFFFF",
    "brown":  "#8B4513",
    "orange": "#FFA500",
}


# Keys are canonical gauge labels, see normalize_gauge()
WIRE_RADII: dict[str, float] = {
    "0.5mm2": 0.0005,
    "1mm2":   0.0008,
    "2.5mm2": 0.001,
    "4mm2":   0.0015,
    "6mm2":   0.002,
    "10mm2":  0.0025,
}


def normalize_gauge(gauge: str) -> str:
    """Reduce a gauge label to its canonical ASCII form.

    Gauge labels arrive as "2.5mm²", "2.5 mm^2", "2,5MM²" or, after a
    UTF-8/Latin-1 round trip, "2.5mmÂ²".  All of them normalize to
    "2.5mm2".
    """
    text = unicodedata.normalize("NFKC", gauge)
    text = text.replace("Â", "").replace("^2", "2").replace(",", ".")
    return "".join(text.split()).lower()


def get_wire_color(color_name: Optional[str]) -> str:
    """Hex color for a wire color name (case-insensitive), black if unknown."""
    if not color_name:
        return DEFAULT_WIRE_COLOR
    return WIRE_COLORS.get(color_name.strip().lower(), DEFAULT_WIRE_COLOR)


def get_wire_radius(gauge: Optional[str]) -> float:
    """Tube radius for a gauge label, ``DEFAULT_WIRE_RADIUS`` if unknown."""
    if not gauge:
        return DEFAULT_WIRE_RADIUS
    return WIRE_RADII.get(normalize_gauge(gauge), DEFAULT_WIRE_RADIUS)


def resolve_style(edge: WireEdge) -> EdgeStyle:
    """Resolve the color and radius for an edge from its wire properties."""
    props = edge.properties
    return EdgeStyle(
        color=get_wire_color(props.wire_color),
        radius=get_wire_radius(props.wire_gauge),
    )
