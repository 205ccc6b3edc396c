import pytest

from harness_layout.models import WireEdge
from harness_layout.styles import (
    DEFAULT_WIRE_RADIUS,
    EdgeStyle,
    get_wire_color,
    get_wire_radius,
    normalize_gauge,
    resolve_style,
)


def test_resolve_style_for_red_six_square_mm():
    edge = WireEdge.model_validate({
        "id": "w1", "from": "a", "to": "b",
        "properties": {"wireColor": "red", "wireGauge": "6mm²"},
    })

    assert resolve_style(edge) == EdgeStyle(color="#FF0000", radius=0.002)


def test_resolve_style_without_properties_uses_defaults():
    edge = WireEdge.model_validate({"id": "w1", "from": "a", "to": "b"})

    assert resolve_style(edge) == EdgeStyle(color="#000000", radius=DEFAULT_WIRE_RADIUS)


@pytest.mark.parametrize(
    'name, expected',
    [
        ("red", "#FF0000"),
        ("RED", "#FF0000"),
        (" Brown ", "#8B4513"),
        ("orange", "#FFA500"),
        ("purple", "#000000"),
        ("", "#000000"),
        (None, "#000000"),
    ],
)
def test_wire_color_lookup(name, expected):
    assert get_wire_color(name) == expected


@pytest.mark.parametrize(
    'gauge, expected',
    [
        ("0.5mm²", 0.0005),
        ("1mm²", 0.0008),
        ("2.5mm²", 0.001),
        ("4mm²", 0.0015),
        ("10mm²", 0.0025),
        # UTF-8 bytes decoded as Latin-1
        ("6mmÂ²", 0.002),
        ("2.5 mm^2", 0.001),
        ("2,5MM²", 0.001),
        ("1mm2", 0.0008),
        ("16mm²", DEFAULT_WIRE_RADIUS),
        (None, DEFAULT_WIRE_RADIUS),
    ],
)
def test_wire_radius_lookup(gauge, expected):
    assert get_wire_radius(gauge) == expected


def test_normalize_gauge():
    assert normalize_gauge("2.5mm²") == "2.5mm2"
    assert normalize_gauge(" 10 MMÂ² ") == "10mm2"
