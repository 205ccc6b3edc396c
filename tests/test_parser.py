import json
from pathlib import Path

import pytest

from harness_layout.parser import dump_yaml, parse_file, parse_yaml


TEMPLATES = Path(__file__).parent.parent / "templates"


def test_parse_yaml_request():
    data = parse_yaml(
        """
        vehicleSignature: test
        coordinateSystem:
          zones:
            engine: {center: [1.8, 0, 0.3], size: [0.8, 1.6, 0.6]}
        nodes:
          - {id: battery, zone: engine}
        """
    )

    assert data["vehicleSignature"] == "test"
    assert data["coordinateSystem"]["zones"]["engine"]["center"] == [1.8, 0, 0.3]
    assert data["nodes"] == [{"id": "battery", "zone": "engine"}]


@pytest.mark.parametrize('text', ["", "   ", "~"])
def test_parse_yaml_rejects_empty_input(text):
    with pytest.raises(ValueError):
        parse_yaml(text)


def test_parse_yaml_rejects_non_mapping():
    with pytest.raises(ValueError) as exc:
        parse_yaml("- a\n- b\n")
    assert "mapping" in str(exc.value)


def test_parse_file_json_and_yaml(tmp_path):
    payload = {"nodes": [{"id": "a"}], "edges": []}
    json_path = tmp_path / "req.json"
    json_path.write_text(json.dumps(payload))
    yaml_path = tmp_path / "req.yaml"
    yaml_path.write_text(dump_yaml(payload))

    assert parse_file(str(json_path)) == payload
    assert parse_file(str(yaml_path)) == payload


def test_dump_yaml_keeps_order_and_unicode():
    text = dump_yaml({"wireGauge": "6mm²", "a": 1})

    assert "6mm²" in text
    assert text.index("wireGauge") < text.index("a:")


def test_demo_template_loads():
    data = parse_file(str(TEMPLATES / "demo-harness.yaml"))

    assert data["vehicleSignature"] == "demo-sedan-2024"
    assert len(data["nodes"]) == 8
    assert data["edges"][0]["properties"]["wireGauge"] == "6mm²"
