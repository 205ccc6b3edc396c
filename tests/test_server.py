import asyncio
import json
from pathlib import Path

import yaml

from harness_layout import config, server


TEMPLATES = Path(__file__).parent.parent / "templates"


def call(coro):
    (content,) = asyncio.run(coro)
    return content.text


def test_tools_are_listed():
    tools = asyncio.run(server.list_tools())

    assert {t.name for t in tools} == {
        "position_nodes", "route_wires", "layout_scene", "list_templates", "get_template",
    }


def test_position_nodes_tool():
    text = call(server._position_nodes({
        "nodes": [{"id": "battery", "zone": "engine"}],
        "coordinateSystem": {"zones": {"engine": {"center": [1.8, 0, 0.3], "size": [0.8, 1.6, 0.6]}}},
        "vehicleSignature": "demo",
    }))

    result = json.loads(text)
    assert result["success"] is True
    assert result["data"][0]["position"] == [1.8, 0, 0.3]


def test_route_wires_tool_reports_validation_errors():
    result = json.loads(call(server._route_wires({"nodes": []})))

    assert result["success"] is False
    assert {d["field"] for d in result["details"]} == {"edges", "coordinateSystem"}


def test_layout_scene_with_preview(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "OUTPUT_DIR", tmp_path)
    recipe = (TEMPLATES / "demo-harness.yaml").read_text(encoding="utf-8")

    result = json.loads(call(server._layout_scene({"yaml_recipe": recipe, "preview": True, "scale": 1.0})))

    assert result["status"] == "success"
    assert len(result["nodes"]) == 8
    assert len(result["routes"]) == 7
    assert result["warnings"] == []
    preview = Path(result["preview_path"])
    assert preview.parent == tmp_path
    assert preview.read_bytes().startswith(b"\x89PNG")


def test_layout_scene_bad_yaml():
    text = call(server._layout_scene({"yaml_recipe": ""}))

    assert text.startswith("Failed to parse YAML recipe")


def test_layout_scene_validation_failure():
    result = json.loads(call(server._layout_scene({"yaml_recipe": "nodes: []\n"})))

    assert result["success"] is False
    assert result["error"] == "Validation failed"


def test_templates():
    listed = json.loads(call(server._list_templates({})))
    names = {t["name"] for t in listed["templates"]}
    assert {"demo-harness", "vehicle-zones"} <= names

    text = call(server._get_template({"name": "vehicle-zones"}))
    assert "coordinateSystem" in text

    assert call(server._get_template({"name": "nope"})) == "Template not found: nope"


def test_layout_scene_from_file_as_yaml():
    text = call(server._layout_scene({
        "recipe_path": str(TEMPLATES / "demo-harness.yaml"),
        "output_format": "yaml",
    }))

    result = yaml.safe_load(text)
    assert result["status"] == "success"
    assert len(result["nodes"]) == 8


def test_layout_scene_rejects_bad_preview_scale():
    text = call(server._layout_scene({"yaml_recipe": "nodes: []\n", "preview": True, "scale": 0}))

    assert text.startswith("Invalid preview scale")
