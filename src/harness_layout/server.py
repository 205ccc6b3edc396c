"""harness-layout MCP server: tools for positioning and routing wiring harness scenes."""

from __future__ import annotations

import json
import uuid

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from . import config
from .models import CoordinateSystem, PositionedNode, WireRoute
from .operations import OperationError, position_operation, raise_for_result, route_operation
from .parser import dump_yaml, parse_file, parse_yaml
from .preview import ScenePreview


server = Server("harness-layout")


def _ensure_output_dir():
    config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)


def _json_result(data: dict) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(data))]


_VEC3_SCHEMA = {
    "type": "array",
    "items": {"type": "number"},
    "minItems": 3,
    "maxItems": 3,
}

_COORDINATE_SYSTEM_SCHEMA = {
    "type": "object",
    "description": "Zone boxes keyed by zone name: {zones: {engine: {center: [x,y,z], size: [x,y,z]}}}",
    "properties": {
        "zones": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {"center": _VEC3_SCHEMA, "size": _VEC3_SCHEMA},
                "required": ["center", "size"],
            },
        },
    },
    "required": ["zones"],
}


# --- Tool definitions ---

@server.list_tools()
async def list_tools() -> list[Tool]:
    return [
        Tool(
            name="position_nodes",
            description=(
                "Compute 3D positions for wiring components inside their vehicle zones. "
                "Nodes whose zone is not declared are dropped and reported in metadata.warnings."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "nodes": {
                        "type": "array",
                        "description": "Components: {id, zone?, ...metadata}. Missing zone means 'interior'.",
                        "items": {"type": "object"},
                    },
                    "coordinateSystem": _COORDINATE_SYSTEM_SCHEMA,
                    "vehicleSignature": {"type": "string"},
                    "seed": {
                        "type": "integer",
                        "description": "Seed for the grid jitter, for reproducible layouts.",
                    },
                },
                "required": ["nodes", "coordinateSystem", "vehicleSignature"],
            },
        ),
        Tool(
            name="route_wires",
            description=(
                "Compute 3D wire routes (direct, corner or spline) between positioned nodes. "
                "Edges with an unpositioned endpoint are skipped and reported in metadata.warnings."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "nodes": {
                        "type": "array",
                        "description": "Positioned nodes from position_nodes.",
                        "items": {"type": "object"},
                    },
                    "edges": {
                        "type": "array",
                        "description": "Wires: {id, from, to, properties: {wireColor?, wireGauge?}}.",
                        "items": {"type": "object"},
                    },
                    "coordinateSystem": _COORDINATE_SYSTEM_SCHEMA,
                },
                "required": ["nodes", "edges", "coordinateSystem"],
            },
        ),
        Tool(
            name="layout_scene",
            description=(
                "Position and route a whole harness scene from a YAML recipe "
                "(vehicleSignature, coordinateSystem, nodes, edges). "
                "Optionally writes a top-down PNG preview."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "yaml_recipe": {"type": "string", "description": "YAML (or JSON) scene."},
                    "recipe_path": {
                        "type": "string",
                        "description": "Path to a .yaml, .yml or .json scene file, used instead of yaml_recipe.",
                    },
                    "output_format": {
                        "type": "string",
                        "enum": ["json", "yaml"],
                        "description": "Format of the returned scene. Default: json.",
                        "default": "json",
                    },
                    "preview": {
                        "type": "boolean",
                        "description": "Render a top-down PNG preview. Default: false.",
                        "default": False,
                    },
                    "scale": {
                        "type": "number",
                        "description": "Preview scale factor (default 2.0)",
                        "default": 2.0,
                    },
                },
            },
        ),
        Tool(
            name="list_templates",
            description="List available scene templates (coordinate systems and demo harnesses).",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="get_template",
            description="Get the YAML content of a specific template by name.",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "Template name (from list_templates output)",
                    },
                },
                "required": ["name"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    if name == "position_nodes":
        return await _position_nodes(arguments)
    elif name == "route_wires":
        return await _route_wires(arguments)
    elif name == "layout_scene":
        return await _layout_scene(arguments)
    elif name == "list_templates":
        return await _list_templates(arguments)
    elif name == "get_template":
        return await _get_template(arguments)
    else:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]


async def _position_nodes(args: dict) -> list[TextContent]:
    return _json_result(position_operation(args))


async def _route_wires(args: dict) -> list[TextContent]:
    return _json_result(route_operation(args))


async def _layout_scene(args: dict) -> list[TextContent]:
    """Position, then route, a scene given as a YAML recipe or a scene file."""
    scale = args.get("scale", 2.0)
    if not 0 < scale <= ScenePreview.MAX_SCALE:
        return [TextContent(type="text", text=f"Invalid preview scale: {scale} (must be in (0, {ScenePreview.MAX_SCALE}])")]

    try:
        if args.get("recipe_path"):
            scene = parse_file(args["recipe_path"])
        else:
            scene = parse_yaml(args.get("yaml_recipe", ""))
    except Exception as e:
        return [TextContent(type="text", text=f"Failed to parse YAML recipe: {e}")]

    try:
        positioned = raise_for_result(position_operation(scene))
        routed = raise_for_result(route_operation({
            "nodes": positioned["data"],
            "edges": scene.get("edges", []),
            "coordinateSystem": scene.get("coordinateSystem"),
        }))
    except OperationError as e:
        return _json_result(e.result)

    result = {
        "status": "success",
        "nodes": positioned["data"],
        "routes": routed["data"],
        "warnings": positioned["metadata"]["warnings"] + routed["metadata"]["warnings"],
    }

    if args.get("preview", False):
        _ensure_output_dir()
        output_path = str(config.OUTPUT_DIR / f"{uuid.uuid4().hex[:8]}.png")
        ScenePreview(scale=scale).render(
            [PositionedNode.model_validate(n) for n in positioned["data"]],
            [WireRoute.model_validate(r) for r in routed["data"]],
            CoordinateSystem.model_validate(scene["coordinateSystem"]),
            output_path=output_path,
        )
        result["preview_path"] = output_path

    if args.get("output_format") == "yaml":
        return [TextContent(type="text", text=dump_yaml(result))]
    return _json_result(result)


async def _list_templates(args: dict) -> list[TextContent]:
    """List available template files."""
    templates = []

    if config.TEMPLATES_DIR.exists():
        for f in sorted(config.TEMPLATES_DIR.glob("*.yaml")) + sorted(config.TEMPLATES_DIR.glob("*.yml")):
            templates.append({
                "name": f.stem,
                "path": str(f),
            })

    return _json_result({"templates": templates})


async def _get_template(args: dict) -> list[TextContent]:
    """Get template content by name."""
    name = args["name"]

    for ext in [".yaml", ".yml"]:
        path = config.TEMPLATES_DIR / f"{name}{ext}"
        if path.exists():
            return [TextContent(type="text", text=path.read_text(encoding="utf-8"))]

    return [TextContent(type="text", text=f"Template not found: {name}")]


def main():
    """Entry point for the MCP server."""
    import asyncio
    config.configure_logging()
    asyncio.run(_run())


async def _run():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    main()
