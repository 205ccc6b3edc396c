"""
Request/response boundary for the two layout operations.

Both operations take a decoded JSON payload (a plain dict), validate it
against the request models, run the engine and return a JSON-ready dict:

    {"success": True, "data": [...], "metadata": {...}}

Validation problems never reach the engine.  They come back as

    {"success": False, "error": "Validation failed", "details": [...]}

with one entry per violated field.  Transports that need an exception
instead can call ``raise_for_result``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from . import config
from .models import PositionRequest, RouteRequest
from .positioning import LayoutOptions, position_nodes
from .routing import route_edges


logger = logging.getLogger(__name__)


class OperationError(Exception):
    """A failed operation, carrying its response envelope and HTTP status."""

    def __init__(self, result: dict, status: int):
        super().__init__(result.get("message") or result.get("error"))
        self.result = result
        self.status = status


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def validation_failure(details: list[dict]) -> dict:
    return {
        "success": False,
        "error": "Validation failed",
        "details": details,
    }


def _validation_details(exc: ValidationError) -> list[dict]:
    return [
        {
            "field": _field_path(err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def _too_many_nodes(count: int, max_nodes: int) -> Optional[dict]:
    if count <= max_nodes:
        return None
    return validation_failure([{
        "field": "nodes",
        "message": f"at most {max_nodes} nodes are accepted per request, got {count}",
        "type": "too_long",
    }])


def _internal_failure(operation: str, exc: Exception) -> dict:
    logger.exception(f"{operation} calculation failed")
    return {
        "success": False,
        "error": f"{operation} calculation failed",
        "message": str(exc),
    }


def position_operation(
    payload: Any,
    options: Optional[LayoutOptions] = None,
    max_nodes: int = config.MAX_NODES,
) -> dict:
    """Position the nodes of a request inside their zones.

    Args:
        payload: ``{nodes, coordinateSystem, vehicleSignature, seed?}``.
        options: Layout options; a ``seed`` in the payload overrides
                 ``options.seed``.
        max_nodes: Request size cap.

    Returns:
        The response envelope.  ``metadata.warnings`` lists zones whose nodes
        were dropped because the zone is not declared.
    """
    try:
        request = PositionRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failure(_validation_details(exc))

    too_many = _too_many_nodes(len(request.nodes), max_nodes)
    if too_many:
        return too_many

    opts = options or LayoutOptions()
    if request.seed is not None:
        opts = LayoutOptions(
            min_distance=opts.min_distance,
            max_iterations=opts.max_iterations,
            jitter=opts.jitter,
            seed=request.seed,
        )

    logger.info(f"Positioning {len(request.nodes)} nodes for vehicle: {request.vehicle_signature}")

    warnings: list[str] = []
    try:
        positioned = position_nodes(
            request.nodes, request.coordinate_system, opts, warnings
        )
    except Exception as exc:
        return _internal_failure("Position", exc)

    logger.info(f"Successfully positioned {len(positioned)} nodes")

    return {
        "success": True,
        "data": [
            node.payload(mode="json")
            for node in positioned
        ],
        "metadata": {
            "vehicleSignature": request.vehicle_signature,
            "nodeCount": len(positioned),
            "zones": len(request.coordinate_system.zones),
            "timestamp": _timestamp(),
            "warnings": warnings,
        },
    }


def route_operation(payload: Any, max_nodes: int = config.MAX_NODES) -> dict:
    """Route the edges of a request between already positioned nodes.

    Args:
        payload: ``{nodes, edges, coordinateSystem}`` where ``nodes`` are the
                 ``data`` of a position response.
        max_nodes: Request size cap.

    Returns:
        The response envelope.  ``metadata.warnings`` lists edges skipped
        because an endpoint has no position.
    """
    try:
        request = RouteRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_failure(_validation_details(exc))

    too_many = _too_many_nodes(len(request.nodes), max_nodes)
    if too_many:
        return too_many

    logger.info(f"Routing {len(request.edges)} wires between {len(request.nodes)} nodes")

    warnings: list[str] = []
    try:
        routes = route_edges(
            request.nodes, request.edges, request.coordinate_system, warnings
        )
    except Exception as exc:
        return _internal_failure("Route", exc)

    logger.info(f"Successfully generated {len(routes)} wire routes")

    return {
        "success": True,
        "data": [route.model_dump(by_alias=True, mode="json") for route in routes],
        "metadata": {
            "nodeCount": len(request.nodes),
            "edgeCount": len(request.edges),
            "routeCount": len(routes),
            "timestamp": _timestamp(),
            "warnings": warnings,
        },
    }


def status_for(result: dict) -> int:
    """HTTP status code for a response envelope."""
    if result.get("success"):
        return 200
    if result.get("error") == "Validation failed":
        return 400
    return 500


def raise_for_result(result: dict) -> dict:
    """Return ``result`` if it succeeded, otherwise raise ``OperationError``."""
    if not result.get("success"):
        raise OperationError(result, status_for(result))
    return result
