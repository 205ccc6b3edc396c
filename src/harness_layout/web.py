"""
Layout Service - HTTP interface for harness-layout

A small aiohttp server exposing the position and route operations to the
pipeline that turns wiring documentation into a 3D scene.

Endpoints:
    GET  /health     - liveness probe
    POST /positions  - position nodes inside their zones
    POST /routes     - route wires between positioned nodes

Usage:
    harness-layout-web [--host 0.0.0.0] [--port 3003]
"""

import argparse
import asyncio
import logging
from datetime import datetime, timezone

from aiohttp import web

from . import config
from .operations import position_operation, route_operation, status_for


logger = logging.getLogger(__name__)

MAX_NODES_KEY = web.AppKey("max_nodes", int)


async def _read_payload(request):
    """Decode the JSON body, or return an error response."""
    try:
        return await request.json(), None
    except (ValueError, LookupError) as e:
        return None, web.json_response({
            "success": False,
            "error": "Validation failed",
            "details": [{"field": "body", "message": f"Invalid JSON: {e}", "type": "json_invalid"}],
        }, status=400)


async def handle_health(request):
    """Liveness probe."""
    return web.json_response({
        "status": "healthy",
        "service": config.SERVICE_NAME,
        "version": config.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


async def handle_positions(request):
    """Calculate 3D positions for nodes."""
    payload, error = await _read_payload(request)
    if error is not None:
        return error

    result = position_operation(payload, max_nodes=request.app[MAX_NODES_KEY])
    return web.json_response(result, status=status_for(result))


async def handle_routes(request):
    """Calculate wire routes between positioned nodes."""
    payload, error = await _read_payload(request)
    if error is not None:
        return error

    result = route_operation(payload, max_nodes=request.app[MAX_NODES_KEY])
    return web.json_response(result, status=status_for(result))


@web.middleware
async def error_middleware(request, handler):
    """JSON bodies for unknown routes and unhandled errors."""
    try:
        return await handler(request)
    except web.HTTPNotFound:
        return web.json_response({
            "error": "Not found",
            "path": request.path,
            "method": request.method,
        }, status=404)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("Unhandled error")
        return web.json_response({
            "error": "Internal server error",
            "message": "Something went wrong",
        }, status=500)


def create_app(max_nodes: int = config.MAX_NODES):
    """Create the aiohttp application."""
    app = web.Application(
        middlewares=[error_middleware],
        client_max_size=10 * 1024 * 1024,
    )
    app[MAX_NODES_KEY] = max_nodes

    app.router.add_get('/health', handle_health)
    app.router.add_post('/positions', handle_positions)
    app.router.add_post('/routes', handle_routes)

    return app


async def main(host: str = config.HOST, port: int = config.PORT):
    """Run the web server."""
    app = create_app()

    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Layout service running on port {port}")
    logger.info(f"Health check: http://localhost:{port}/health")

    # Keep running
    while True:
        await asyncio.sleep(3600)


def run():
    """Console entry point."""
    parser = argparse.ArgumentParser(description='Harness Layout Service')
    parser.add_argument('--host', default=config.HOST, help='Host to bind to')
    parser.add_argument('--port', type=int, default=config.PORT, help='Port to listen on')
    args = parser.parse_args()

    config.configure_logging()

    try:
        asyncio.run(main(host=args.host, port=args.port))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == '__main__':
    run()
