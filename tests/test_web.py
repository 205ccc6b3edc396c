import asyncio

from aiohttp import test_utils

from harness_layout.web import create_app


ZONES = {"engine": {"center": [1.8, 0, 0.3], "size": [0.8, 1.6, 0.6]}}


def run_with_client(scenario, app=None):
    async def runner():
        async with test_utils.TestClient(test_utils.TestServer(app or create_app())) as client:
            return await scenario(client)
    return asyncio.run(runner())


def test_health():
    async def scenario(client):
        resp = await client.get("/health")
        return resp.status, await resp.json()

    status, body = run_with_client(scenario)

    assert status == 200
    assert body["status"] == "healthy"
    assert body["service"] == "layout-service"


def test_positions_then_routes():
    async def scenario(client):
        resp = await client.post("/positions", json={
            "nodes": [{"id": "battery", "zone": "engine"}, {"id": "fuse", "zone": "engine"}],
            "coordinateSystem": {"zones": ZONES},
            "vehicleSignature": "demo",
        })
        positioned = await resp.json()
        resp2 = await client.post("/routes", json={
            "nodes": positioned["data"],
            "edges": [{"id": "w1", "from": "battery", "to": "fuse",
                       "properties": {"wireColor": "red", "wireGauge": "6mm²"}}],
            "coordinateSystem": {"zones": ZONES},
        })
        return resp.status, positioned, resp2.status, await resp2.json()

    status, positioned, route_status, routed = run_with_client(scenario)

    assert status == 200
    assert positioned["metadata"]["nodeCount"] == 2
    assert route_status == 200
    (route,) = routed["data"]
    # corners are 0.4 apart in X
    assert route["strategy"] == "spline"
    assert route["path"][0] == positioned["data"][0]["position"]
    assert route["path"][-1] == positioned["data"][1]["position"]
    assert route["color"] == "#FF0000"


def test_positions_validation_error():
    async def scenario(client):
        resp = await client.post("/positions", json={"nodes": []})
        return resp.status, await resp.json()

    status, body = run_with_client(scenario)

    assert status == 400
    assert body["error"] == "Validation failed"
    assert {d["field"] for d in body["details"]} == {"coordinateSystem", "vehicleSignature"}


def test_malformed_json_body():
    async def scenario(client):
        resp = await client.post(
            "/routes", data="{not json", headers={"Content-Type": "application/json"}
        )
        return resp.status, await resp.json()

    status, body = run_with_client(scenario)

    assert status == 400
    assert body["details"][0]["field"] == "body"


def test_undecodable_body_is_a_validation_error():
    async def scenario(client):
        resp = await client.post(
            "/positions", data=b'{"nodes": "\xff\xfe"}', headers={"Content-Type": "application/json"}
        )
        return resp.status, await resp.json()

    status, body = run_with_client(scenario)

    assert status == 400
    assert body["error"] == "Validation failed"
    assert body["details"][0]["type"] == "json_invalid"


def test_request_size_cap():
    async def scenario(client):
        resp = await client.post("/positions", json={
            "nodes": [{"id": str(i), "zone": "engine"} for i in range(4)],
            "coordinateSystem": {"zones": ZONES},
            "vehicleSignature": "demo",
        })
        return resp.status

    assert run_with_client(scenario, create_app(max_nodes=3)) == 400


def test_unknown_path_returns_json_404():
    async def scenario(client):
        resp = await client.get("/nowhere")
        return resp.status, await resp.json()

    status, body = run_with_client(scenario)

    assert status == 404
    assert body == {"error": "Not found", "path": "/nowhere", "method": "GET"}
