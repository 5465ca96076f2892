"""Test configuration and fixtures."""

import httpx
import pytest

API_BASE_URL = "https://api.test.carrismetropolitana.pt"


@pytest.fixture
def sample_line_data():
    """Sample line payload as returned by /lines/{id}."""
    return {
        "id": "3001",
        "short_name": "3001",
        "long_name": "Almada (Cristo Rei) - Cacilhas (Terminal)",
        "color": "#C61D23",
        "text_color": "#FFFFFF",
        "municipalities": ["1503"],
        "localities": ["Almada", "Cacilhas"],
        "patterns": ["3001_0_1", "3001_0_2"],
        "routes": ["3001_0"],
        "facilities": [],
    }


@pytest.fixture
def sample_patterns_data():
    """Sample pattern payloads keyed by pattern id."""
    return {
        "3001_0_1": {
            "id": "3001_0_1",
            "headsign": "Cristo Rei - Cacilhas",
            "route_id": "3001_0",
            "shape_id": "p2_3001_0_1",
            "direction": 0,
        },
        "3001_0_2": {
            "id": "3001_0_2",
            "headsign": "Cacilhas - Cristo Rei",
            "route_id": "3001_0",
            "shape_id": "p2_3001_0_2",
            "direction": 1,
        },
    }


@pytest.fixture
def sample_route_data():
    """Sample route payload as returned by /routes/{id}."""
    return {
        "id": "3001_0",
        "short_name": "3001",
        "long_name": "Almada (Cristo Rei) - Cacilhas (Terminal)",
    }


@pytest.fixture
def sample_shapes_data():
    """Sample shape payloads keyed by shape id."""
    return {
        "p2_3001_0_1": {
            "shape_id": "p2_3001_0_1",
            "geojson": {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-9.171, 38.6787], [-9.16, 38.68], [-9.1466, 38.6882]],
                },
                "properties": {},
            },
        },
        "p2_3001_0_2": {
            "shape_id": "p2_3001_0_2",
            "geojson": {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[-9.1466, 38.6882], [-9.171, 38.6787]],
                },
                "properties": {},
            },
        },
    }


@pytest.fixture
def api_payloads(
    sample_line_data, sample_patterns_data, sample_route_data, sample_shapes_data
):
    """Path → JSON payload map of a small fake API."""
    payloads = {"/lines/3001": sample_line_data, "/routes/3001_0": sample_route_data}
    for pattern_id, pattern in sample_patterns_data.items():
        payloads[f"/patterns/{pattern_id}"] = pattern
    for shape_id, shape in sample_shapes_data.items():
        payloads[f"/shapes/{shape_id}"] = shape
    return payloads


@pytest.fixture
def make_client():
    """Build an AsyncClient answering from a payload map (404 otherwise)."""

    def _make_client(payloads, handler=None):
        def default_handler(request: httpx.Request) -> httpx.Response:
            payload = payloads.get(request.url.path)
            if payload is None:
                return httpx.Response(404, json={"error": "Not found"})
            return httpx.Response(200, json=payload)

        return httpx.AsyncClient(
            base_url=API_BASE_URL,
            transport=httpx.MockTransport(handler or default_handler),
        )

    return _make_client
