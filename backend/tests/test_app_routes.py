"""Regression tests for application route registration."""
from studyflow.main import app

EXPECTED = {
    ("GET", "/health"),
    ("POST", "/auth/signup"),
    ("POST", "/auth/login"),
    ("POST", "/auth/logout"),
    ("GET", "/auth/session"),
    ("POST", "/auth/guest"),
    ("DELETE", "/auth/guest"),
    ("POST", "/routines/analyze"),
    ("GET", "/routines"),
    ("GET", "/dashboard"),
    ("POST", "/insights/motivation"),
    ("POST", "/insights/performance"),
    ("GET", "/jobs"),
    ("POST", "/jobs/run-now"),
}


def _registered() -> list[tuple[str, str]]:
    # The OpenAPI document flattens included routers on every FastAPI release.
    paths = app.openapi()["paths"]
    return [(method.upper(), path) for path, operations in paths.items() for method in operations]


def test_all_routes_registered() -> None:
    assert EXPECTED.issubset(set(_registered()))


def test_dashboard_route_registered_once() -> None:
    assert list(app.openapi()["paths"]["/dashboard"]) == ["get"]
