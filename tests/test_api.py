"""API tests for skymask and horizon-profile endpoints."""

from __future__ import annotations

from math import isclose, pi

import pytest

from skymask.config import SkymaskConfig


def _box_edges(half: float, height: float) -> list[list[float]]:
    corners = [(half, -half), (half, half), (-half, half), (-half, -half)]
    return [[*corners[i], height, *corners[(i + 1) % 4], height] for i in range(4)]


def _client(cfg: SkymaskConfig | None = None) -> object:
    """Create FastAPI TestClient with optional dependency guards."""
    pytest.importorskip("fastapi")
    testclient_module = pytest.importorskip("fastapi.testclient")
    from skymask.api.app import create_app

    return testclient_module.TestClient(create_app(cfg or SkymaskConfig()))


def test_skymask_endpoint_returns_intervals() -> None:
    """`POST /skymask` should return a gap-free skyline for a courtyard."""
    client = _client()

    response = client.post(
        "/skymask",
        json={"edges": _box_edges(10.0, 20.0), "x": 0.0, "y": 0.0, "eps": 1e-9},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["segment_count"] == 4
    assert isclose(body["covered_fraction"], 1.0)
    intervals = body["intervals"]
    assert intervals[0]["start"] == pytest.approx(-pi)
    assert intervals[-1]["end"] == pytest.approx(pi)
    for prev, nxt in zip(intervals, intervals[1:]):
        assert prev["end"] == nxt["start"]
    east = next(iv for iv in intervals if iv["start"] <= 0.0 < iv["end"])
    assert east["a"] == pytest.approx(2.0)
    assert east["b"] == pytest.approx(0.0, abs=1e-9)


def test_skymask_endpoint_honours_max_distance() -> None:
    """Edges beyond `max_distance_m` are left out of the sweep."""
    client = _client()
    far = [[500.0, -5.0, 30.0, 500.0, 5.0, 30.0]]

    response = client.post(
        "/skymask",
        json={"edges": _box_edges(10.0, 20.0) + far, "max_distance_m": 100.0},
    )

    assert response.status_code == 200
    assert response.json()["segment_count"] == 4


def test_skymask_endpoint_rejects_malformed_edges() -> None:
    """Rows must carry six finite coordinates."""
    client = _client()

    short_row = client.post("/skymask", json={"edges": [[0.0, 0.0, 1.0]]})
    empty = client.post("/skymask", json={"edges": []})
    negative_eps = client.post("/skymask", json={"edges": _box_edges(1.0, 1.0), "eps": -1.0})

    assert short_row.status_code == 422
    assert empty.status_code == 422
    assert negative_eps.status_code == 422


def test_horizon_profile_requires_dataset() -> None:
    """`POST /horizon-profile` should fail cleanly without a configured dataset."""
    client = _client()

    response = client.post("/horizon-profile", json={"x": 0.0, "y": 0.0})

    assert response.status_code == 422
    assert response.json()["detail"] == "building dataset is not loaded"


def test_horizon_profile_rejects_bad_bin_count() -> None:
    """Bin count is validated before any dataset lookup."""
    client = _client()

    response = client.post("/horizon-profile", json={"x": 0.0, "y": 0.0, "az_bins": 0})

    assert response.status_code == 422


def test_horizon_profile_serves_configured_dataset(monkeypatch: pytest.MonkeyPatch) -> None:
    """`POST /horizon-profile` should sweep once and reuse the cached skymask."""
    from skymask.geo import loader
    from skymask.geo.edges import EdgeDataset

    loaded: list[str] = []

    def fake_read(path: str) -> EdgeDataset:
        loaded.append(path)
        return EdgeDataset.from_edges(_box_edges(10.0, 20.0))

    monkeypatch.setattr(loader, "read_building_edges", fake_read)
    client = _client(SkymaskConfig(eps=1e-9, dataset_path="courtyard.shp"))

    first = client.post("/horizon-profile", json={"x": 0.0, "y": 0.0, "az_bins": 4})
    second = client.post("/horizon-profile", json={"x": 0.0, "y": 0.0, "az_bins": 8})

    assert loaded == ["courtyard.shp"]
    assert first.status_code == 200
    assert second.status_code == 200
    first_body, second_body = first.json(), second.json()
    assert first_body["cache_hit"] is False
    assert second_body["cache_hit"] is True
    assert second_body["build_count"] == 1
    assert first_body["az_step_deg"] == 90.0
    assert first_body["horizon_profile_deg"] == pytest.approx([63.43494882292201] * 4)
    assert len(second_body["horizon_profile_deg"]) == 8
    assert second_body["sweep"] == {"segments": 4, "processed": 4, "pruned": 0, "hits": 1}
    assert second_body["meta"]["dataset_id"] == "courtyard.shp"


def test_skymask_endpoint_reports_sweep_invariant_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """A sign change without a crossing should surface as HTTP 500 with the diagnostic."""
    from skymask.projection.line import ProjectedLine

    client = _client()
    monkeypatch.setattr(ProjectedLine, "cross_point", lambda self, other, domain: None)
    # Both walls sit on x=1; the sloped roof rises above the flat one for y > 0.
    flat = [1.0, -1.0, 1.0, 1.0, 1.0, 1.0]
    sloped = [1.0, -1.0, 0.5, 1.0, 1.0, 1.5]

    response = client.post("/skymask", json={"edges": [flat, sloped]})

    assert response.status_code == 500
    assert "do not cross" in response.json()["detail"]
