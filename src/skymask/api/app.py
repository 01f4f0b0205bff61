"""FastAPI app exposing skymask and horizon-profile endpoints."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from skymask.config import SkymaskConfig, config_from_env
from skymask.contracts import covered_fraction, skyline_intervals
from skymask.envelope.sweep import EnvelopeBuilder, EnvelopeInvariantError
from skymask.geo.edges import EdgeDataset
from skymask.index.spatial import EdgeIndex
from skymask.orchestrate.observer import candidate_segments
from skymask.view.horizon import SkymaskHorizonModel, sample_horizon_deg

logger = logging.getLogger(__name__)


class SkymaskRequest(BaseModel):
    """Request schema for a skymask over inline building edges."""

    edges: list[list[float]] = Field(min_length=1)
    x: float = 0.0
    y: float = 0.0
    eps: float | None = Field(default=None, ge=0.0)
    max_distance_m: float | None = Field(default=None, gt=0.0)

    @field_validator("edges")
    @classmethod
    def validate_edges(cls, edges: list[list[float]]) -> list[list[float]]:
        """Require `[x1, y1, z1, x2, y2, z2]` rows."""
        for row in edges:
            if len(row) != 6:
                raise ValueError("each edge must hold six coordinates: x1, y1, z1, x2, y2, z2")
        return edges


class IntervalResponse(BaseModel):
    """One skyline interval: azimuth range and dominant line coefficients."""

    start: float
    end: float
    a: float
    b: float


class SkymaskResponse(BaseModel):
    """Response schema for a computed skymask."""

    intervals: list[IntervalResponse]
    covered_fraction: float
    segment_count: int


class HorizonProfileRequest(BaseModel):
    """Request schema for a binned horizon profile against the served dataset."""

    x: float
    y: float
    az_bins: int = Field(default=72, ge=1, le=3600)


class HorizonProfileResponse(BaseModel):
    """Binned horizon profile in degrees, compass azimuths over [0, 360)."""

    az_step_deg: float
    horizon_profile_deg: list[float]
    meta: dict[str, object]
    cache_hit: bool
    build_count: int
    sweep: dict[str, int]


def _build_horizon_model(cfg: SkymaskConfig) -> SkymaskHorizonModel | None:
    """Load the configured building dataset, if any."""
    if not cfg.dataset_path:
        return None
    from skymask.geo.loader import read_building_edges

    dataset = read_building_edges(cfg.dataset_path)
    return SkymaskHorizonModel(dataset, EdgeIndex(dataset), cfg, dataset_id=cfg.dataset_path)


def create_app(cfg: SkymaskConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI app."""
    app = FastAPI(title="Skymask API", version="0.1.0")

    cfg = cfg or config_from_env()
    horizon_model = _build_horizon_model(cfg)

    app.state.config = cfg
    app.state.horizon_model = horizon_model

    @app.post("/skymask", response_model=SkymaskResponse)
    def post_skymask(payload: SkymaskRequest) -> SkymaskResponse:
        """Compute the skymask of inline edges around observer `(x, y)`."""
        eps = cfg.eps if payload.eps is None else payload.eps
        max_distance = cfg.max_distance_m if payload.max_distance_m is None else payload.max_distance_m
        try:
            dataset = EdgeDataset.from_edges(payload.edges)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        segments = candidate_segments(dataset, EdgeIndex(dataset), (payload.x, payload.y), max_distance)
        try:
            rmap = EnvelopeBuilder(eps).build(segments)
        except EnvelopeInvariantError as exc:
            logger.error("skymask sweep aborted: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        return SkymaskResponse(
            intervals=[IntervalResponse(**iv.to_dict()) for iv in skyline_intervals(rmap)],
            covered_fraction=covered_fraction(rmap),
            segment_count=len(segments),
        )

    @app.post("/horizon-profile", response_model=HorizonProfileResponse)
    def post_horizon_profile(payload: HorizonProfileRequest) -> HorizonProfileResponse:
        """Return the binned horizon profile of the served dataset at `(x, y)`."""
        if horizon_model is None:
            raise HTTPException(status_code=422, detail="building dataset is not loaded")
        try:
            entry = horizon_model.entry_at(payload.x, payload.y)
        except EnvelopeInvariantError as exc:
            logger.error("skymask sweep aborted: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        return HorizonProfileResponse(
            az_step_deg=360.0 / payload.az_bins,
            horizon_profile_deg=sample_horizon_deg(entry.skymask, payload.az_bins),
            meta=horizon_model.meta(),
            cache_hit=horizon_model.last_cache_hit,
            build_count=horizon_model.store.build_count,
            sweep=entry.stats(),
        )

    return app


app = create_app()
