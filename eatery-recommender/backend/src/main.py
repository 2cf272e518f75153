from __future__ import annotations

from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel

from config import Configuration
from models import ScoredVenue, UserLocation
from services.overpass import OverpassClient, VenueDataUnavailable, VenueSupplier
from services.profile_store import ProfileNotFound, ProfileStore, SqlProfileStore
from services.recommendation import recommend, resolve_area
from services.suggestions import suggestion_payload


class ScoreDetailPayload(BaseModel):
    distanceScore: float
    preferenceScore: float


class VenuePayload(BaseModel):
    id: Optional[str] = None
    name: str
    category: Optional[str] = None
    cuisine: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None
    tags: Dict[str, str] = {}


class ScoredVenuePayload(VenuePayload):
    distanceKm: float
    score: float
    scoreDetail: ScoreDetailPayload


class LocationPayload(BaseModel):
    lat: float
    lon: float


class RecommendResponse(BaseModel):
    profileUsed: Dict[str, Any]
    location: LocationPayload
    restaurants: List[ScoredVenuePayload]


class VenueListResponse(BaseModel):
    count: int
    restaurants: List[VenuePayload]


class SuggestionResponse(BaseModel):
    profileUsed: Dict[str, Any]
    outsideRecommendations: List[str]


def _to_payload(item: ScoredVenue) -> ScoredVenuePayload:
    return ScoredVenuePayload(**item.to_dict())


def create_app(
    store: Optional[ProfileStore] = None,
    supplier: Optional[VenueSupplier] = None,
    cfg: Optional[Configuration] = None,
) -> FastAPI:
    """Build the API; collaborators left as None are created from env on first use."""
    app = FastAPI(title="Eatery Recommender")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.cfg = cfg
    app.state.store = store
    app.state.supplier = supplier

    def get_cfg() -> Configuration:
        if app.state.cfg is None:
            app.state.cfg = Configuration.from_env()
        return app.state.cfg

    def get_store() -> ProfileStore:
        if app.state.store is None:
            app.state.store = SqlProfileStore(get_cfg().database_url)
        return app.state.store

    def get_supplier() -> VenueSupplier:
        if app.state.supplier is None:
            app.state.supplier = OverpassClient(get_cfg())
        return app.state.supplier

    @app.get("/healthz")
    def healthz() -> dict:
        logger.info("cfg: {}", get_cfg().log_summary())
        return {"status": "ok"}

    @app.post("/submit-survey")
    async def submit_survey(request: Request) -> dict:
        try:
            profile = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid profile")
        if not isinstance(profile, dict):
            raise HTTPException(status_code=400, detail="invalid profile")

        try:
            profile_id = get_store().save(profile)
        except Exception as exc:
            logger.exception("save survey failed: {}", exc)
            raise HTTPException(status_code=500, detail="save failed")

        logger.info("survey saved id={}", profile_id)
        return {"success": True}

    @app.get("/recommend/outside", response_model=SuggestionResponse)
    def recommend_outside() -> SuggestionResponse:
        try:
            profile = get_store().latest()
        except ProfileNotFound:
            raise HTTPException(status_code=404, detail="no user profile found")
        except Exception as exc:
            logger.exception("recommend failed: {}", exc)
            raise HTTPException(status_code=500, detail="recommend failed")

        logger.debug("profile used for suggestions: {}", profile.raw)
        return SuggestionResponse(**suggestion_payload(profile))

    @app.get("/osm/restaurants", response_model=VenueListResponse)
    def osm_restaurants(
        lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
        lon: Optional[float] = Query(None, ge=-180.0, le=180.0),
    ) -> VenueListResponse:
        cfg = get_cfg()
        try:
            area = resolve_area(cfg, _resolve_location(cfg, lat, lon))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

        try:
            venues = get_supplier().fetch(area)
        except VenueDataUnavailable as exc:
            logger.error("OSM fetch failed: {}", exc)
            raise HTTPException(status_code=502, detail="venue data unavailable")

        return VenueListResponse(
            count=len(venues),
            restaurants=[VenuePayload(**v.to_dict()) for v in venues],
        )

    @app.get("/recommend/outside/osm", response_model=RecommendResponse)
    def recommend_outside_osm(
        lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
        lon: Optional[float] = Query(None, ge=-180.0, le=180.0),
        top_n: Optional[int] = Query(None, ge=1, le=50),
    ) -> RecommendResponse:
        cfg = get_cfg()
        try:
            location = _resolve_location(cfg, lat, lon)
            resolve_area(cfg, location)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))

        try:
            result = recommend(get_store(), get_supplier(), cfg, location=location, top_n=top_n)
        except ProfileNotFound:
            raise HTTPException(status_code=404, detail="no user profile")
        except VenueDataUnavailable as exc:
            logger.error("OSM recommend failed: {}", exc)
            raise HTTPException(status_code=502, detail="venue data unavailable")
        except Exception as exc:
            logger.exception("OSM recommend failed: {}", exc)
            raise HTTPException(status_code=500, detail="recommend failed")

        return RecommendResponse(
            profileUsed=result.profile.raw,
            location=LocationPayload(lat=result.location.lat, lon=result.location.lon),
            restaurants=[_to_payload(v) for v in result.venues],
        )

    @app.get("/debug/users")
    def debug_users() -> list:
        try:
            rows = get_store().recent(5)
        except Exception as exc:
            logger.exception("query failed: {}", exc)
            raise HTTPException(status_code=500, detail="query failed")
        return [r.to_dict() for r in rows]

    return app


def _resolve_location(cfg: Configuration, lat: Optional[float], lon: Optional[float]) -> UserLocation:
    if lat is None and lon is None:
        return cfg.default_location()
    if lat is None or lon is None:
        raise ValueError("lat and lon must be provided together")
    return UserLocation(lat=lat, lon=lon)


load_dotenv()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=3000, reload=True)
