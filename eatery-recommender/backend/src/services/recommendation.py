from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from config import Configuration
from models import BoundingArea, ScoredVenue, UserLocation, UserProfile
from services.bbox_builder import area_around
from services.overpass import VenueSupplier
from services.profile_store import ProfileStore
from services.ranking import rank_venues


@dataclass
class RecommendationResult:
    profile: UserProfile
    location: UserLocation
    venues: List[ScoredVenue]


def resolve_area(cfg: Configuration, location: UserLocation) -> BoundingArea:
    if cfg.search_radius_km:
        return area_around(location, cfg.search_radius_km)
    return cfg.search_area()


def recommend(
    store: ProfileStore,
    supplier: VenueSupplier,
    cfg: Configuration,
    *,
    location: Optional[UserLocation] = None,
    top_n: Optional[int] = None,
) -> RecommendationResult:
    """Rank nearby venues for the most recently submitted profile.

    ``ProfileNotFound`` and ``VenueDataUnavailable`` propagate unchanged.
    """
    profile = store.latest()
    loc = location or cfg.default_location()
    area = resolve_area(cfg, loc)
    venues = supplier.fetch(area)
    limit = cfg.top_n if top_n is None else top_n
    ranked = rank_venues(profile, loc, venues, limit, fallback_size=cfg.fallback_size)
    logger.info(
        "recommendation lat={:.4f} lon={:.4f} fetched={} returned={}",
        loc.lat,
        loc.lon,
        len(venues),
        len(ranked),
    )
    return RecommendationResult(profile=profile, location=loc, venues=ranked)
