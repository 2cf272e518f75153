from __future__ import annotations

from typing import List, Optional, Sequence

from loguru import logger

from models import ScoredVenue, UserLocation, UserProfile, Venue
from services.candidate_filter import FALLBACK_SIZE, select_candidates, usable_venues
from services.scoring import distance_score, preference_score
from utils import distance_km

DISTANCE_WEIGHT = 0.6
PREFERENCE_WEIGHT = 0.4


def score_venue(profile: UserProfile, location: UserLocation, venue: Venue) -> ScoredVenue:
    coord = venue.coordinate()
    if coord is None:
        raise ValueError(f"venue {venue.id!r} has no usable coordinate")
    dist_km = distance_km(location, coord)
    d_score = distance_score(dist_km)
    p_score = preference_score(profile, venue)
    total = d_score * DISTANCE_WEIGHT + p_score * PREFERENCE_WEIGHT
    return ScoredVenue(
        venue=venue,
        distance_km=dist_km,
        distance_score=d_score,
        preference_score=p_score,
        score=round(total, 3),
    )


def rank_venues(
    profile: UserProfile,
    location: UserLocation,
    venues: Sequence[Venue],
    top_n: int = 10,
    *,
    fallback: Optional[Sequence[Venue]] = None,
    fallback_size: int = FALLBACK_SIZE,
) -> List[ScoredVenue]:
    """Filter, score and order venues for one request.

    Results are ordered nearest first. The blended ``score`` is attached for
    explanation only and does not drive the order.
    """
    if top_n <= 0:
        return []

    placed = usable_venues(venues)
    if len(placed) != len(venues):
        logger.debug("dropped {} venues without coordinates", len(venues) - len(placed))

    candidates = select_candidates(profile, placed, fallback=fallback, fallback_size=fallback_size)
    logger.debug("candidates after filter: {}", len(candidates))

    scored = [score_venue(profile, location, v) for v in candidates]
    scored.sort(key=lambda s: s.distance_km)
    return scored[:top_n]
