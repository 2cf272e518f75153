from __future__ import annotations

from typing import Iterable, Optional

from models import UserProfile, Venue

MAX_DISTANCE_KM = 3.0
NEUTRAL_PREFERENCE = 0.5

LIGHT_GOAL = "light"
LIGHT_CATEGORIES = {"cafe"}
LIGHT_DIETS = {"healthy"}


def distance_score(distance_km: float) -> float:
    """Linear desirability: 1 at the user's spot, 0 at MAX_DISTANCE_KM or beyond."""
    d = min(max(distance_km, 0.0), MAX_DISTANCE_KM)
    return 1.0 - d / MAX_DISTANCE_KM


def cuisine_matches(terms: Optional[Iterable[str]], cuisine: Optional[str]) -> bool:
    """Case-insensitive substring match of any preferred term against the venue cuisine text."""
    text = (cuisine or "").lower()
    return any(term in text for term in (terms or []))


def _is_light(venue: Venue) -> bool:
    return venue.category in LIGHT_CATEGORIES or venue.diet in LIGHT_DIETS


def preference_score(profile: UserProfile, venue: Venue) -> float:
    # Only facets the profile actually expresses count towards max_score.
    score = 0
    max_score = 0

    if profile.has_cuisines:
        max_score += 1
        if cuisine_matches(profile.cuisines, venue.cuisine):
            score += 1

    if profile.has_light_goal:
        max_score += 1
        if _is_light(venue):
            score += 1

    if max_score == 0:
        return NEUTRAL_PREFERENCE
    return score / max_score
