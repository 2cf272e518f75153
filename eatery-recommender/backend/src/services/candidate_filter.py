from __future__ import annotations

from typing import List, Optional, Sequence

from loguru import logger

from models import UserProfile, Venue
from services.scoring import cuisine_matches

FALLBACK_SIZE = 10


def usable_venues(venues: Sequence[Venue]) -> List[Venue]:
    """Drop venues that cannot be placed on the map."""
    return [v for v in venues if v.coordinate() is not None]


def filter_candidates(profile: UserProfile, venues: Sequence[Venue]) -> List[Venue]:
    if not profile.has_cuisines:
        return list(venues)
    return [v for v in venues if cuisine_matches(profile.cuisines, v.cuisine)]


def select_candidates(
    profile: UserProfile,
    venues: Sequence[Venue],
    *,
    fallback: Optional[Sequence[Venue]] = None,
    fallback_size: int = FALLBACK_SIZE,
) -> List[Venue]:
    """Filter by hard preferences, falling back to a bounded default list.

    The default list is ``fallback`` when supplied, otherwise the unfiltered
    ``venues``. Either way only coordinate-bearing venues are returned.
    """
    candidates = filter_candidates(profile, venues)
    if candidates:
        return candidates

    source = usable_venues(fallback) if fallback is not None else list(venues)
    chosen = source[: max(fallback_size, 0)]
    logger.debug("no venue matched cuisines={}, falling back to {} default venues", profile.cuisines, len(chosen))
    return chosen
