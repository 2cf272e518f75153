"""Data models for the eatery recommender."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


UserLocation = Coordinate


@dataclass(frozen=True)
class BoundingArea:
    south: float
    west: float
    north: float
    east: float

    def contains(self, coord: Coordinate) -> bool:
        return self.south <= coord.lat <= self.north and self.west <= coord.lon <= self.east


def _clean_terms(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return None
    terms: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        term = item.strip().lower()
        if term and term not in terms:
            terms.append(term)
    return terms


@dataclass(frozen=True)
class UserProfile:
    """A snapshot of the preferences a user submitted.

    ``None`` means the facet was never expressed; an empty list is treated the
    same way when scoring.
    """

    cuisines: Optional[List[str]] = None
    health_goals: Optional[List[str]] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def has_cuisines(self) -> bool:
        return bool(self.cuisines)

    @property
    def has_light_goal(self) -> bool:
        return "light" in (self.health_goals or [])

    @classmethod
    def from_dict(cls, doc: Any) -> "UserProfile":
        if isinstance(doc, (str, bytes)):
            doc = json.loads(doc)
        if not isinstance(doc, dict):
            raise ValueError("profile must be a JSON object")
        goals = doc.get("healthGoals")
        if goals is None:
            goals = doc.get("health_goals")
        return cls(
            cuisines=_clean_terms(doc.get("cuisines")),
            health_goals=_clean_terms(goals),
            raw=dict(doc),
        )


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass
class Venue:
    id: Optional[str]
    name: str = "Unnamed venue"
    category: Optional[str] = None
    cuisine: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def diet(self) -> Optional[str]:
        return self.tags.get("diet")

    def coordinate(self) -> Optional[Coordinate]:
        lat = _as_float(self.lat)
        lon = _as_float(self.lon)
        if lat is None or lon is None:
            return None
        return Coordinate(lat=lat, lon=lon)

    @classmethod
    def from_osm(cls, element: Dict[str, Any]) -> "Venue":
        tags = element.get("tags") or {}
        lat = element.get("lat")
        lon = element.get("lon")
        if lat is None or lon is None:
            # ways and relations only carry a computed center
            center = element.get("center") or {}
            lat, lon = center.get("lat"), center.get("lon")
        osm_id = element.get("id")
        return cls(
            id=str(osm_id) if osm_id is not None else None,
            name=tags.get("name") or "Unnamed venue",
            category=tags.get("amenity"),
            cuisine=tags.get("cuisine") or "",
            lat=lat,
            lon=lon,
            tags={str(k): str(v) for k, v in tags.items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "cuisine": self.cuisine,
            "lat": self.lat,
            "lon": self.lon,
            "tags": dict(self.tags),
        }


@dataclass
class ScoredVenue:
    venue: Venue
    distance_km: float
    distance_score: float
    preference_score: float
    score: float

    def to_dict(self) -> Dict[str, Any]:
        payload = self.venue.to_dict()
        payload.update(
            {
                "distanceKm": self.distance_km,
                "score": self.score,
                "scoreDetail": {
                    "distanceScore": self.distance_score,
                    "preferenceScore": self.preference_score,
                },
            }
        )
        return payload


@dataclass
class StoredProfile:
    id: int
    profile: Dict[str, Any]
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "profile": self.profile,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
