from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Protocol, Sequence

import requests
from loguru import logger

from config import Configuration
from models import BoundingArea, Venue

DEFAULT_CATEGORIES = ("restaurant", "fast_food", "cafe")


class VenueDataUnavailable(RuntimeError):
    pass


class VenueSupplier(Protocol):
    def fetch(self, area: BoundingArea) -> List[Venue]:
        ...


@dataclass
class _RetryPolicy:
    retries: int = 2
    base_delay: float = 0.5


def build_overpass_query(
    area: BoundingArea,
    categories: Sequence[str] = DEFAULT_CATEGORIES,
    *,
    timeout: int = 25,
) -> str:
    bbox = f"{area.south},{area.west},{area.north},{area.east}"
    lines = [f"[out:json][timeout:{timeout}];", "("]
    for cat in categories:
        lines.append(f'  node["amenity"="{cat}"]({bbox});')
        lines.append(f'  way["amenity"="{cat}"]({bbox});')
    lines.append(");")
    lines.append("out tags center;")
    return "\n".join(lines)


class OverpassClient:
    def __init__(self, cfg: Configuration, categories: Sequence[str] = DEFAULT_CATEGORIES) -> None:
        self.cfg = cfg
        self.url = cfg.overpass_base_url
        self.categories = tuple(categories)
        self.session = requests.Session()
        self.policy = _RetryPolicy(retries=max(cfg.overpass_retries, 0))

    def _post(self, query: str) -> dict:
        headers = {"Content-Type": "text/plain", "Accept": "application/json"}
        # leave headroom over the server-side query timeout
        timeout = self.cfg.overpass_timeout + 5
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.session.post(self.url, data=query.encode("utf-8"), headers=headers, timeout=timeout)
            except requests.RequestException as exc:
                if attempt <= self.policy.retries:
                    logger.warning("overpass request error (attempt {}): {}", attempt, exc)
                    time.sleep(self.policy.base_delay * attempt)
                    continue
                raise VenueDataUnavailable(f"request error: {exc}") from exc

            if resp.status_code in (429, 500, 502, 503, 504):
                if attempt <= self.policy.retries:
                    logger.warning("overpass upstream {} (attempt {})", resp.status_code, attempt)
                    time.sleep(self.policy.base_delay * attempt)
                    continue
                raise VenueDataUnavailable(f"upstream {resp.status_code}: {resp.text[:300]}")

            if not resp.ok:
                raise VenueDataUnavailable(f"upstream {resp.status_code}: {resp.text[:300]}")

            try:
                return resp.json()
            except ValueError as exc:
                raise VenueDataUnavailable("invalid json response") from exc

    def fetch(self, area: BoundingArea) -> List[Venue]:
        query = build_overpass_query(area, self.categories, timeout=self.cfg.overpass_timeout)
        payload = self._post(query)
        elements = payload.get("elements") or []
        venues = [Venue.from_osm(el) for el in elements if isinstance(el, dict)]
        logger.info("overpass returned {} venues for {}", len(venues), area)
        return venues
