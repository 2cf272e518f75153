from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from models import BoundingArea, UserLocation
from utils import mask_url_password


class Configuration(BaseModel):
    # Overpass
    overpass_base_url: str = Field(default="https://overpass-api.de/api/interpreter")
    overpass_timeout: int = Field(default=25)
    overpass_retries: int = Field(default=2)

    # Search area: "south,west,north,east"
    search_bbox: str = Field(default="25.01,121.52,25.04,121.56")
    search_radius_km: Optional[float] = Field(default=None)

    # Defaults
    default_lat: float = Field(default=25.0173)
    default_lon: float = Field(default=121.5397)
    top_n: int = Field(default=10, ge=1)
    fallback_size: int = Field(default=10, ge=1)

    # Profile storage
    database_url: str = Field(default="sqlite:///./profiles.db")

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "overpass_base_url": os.getenv("OVERPASS_BASE_URL"),
            "overpass_timeout": os.getenv("OVERPASS_TIMEOUT"),
            "overpass_retries": os.getenv("OVERPASS_RETRIES"),
            "search_bbox": os.getenv("SEARCH_BBOX"),
            "search_radius_km": os.getenv("SEARCH_RADIUS_KM"),
            "default_lat": os.getenv("DEFAULT_LAT"),
            "default_lon": os.getenv("DEFAULT_LON"),
            "top_n": os.getenv("TOP_N"),
            "fallback_size": os.getenv("FALLBACK_SIZE"),
            # hosted MySQL deployments only expose MYSQL_URL
            "database_url": os.getenv("DATABASE_URL") or os.getenv("MYSQL_URL"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def default_location(self) -> UserLocation:
        return UserLocation(lat=self.default_lat, lon=self.default_lon)

    def search_area(self) -> BoundingArea:
        parts = [p.strip() for p in self.search_bbox.split(",")]
        if len(parts) != 4:
            raise ValueError("SEARCH_BBOX must be 'south,west,north,east'")
        try:
            south, west, north, east = (float(p) for p in parts)
        except ValueError:
            raise ValueError(f"SEARCH_BBOX is not numeric: {self.search_bbox!r}")
        if south >= north or west >= east:
            raise ValueError(f"SEARCH_BBOX is empty or inverted: {self.search_bbox!r}")
        return BoundingArea(south=south, west=west, north=north, east=east)

    def log_summary(self) -> str:
        return (
            "overpass=%s timeout=%s retries=%s bbox=%s radius_km=%s top_n=%s database=%s"
            % (
                self.overpass_base_url,
                self.overpass_timeout,
                self.overpass_retries,
                self.search_bbox,
                self.search_radius_km,
                self.top_n,
                mask_url_password(self.database_url),
            )
        )
