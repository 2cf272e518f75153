from __future__ import annotations

import math
from typing import Tuple

from models import BoundingArea, Coordinate


def expand_bbox_from_center(lon: float, lat: float, km: float) -> Tuple[float, float, float, float]:
    """Create a rectangular bbox around (lon,lat) by ±km in both axes.

    Returns (min_lon, min_lat, max_lon, max_lat)
    """
    # degrees per km
    dlat = km / 110.574
    cos_lat = math.cos(math.radians(lat))
    dlon = km / (111.320 * cos_lat if cos_lat != 0 else 1e-6)
    return (lon - dlon, lat - dlat, lon + dlon, lat + dlat)


def area_around(center: Coordinate, km: float) -> BoundingArea:
    min_lon, min_lat, max_lon, max_lat = expand_bbox_from_center(center.lon, center.lat, km)
    return BoundingArea(south=min_lat, west=min_lon, north=max_lat, east=max_lon)
