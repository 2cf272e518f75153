from models import Coordinate
from services.bbox_builder import area_around, expand_bbox_from_center


def test_expand_bbox_basic():
    lon, lat = 121.5397, 25.0173  # Taipei, Da'an
    bbox = expand_bbox_from_center(lon, lat, 3.0)
    min_lon, min_lat, max_lon, max_lat = bbox
    assert min_lon < max_lon
    assert min_lat < max_lat
    # center must lie within bbox
    assert min_lon < lon < max_lon
    assert min_lat < lat < max_lat


def test_area_around_contains_center():
    center = Coordinate(lat=25.0173, lon=121.5397)
    area = area_around(center, 1.0)
    assert area.contains(center)
    assert area.south < area.north
    assert area.west < area.east
    # roughly 1 km in latitude degrees
    assert abs((area.north - center.lat) - 1.0 / 110.574) < 1e-9
