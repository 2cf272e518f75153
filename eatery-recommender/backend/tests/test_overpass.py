import unittest
from unittest.mock import MagicMock, patch

import requests

from config import Configuration
from models import BoundingArea
from services.overpass import OverpassClient, VenueDataUnavailable, build_overpass_query

AREA = BoundingArea(south=25.01, west=121.52, north=25.04, east=121.56)


def _response(status: int = 200, payload=None, text: str = ""):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.text = text
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class TestOverpassQuery(unittest.TestCase):
    def test_query_lists_each_category_in_bbox(self):
        query = build_overpass_query(AREA, timeout=25)
        self.assertTrue(query.startswith("[out:json][timeout:25];"))
        self.assertIn('node["amenity"="restaurant"](25.01,121.52,25.04,121.56);', query)
        self.assertIn('node["amenity"="fast_food"](25.01,121.52,25.04,121.56);', query)
        self.assertIn('node["amenity"="cafe"](25.01,121.52,25.04,121.56);', query)
        self.assertIn('way["amenity"="restaurant"](25.01,121.52,25.04,121.56);', query)
        self.assertIn('way["amenity"="cafe"](25.01,121.52,25.04,121.56);', query)
        self.assertTrue(query.endswith("out tags center;"))


@patch("services.overpass.time.sleep", lambda *_: None)
class TestOverpassClient(unittest.TestCase):
    def setUp(self):
        self.client = OverpassClient(Configuration(overpass_retries=2))
        self.client.session = MagicMock()

    def test_fetch_maps_elements_to_venues(self):
        self.client.session.post.return_value = _response(
            payload={
                "elements": [
                    {"id": 1, "lat": 25.02, "lon": 121.53, "tags": {"name": "Din Tai Fung", "amenity": "restaurant", "cuisine": "taiwanese"}},
                    {"id": 2, "lat": 25.03, "lon": 121.54, "tags": {"amenity": "cafe", "diet": "healthy"}},
                ]
            }
        )
        venues = self.client.fetch(AREA)
        self.assertEqual([v.id for v in venues], ["1", "2"])
        self.assertEqual(venues[0].cuisine, "taiwanese")
        self.assertEqual(venues[1].name, "Unnamed venue")
        self.assertEqual(venues[1].diet, "healthy")

        args, kwargs = self.client.session.post.call_args
        self.assertEqual(kwargs["headers"]["Content-Type"], "text/plain")
        self.assertIn(b"out tags center;", kwargs["data"])

    def test_fetch_places_ways_at_their_center(self):
        self.client.session.post.return_value = _response(
            payload={
                "elements": [
                    {"type": "way", "id": 9, "center": {"lat": 25.021, "lon": 121.541}, "tags": {"name": "Food Court", "amenity": "fast_food"}},
                ]
            }
        )
        venues = self.client.fetch(AREA)
        self.assertEqual(len(venues), 1)
        coord = venues[0].coordinate()
        self.assertIsNotNone(coord)
        self.assertEqual((coord.lat, coord.lon), (25.021, 121.541))

    def test_retries_then_succeeds(self):
        self.client.session.post.side_effect = [
            _response(status=429, text="slow down"),
            _response(payload={"elements": []}),
        ]
        self.assertEqual(self.client.fetch(AREA), [])
        self.assertEqual(self.client.session.post.call_count, 2)

    def test_gives_up_after_retries(self):
        self.client.session.post.side_effect = requests.ConnectionError("down")
        with self.assertRaises(VenueDataUnavailable):
            self.client.fetch(AREA)
        self.assertEqual(self.client.session.post.call_count, 3)

    def test_client_error_is_not_retried(self):
        self.client.session.post.return_value = _response(status=400, text="bad query")
        with self.assertRaises(VenueDataUnavailable):
            self.client.fetch(AREA)
        self.assertEqual(self.client.session.post.call_count, 1)

    def test_invalid_json_is_unavailable(self):
        self.client.session.post.return_value = _response(status=200, payload=None)
        with self.assertRaises(VenueDataUnavailable):
            self.client.fetch(AREA)


if __name__ == "__main__":
    unittest.main()
