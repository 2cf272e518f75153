import pytest

from models import UserProfile, Venue
from services.scoring import cuisine_matches, distance_score, preference_score


def _venue(**kw) -> Venue:
    base = {"id": "1", "name": "v", "lat": 25.0, "lon": 121.5}
    base.update(kw)
    return Venue(**base)


def test_distance_score_bounds():
    assert distance_score(0.0) == 1.0
    assert distance_score(3.0) == 0.0
    assert distance_score(12.5) == 0.0
    assert distance_score(1.5) == pytest.approx(0.5)


def test_distance_score_non_increasing():
    values = [distance_score(d / 10) for d in range(0, 50)]
    assert all(a >= b for a, b in zip(values, values[1:]))
    assert all(0.0 <= v <= 1.0 for v in values)


def test_cuisine_match_is_case_insensitive_substring():
    assert cuisine_matches(["taiwanese"], "Taiwanese;noodle")
    assert not cuisine_matches(["japanese"], "taiwanese")
    assert not cuisine_matches(["japanese"], None)
    assert not cuisine_matches(None, "japanese")


def test_neutral_score_without_facets():
    assert preference_score(UserProfile(), _venue(cuisine="italian")) == 0.5
    assert preference_score(UserProfile(cuisines=[], health_goals=["more_protein"]), _venue()) == 0.5


def test_single_cuisine_match_is_full_score():
    profile = UserProfile(cuisines=["ramen"])
    assert preference_score(profile, _venue(cuisine="japanese;ramen")) == 1.0
    assert preference_score(profile, _venue(cuisine="burger")) == 0.0


def test_light_goal_matches_cafe_or_healthy_diet():
    profile = UserProfile(health_goals=["light"])
    assert preference_score(profile, _venue(category="cafe")) == 1.0
    assert preference_score(profile, _venue(category="restaurant", tags={"diet": "healthy"})) == 1.0
    assert preference_score(profile, _venue(category="fast_food")) == 0.0


def test_partial_credit_across_two_facets():
    profile = UserProfile(cuisines=["taiwanese"], health_goals=["light"])
    venue = _venue(category="restaurant", cuisine="taiwanese")
    assert preference_score(profile, venue) == 0.5
