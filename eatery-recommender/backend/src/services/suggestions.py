from __future__ import annotations

from typing import Dict, List, Tuple

from models import UserProfile

CUISINE_DISHES: Tuple[Tuple[str, List[str]], ...] = (
    ("taiwanese", ["滷肉飯", "雞腿便當", "燙青菜"]),
    ("japanese", ["日式便當", "烤魚定食"]),
)

GOAL_DISHES: Tuple[Tuple[str, List[str]], ...] = (
    ("light", ["舒肥雞胸沙拉", "清燉湯品"]),
    ("more_protein", ["烤雞腿便當", "牛肉便當"]),
)

DEFAULT_DISHES = ["均衡便當", "自助餐"]


def suggest_meals(profile: UserProfile) -> List[str]:
    """Dish ideas for eating out, driven only by exact facet values."""
    dishes: list[str] = []
    cuisines = set(profile.cuisines or [])
    goals = set(profile.health_goals or [])

    for cuisine, items in CUISINE_DISHES:
        if cuisine in cuisines:
            dishes.extend(items)
    for goal, items in GOAL_DISHES:
        if goal in goals:
            dishes.extend(items)

    return dishes or list(DEFAULT_DISHES)


def suggestion_payload(profile: UserProfile) -> Dict[str, object]:
    return {"profileUsed": profile.raw, "outsideRecommendations": suggest_meals(profile)}
