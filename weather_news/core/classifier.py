"""
Weather-conditioned headline selection.

Temperature (in Celsius) picks one of three tiers, each with a fixed
keyword set. An article matches when any keyword is a case-insensitive
substring of its title or description. When nothing matches, the first
articles of the input are returned unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .types import FAHRENHEIT, NewsArticle

MAX_RESULTS = 10
COLD_BELOW = 10.0
HOT_ABOVE = 25.0


class Tier(str, Enum):
    COLD = "cold"
    HOT = "hot"
    MILD = "mild"


TIER_KEYWORDS: dict[Tier, tuple[str, ...]] = {
    Tier.COLD: (
        "death",
        "crisis",
        "problem",
        "issue",
        "fail",
        "loss",
        "decline",
        "drop",
        "struggle",
        "difficulty",
    ),
    Tier.HOT: (
        "danger",
        "threat",
        "risk",
        "warning",
        "alarm",
        "concern",
        "worry",
        "fear",
        "panic",
        "crisis",
    ),
    Tier.MILD: (
        "win",
        "success",
        "victory",
        "achieve",
        "celebrate",
        "happy",
        "joy",
        "breakthrough",
        "triumph",
        "excellent",
    ),
}

TIER_LABELS: dict[Tier, str] = {
    Tier.COLD: "Cold Weather - Focusing on challenging news",
    Tier.HOT: "Hot Weather - Showing concerning updates",
    Tier.MILD: "Cool Weather - Highlighting positive news",
}

TIER_DESCRIPTIONS: dict[Tier, str] = {
    Tier.COLD: "Shows news with challenging or concerning themes",
    Tier.HOT: "Displays news related to risks and warnings",
    Tier.MILD: "Highlights positive and uplifting news stories",
}


def to_celsius(temperature: float, unit: str) -> float:
    if unit == FAHRENHEIT:
        return (temperature - 32.0) * 5.0 / 9.0
    return temperature


def select_tier(temperature: float) -> Tier:
    """Pick the tier for a Celsius temperature. Both bounds belong to MILD."""
    if temperature < COLD_BELOW:
        return Tier.COLD
    if temperature > HOT_ABOVE:
        return Tier.HOT
    return Tier.MILD


def matches_tier(article: NewsArticle, tier: Tier) -> bool:
    if not article.title:
        return False
    title = article.title.lower()
    description = (article.description or "").lower()
    return any(kw in title or kw in description for kw in TIER_KEYWORDS[tier])


def classify(
    temperature: float,
    articles: Sequence[NewsArticle],
    limit: int = MAX_RESULTS,
) -> list[NewsArticle]:
    """Return at most ``limit`` articles fitting the weather.

    Args:
        temperature: Current temperature in Celsius
        articles: Candidate articles in upstream order
        limit: Maximum number of articles to return

    Returns:
        Matching articles in input order, or the first ``limit`` input
        articles when none match
    """
    tier = select_tier(temperature)
    matched = [article for article in articles if matches_tier(article, tier)]
    if not matched:
        matched = list(articles[:limit])
    return matched[:limit]
