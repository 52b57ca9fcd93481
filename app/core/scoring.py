"""
Aggregate Location Score (ALS) and final ranking of venue suggestions.

ALS = proximity (0-100, from the slowest member's travel time)
    + trending boost (0-50, from the venue's buzz score)
"""

from app.core.schemas import VenueSuggestion

TRAVEL_PENALTY_PER_MINUTE = 1.5
MAX_PROXIMITY_SCORE = 100
BUZZ_MULTIPLIER = 5


def proximity_score(max_travel_minutes: float) -> float:
    # Penalize long travel for the worst-off member
    return MAX_PROXIMITY_SCORE - min(
        max_travel_minutes * TRAVEL_PENALTY_PER_MINUTE, MAX_PROXIMITY_SCORE
    )


def trending_boost(social_buzz_score: int) -> int:
    return social_buzz_score * BUZZ_MULTIPLIER


def compute_als_score(max_travel_minutes: float, social_buzz_score: int) -> int:
    return round(proximity_score(max_travel_minutes) + trending_boost(social_buzz_score))


def rank_suggestions(suggestions: list[VenueSuggestion], limit: int = 5) -> list[VenueSuggestion]:
    """
    Highest ALS first, at most ``limit`` entries.

    The sort is stable, so ties keep the order the suggestions were given in.
    """
    return sorted(suggestions, key=lambda s: s.als_score, reverse=True)[:limit]
