"""
Utility for turning a group's preference history into search guidance.
"""

from app.core.schemas import PreferenceSignal


def _unique(values: list[str]) -> list[str]:
    # First-seen order
    return list(dict.fromkeys(v for v in values if v))


def synthesize_preference_bias(signals: list[PreferenceSignal]) -> str:
    """
    Summarize recent likes and dislikes as a sentence to append to a search query.

    Args:
        signals: Recent preference signals for the group, newest first

    Returns:
        A string with a single leading space, or "" when there is nothing to add
    """
    if not signals:
        return ""

    liked_types = _unique(
        [s.venue_type for s in signals if s.positive_signal and s.venue_type]
    )
    disliked_attributes = _unique(
        [attr for s in signals if not s.positive_signal for attr in s.venue_attributes]
    )

    summary_parts: list[str] = []
    if liked_types:
        summary_parts.append(f"The group has previously enjoyed {', '.join(liked_types)}.")
    if disliked_attributes:
        summary_parts.append(
            f"They tend to dislike venues that are {', '.join(disliked_attributes)}."
        )

    if not summary_parts:
        return ""

    return " " + " ".join(summary_parts)


def signal_from_rating(
    member_id: str,
    rating: int,
    venue_type: str | None = None,
    venue_attributes: list[str] | None = None,
) -> PreferenceSignal:
    """
    Build a preference signal from a post-event star rating.

    Weight: 5-star = 1.5, 4-star = 1.25, 3-star = 1.0, 2-star = 0.75, 1-star = 0.5

    Raises:
        ValueError: If the rating is outside 1-5
    """
    if rating < 1 or rating > 5:
        raise ValueError("Rating must be between 1 and 5")

    return PreferenceSignal(
        member_id=member_id,
        positive_signal=rating > 3,
        venue_type=venue_type,
        venue_attributes=list(venue_attributes or []),
        weight=1.0 + (rating - 3) * 0.25,
    )
