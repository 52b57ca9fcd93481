"""
Heuristic venue-name extraction from search result text.
"""

import re
from typing import Iterable, Optional

from app.core.schemas import SearchResult

QUOTED_PATTERN = re.compile(r'"([^"]+)"')
MAX_CAPITALIZED_TOKENS = 3


def extract_venue_name(title: str, snippet: str) -> Optional[str]:
    """
    Guess a venue name from a search result.

    A double-quoted phrase wins (title first, then snippet). Otherwise the first
    few all-caps words of the title are joined, e.g. "MOMA PS1 reopens" -> "MOMA PS1".
    """
    quoted = QUOTED_PATTERN.search(title) or QUOTED_PATTERN.search(snippet)
    if quoted:
        return quoted.group(1)

    capitalized = [word for word in title.split() if len(word) > 1 and word == word.upper()]
    capitalized = capitalized[:MAX_CAPITALIZED_TOKENS]
    return " ".join(capitalized) if capitalized else None


def extract_candidate_names(results: Iterable[SearchResult], limit: int = 10) -> list[str]:
    """
    Extract unique venue names from the top search results.

    Args:
        results: Search results in ranking order
        limit: Maximum number of results inspected and names returned

    Returns:
        Names in first-seen order, without duplicates
    """
    names: list[str] = []
    seen: set[str] = set()

    for result in list(results)[:limit]:
        name = extract_venue_name(result.title, result.snippet)
        if name is None or name in seen:
            continue
        seen.add(name)
        names.append(name)

    return names[:limit]
