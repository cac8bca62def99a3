"""Text matching helpers shared by nutrition sources."""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

_T = TypeVar("_T")

_CANDIDATE_SPLIT = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class ConfidenceTiers:
    """Confidence assigned to each kind of name match."""

    exact: float
    candidate_contains_query: float
    query_contains_candidate: float
    overlap_floor: float = 0.6
    overlap_weight: float = 0.25
    overlap_cap: float = 0.85


def query_words(text: str) -> list[str]:
    return text.lower().split()


def candidate_words(text: str) -> list[str]:
    return [word for word in _CANDIDATE_SPLIT.split(text.lower()) if word]


def word_overlap(query: str, candidate: str) -> float:
    """Share of words matched by containment, over the longer word list."""
    q_words = query_words(query)
    c_words = candidate_words(candidate)
    if not q_words or not c_words:
        return 0.0
    matching = sum(
        1
        for word in q_words
        if any(word in other or other in word for other in c_words)
    )
    return matching / max(len(q_words), len(c_words))


def match_confidence(query: str, candidate: str, tiers: ConfidenceTiers) -> float:
    """Estimate how well a candidate name matches the query."""
    q_lower = query.lower().strip()
    c_lower = candidate.lower().strip()
    if not q_lower or not c_lower:
        return 0.0
    if c_lower == q_lower:
        return tiers.exact
    if q_lower in c_lower:
        return tiers.candidate_contains_query
    if c_lower in q_lower:
        return tiers.query_contains_candidate
    q_words = query_words(q_lower)
    c_words = set(candidate_words(c_lower))
    matching = sum(1 for word in q_words if word in c_words)
    return min(
        tiers.overlap_cap,
        tiers.overlap_floor + matching / len(q_words) * tiers.overlap_weight,
    )


def best_match(
    query: str,
    items: Iterable[_T],
    name_of: Callable[[_T], str],
    bonus: Callable[[_T], float] | None = None,
    minimum_score: float = 0.3,
) -> _T | None:
    """Pick the item whose name best overlaps the query.

    An exact name match wins immediately; otherwise the highest overlap
    score (plus optional bonus) must reach ``minimum_score``.
    """
    q_lower = query.lower().strip()
    best: _T | None = None
    best_score = 0.0
    for item in items:
        name = name_of(item)
        if not name:
            continue
        if name.lower().strip() == q_lower:
            return item
        score = word_overlap(query, name) + (bonus(item) if bonus else 0.0)
        if score > best_score:
            best_score = score
            best = item
    return best if best_score >= minimum_score else None
