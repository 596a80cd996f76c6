"""Suggest bibliography keys for a mistyped key with fuzzy matching."""

from typing import Callable, Iterable, Optional

from rapidfuzz import fuzz

from citeshift.models.schemas import KeySuggestion

Scorer = Callable[[str, str], float]


def rank_keys(
    bad_key: str,
    candidates: Iterable[str],
    scorer: Scorer = fuzz.ratio,
    score_cutoff: Optional[float] = None,
) -> list[KeySuggestion]:
    """
    Rank candidate keys by similarity to bad_key.

    The default scorer is rapidfuzz's normalized Indel similarity, so a
    dropped letter ranks above a changed one. A candidate equal to bad_key
    is ranked like any other.

    Args:
        bad_key: Key that was not found
        candidates: Pool of known keys
        scorer: Similarity function returning 0-100
        score_cutoff: Drop candidates scoring below this

    Returns:
        Suggestions, closest first, ties in alphabetical order
    """
    suggestions = [
        KeySuggestion(key=candidate, score=scorer(bad_key, candidate))
        for candidate in sorted(set(candidates))
    ]
    if score_cutoff is not None:
        suggestions = [s for s in suggestions if s.score >= score_cutoff]

    suggestions.sort(key=lambda s: -s.score)
    return suggestions


def suggest_keys(
    bad_key: str,
    candidates: Iterable[str],
    scorer: Scorer = fuzz.ratio,
) -> list[str]:
    """Candidate keys ordered by closeness to bad_key."""
    return [s.key for s in rank_keys(bad_key, candidates, scorer)]
