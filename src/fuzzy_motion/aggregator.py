"""Merge the outputs of several matchers into one ordered result list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from fuzzy_motion.matchers import MatcherKind, run_matcher
from fuzzy_motion.types import MatchResult, Word


def dedupe_results(results: Iterable[MatchResult]) -> list[MatchResult]:
    """Drop results whose effective position was already seen.

    First occurrence wins, order is preserved.
    """
    seen: set[tuple[int, int]] = set()
    kept: list[MatchResult] = []
    for result in results:
        key = result.effective_position
        if key in seen:
            continue
        seen.add(key)
        kept.append(result)
    return kept


def aggregate(
    query: str,
    words: Sequence[Word],
    matchers: Sequence[MatcherKind],
) -> list[MatchResult]:
    """Run each matcher in priority order and merge their results.

    An empty query matches nothing and no matcher is invoked. The merged
    list is in matcher-priority order, each matcher's own ranking kept.
    """
    if query == "":
        return []

    combined: list[MatchResult] = []
    for kind in matchers:
        combined.extend(run_matcher(kind, query, words))
    return dedupe_results(combined)
