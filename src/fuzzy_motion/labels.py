"""Label assignment with a session-wide label cache.

A target keeps the label it was first given for as long as it keeps
matching, so a label the user is about to press never moves under them.
Targets are identified by ``(line, col, start)``, never by label.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from fuzzy_motion.aggregator import aggregate
from fuzzy_motion.config import MotionConfig
from fuzzy_motion.types import MatchResult, Target, Word


@dataclass(frozen=True)
class SessionState:
    """The label cache: the targets shown on the previous keystroke."""

    cache: tuple[Target, ...] = ()

    def reset(self) -> SessionState:
        return SessionState()


def assign_labels(
    results: Sequence[MatchResult],
    cache: Sequence[Target],
    labels: Sequence[str],
) -> list[Target]:
    """Label *results* in order, reusing labels recorded in *cache*.

    Labels held by the previous cache stay reserved for this whole pass,
    even when their target no longer matches; they become free on the next
    pass. Results that find no free label are dropped.
    """
    by_key = {target.key: target for target in cache}
    in_use = {target.char for target in cache}
    label_index = 0
    labeled: list[Target] = []

    for entry in results:
        cached = by_key.get((entry.word.pos.line, entry.word.pos.col, entry.start))

        if cached is not None:
            labeled.append(
                Target(
                    text=entry.word.text,
                    start=entry.start,
                    end=entry.end,
                    pos=entry.word.pos,
                    score=entry.score,
                    char=cached.char,
                )
            )
            continue

        while label_index < len(labels) and labels[label_index] in in_use:
            label_index += 1
        if label_index >= len(labels):
            continue

        char = labels[label_index]
        labeled.append(
            Target(
                text=entry.word.text,
                start=entry.start,
                end=entry.end,
                pos=entry.word.pos,
                score=entry.score,
                char=char,
            )
        )
        in_use.add(char)

    return labeled


def recompute(
    state: SessionState,
    query: str,
    words: Sequence[Word],
    config: MotionConfig,
) -> tuple[SessionState, list[Target]]:
    """Match, dedupe and label; return the replacement state and the targets."""
    results = aggregate(query, words, config.matchers)
    targets = assign_labels(results, state.cache, config.labels)
    return SessionState(cache=tuple(targets)), targets


def find_targets(
    words: Sequence[Word],
    query: str,
    config: MotionConfig,
) -> list[Target]:
    """One-shot lookup starting from an empty cache."""
    _, targets = recompute(SessionState(), query, words, config)
    return targets
