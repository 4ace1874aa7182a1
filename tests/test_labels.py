"""Tests for fuzzy_motion.labels -- label assignment and the label cache."""

from __future__ import annotations

from fuzzy_motion.config import MotionConfig
from fuzzy_motion.labels import SessionState, assign_labels, find_targets, recompute
from fuzzy_motion.types import MatchResult, Position, Target, Word

LABELS = ("a", "s", "d")


def _config(**kwargs: object) -> MotionConfig:
    return MotionConfig(labels=LABELS, **kwargs)  # type: ignore[arg-type]


def _result(text: str, line: int, col: int = 1, start: int = 0, score: float = 0) -> MatchResult:
    return MatchResult(
        word=Word(text=text, pos=Position(line, col)),
        start=start,
        end=start + len(text),
        score=score,
    )


def _target(text: str, line: int, char: str, col: int = 1, start: int = 0) -> Target:
    return Target(
        text=text,
        start=start,
        end=start + len(text),
        pos=Position(line, col),
        score=0,
        char=char,
    )


def _chars(targets: list[Target]) -> dict[str, str]:
    return {t.text: t.char for t in targets}


# ---------------------------------------------------------------------------
# assign_labels
# ---------------------------------------------------------------------------


class TestAssignLabels:
    def test_fresh_labels_follow_result_order(self) -> None:
        results = [_result("one", 1), _result("two", 2), _result("three", 3)]
        targets = assign_labels(results, (), LABELS)
        assert [t.char for t in targets] == ["a", "s", "d"]

    def test_alphabet_exhaustion_drops_the_rest(self) -> None:
        results = [_result(f"w{i}", i) for i in range(1, 6)]
        targets = assign_labels(results, (), LABELS)
        assert len(targets) == 3
        assert [t.text for t in targets] == ["w1", "w2", "w3"]

    def test_cached_target_keeps_label(self) -> None:
        cache = (_target("two", 2, "a"),)
        results = [_result("one", 1), _result("two", 2)]
        targets = assign_labels(results, cache, LABELS)
        assert _chars(targets) == {"one": "s", "two": "a"}

    def test_cached_target_gets_fresh_fields(self) -> None:
        cache = (_target("two", 2, "d"),)
        results = [_result("two", 2, score=-7.5)]
        (target,) = assign_labels(results, cache, LABELS)
        assert target.char == "d"
        assert target.score == -7.5

    def test_identity_includes_match_start(self) -> None:
        cache = (_target("foo", 1, "a", start=0),)
        results = [_result("foo", 1, start=1)]
        (target,) = assign_labels(results, cache, LABELS)
        # a different start is a different target; "a" stays reserved this pass
        assert target.char == "s"

    def test_vanished_target_label_reserved_for_one_pass(self) -> None:
        cache = (_target("gone", 1, "a"), _target("kept", 2, "s"))
        results = [_result("new", 3), _result("kept", 2)]
        targets = assign_labels(results, cache, LABELS)
        assert _chars(targets) == {"new": "d", "kept": "s"}

        # next pass: "a" is free again
        targets = assign_labels([_result("newer", 4), *results], tuple(targets), LABELS)
        assert _chars(targets) == {"newer": "a", "new": "d", "kept": "s"}

    def test_cached_targets_survive_exhaustion(self) -> None:
        cache = (_target("x", 9, "a"), _target("y", 8, "s"), _target("z", 7, "d"))
        results = [_result("new", 1), _result("z", 7)]
        targets = assign_labels(results, cache, LABELS)
        assert _chars(targets) == {"z": "d"}

    def test_no_results(self) -> None:
        assert assign_labels([], (_target("x", 1, "a"),), LABELS) == []


# ---------------------------------------------------------------------------
# recompute
# ---------------------------------------------------------------------------


WORDS = [
    Word("far", Position(1, 1)),
    Word("foo", Position(2, 1)),
    Word("fob", Position(3, 1)),
]


class TestRecompute:
    def test_empty_input_clears_targets(self) -> None:
        state = SessionState(cache=(_target("foo", 2, "a"),))
        new_state, targets = recompute(state, "", WORDS, _config())
        assert targets == []
        assert new_state.cache == ()

    def test_returns_replacement_state(self) -> None:
        state = SessionState()
        new_state, targets = recompute(state, "f", WORDS, _config())
        assert new_state.cache == tuple(targets)
        assert state.cache == ()

    def test_labels_stable_while_typing(self) -> None:
        config = _config()
        state = SessionState()
        seen: list[dict[str, str]] = []
        for query in ("f", "fo", "foo"):
            state, targets = recompute(state, query, WORDS, config)
            seen.append(_chars(targets))

        assert seen[0] == {"far": "a", "foo": "s", "fob": "d"}
        assert seen[1] == {"foo": "s", "fob": "d"}
        assert seen[2] == {"foo": "s"}

    def test_reset_allows_reassignment(self) -> None:
        config = _config()
        state, _ = recompute(SessionState(), "f", WORDS, config)
        state, _ = recompute(state, "fo", WORDS, config)
        _, targets = recompute(state.reset(), "fo", WORDS, config)
        assert _chars(targets) == {"foo": "a", "fob": "s"}


class TestFindTargets:
    def test_starts_from_empty_cache(self) -> None:
        targets = find_targets(WORDS, "fo", _config())
        assert _chars(targets) == {"foo": "a", "fob": "s"}

    def test_jump_position_adds_match_start(self) -> None:
        words = [Word("xfoo", Position(4, 7))]
        (target,) = find_targets(words, "fo", _config())
        assert target.key == (4, 7, 1)
        assert target.jump_position == Position(4, 8)
