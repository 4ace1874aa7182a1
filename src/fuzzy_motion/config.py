"""Motion configuration with JSON settings files.

Precedence: CLI overrides > project settings > global settings.
Settings files use camelCase keys, e.g.::

    {
      "labels": ["a", "s", "d", "f"],
      "matchers": ["fuzzy", "transliteration"],
      "autoJump": true
    }
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fuzzy_motion.matchers import MatcherKind, parse_matcher

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".fuzzy-motion"

DEFAULT_WORD_REGEXP_LIST: tuple[str, ...] = (
    r"[0-9a-zA-Z_-]+",
    r"([0-9a-zA-Z_-]|[.])+",
    r"([0-9a-zA-Z_-]|[()<>.-_#'\"]|(\s=+\s)|(,\s)|(:\s)|(\s=>\s))+",
)

DEFAULT_LABELS: tuple[str, ...] = tuple("UHETONASIDFGCRLPYBMWVKXJQZ")


class ConfigError(ValueError):
    """Raised when settings cannot be turned into a usable configuration."""


@dataclass(frozen=True)
class MotionConfig:
    """Resolved configuration for one navigation session."""

    word_regexp_list: tuple[str, ...] = DEFAULT_WORD_REGEXP_LIST
    word_filter_regexp_list: tuple[str, ...] = ()
    labels: tuple[str, ...] = DEFAULT_LABELS
    matchers: tuple[MatcherKind, ...] = (MatcherKind.FUZZY,)
    auto_jump: bool = False
    disable_match_highlight: bool = False
    _word_patterns: tuple[re.Pattern[str], ...] = field(
        init=False, repr=False, compare=False, default=()
    )
    _filter_patterns: tuple[re.Pattern[str], ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        _check_labels(self.labels)
        object.__setattr__(self, "_word_patterns", _compile_all(self.word_regexp_list))
        object.__setattr__(
            self, "_filter_patterns", _compile_all(self.word_filter_regexp_list)
        )

    @property
    def word_patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._word_patterns

    @property
    def filter_patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._filter_patterns

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> MotionConfig:
        """Build a config from a camelCase settings dict, validating every field."""
        kwargs: dict[str, Any] = {}

        if settings.get("wordRegexpList") is not None:
            kwargs["word_regexp_list"] = _string_list(settings["wordRegexpList"], "wordRegexpList")
        if settings.get("wordFilterRegexpList") is not None:
            kwargs["word_filter_regexp_list"] = _string_list(
                settings["wordFilterRegexpList"], "wordFilterRegexpList"
            )
        if settings.get("labels") is not None:
            labels = settings["labels"]
            # A plain string is shorthand for one label per character.
            if isinstance(labels, str):
                labels = list(labels)
            kwargs["labels"] = _string_list(labels, "labels")
        if settings.get("matchers") is not None:
            names = _string_list(settings["matchers"], "matchers")
            kinds: list[MatcherKind] = []
            for name in names:
                try:
                    kind = parse_matcher(name)
                except ValueError:
                    raise ConfigError(f"Unknown matcher: {name!r}") from None
                if kind not in kinds:
                    kinds.append(kind)
            kwargs["matchers"] = tuple(kinds)
        if settings.get("autoJump") is not None:
            kwargs["auto_jump"] = _bool(settings["autoJump"], "autoJump")
        if settings.get("disableMatchHighlight") is not None:
            kwargs["disable_match_highlight"] = _bool(
                settings["disableMatchHighlight"], "disableMatchHighlight"
            )

        return cls(**kwargs)


# --- Validation ---


def _compile_all(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if not isinstance(pattern, str):
            raise ConfigError(f"Regex must be a string, got {pattern!r}")
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(f"Invalid regex {pattern!r}: {e}") from e
    return tuple(compiled)


def _check_labels(labels: tuple[str, ...]) -> None:
    seen: set[str] = set()
    for label in labels:
        if not isinstance(label, str) or len(label) != 1:
            raise ConfigError(f"Label must be a single character, got {label!r}")
        if label in seen:
            raise ConfigError(f"Duplicate label: {label!r}")
        seen.add(label)


def _string_list(value: Any, name: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{name} must be a list, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"{name} entries must be strings, got {item!r}")
    return tuple(value)


def _bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


# --- Deep merge ---


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base settings.

    For nested dicts, merge recursively. For primitives and arrays,
    override value wins completely. ``None`` overrides are skipped.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


# --- Loading ---


def _get_config_dir() -> Path:
    return Path(os.environ.get("FUZZY_MOTION_CONFIG_DIR", Path.home() / CONFIG_DIR_NAME))


def _load_from_file(path: Path) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not path.exists():
        return {}, None
    try:
        settings = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return {}, e
    if not isinstance(settings, dict):
        return {}, ConfigError(f"{path}: top-level value must be an object")
    return settings, None


def load_settings(
    cwd: str | None = None,
    settings_path: str | None = None,
) -> dict[str, Any]:
    """Read and merge global and project settings files.

    An explicit *settings_path* replaces the global file. Unreadable files
    are reported and skipped.
    """
    global_path = Path(settings_path) if settings_path else _get_config_dir() / "settings.json"
    project_path = Path(cwd or os.getcwd()) / CONFIG_DIR_NAME / "settings.json"

    merged: dict[str, Any] = {}
    for path in (global_path, project_path):
        settings, error = _load_from_file(path)
        if error is not None:
            logger.warning("Ignoring settings file %s: %s", path, error)
            continue
        merged = deep_merge_settings(merged, settings)
    return merged


def load_config(
    cwd: str | None = None,
    settings_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> MotionConfig:
    """Resolve the session config. Raises :class:`ConfigError` on bad values."""
    settings = load_settings(cwd, settings_path)
    if overrides:
        settings = deep_merge_settings(settings, overrides)
    config = MotionConfig.from_settings(settings)
    logger.debug("Resolved config: %s", config)
    return config
