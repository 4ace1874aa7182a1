"""fuzzy-motion: incremental jump-to-word navigation with stable labels."""

# Core types
from fuzzy_motion.types import MatchResult, Position, Target, TargetKey, Word

# Configuration
from fuzzy_motion.config import ConfigError, MotionConfig, load_config

# Word extraction
from fuzzy_motion.words import extract_words

# Matching
from fuzzy_motion.aggregator import aggregate, dedupe_results
from fuzzy_motion.matchers import MatcherKind, parse_matcher, run_matcher

# Labeling
from fuzzy_motion.labels import SessionState, assign_labels, find_targets, recompute

# Interactive session
from fuzzy_motion.session import Jumper, KeySource, MotionSession, Renderer

__all__ = [
    # Types
    "MatchResult",
    "Position",
    "Target",
    "TargetKey",
    "Word",
    # Config
    "ConfigError",
    "MotionConfig",
    "load_config",
    # Words
    "extract_words",
    # Matching
    "MatcherKind",
    "aggregate",
    "dedupe_results",
    "parse_matcher",
    "run_matcher",
    # Labels
    "SessionState",
    "assign_labels",
    "find_targets",
    "recompute",
    # Session
    "Jumper",
    "KeySource",
    "MotionSession",
    "Renderer",
]
