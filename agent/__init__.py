"""Reply engine for the Wamid sales assistant."""

from agent.replies import (
    DEFAULT_RULES,
    ReplyClassifier,
    ReplyRule,
    classify,
    keyword_matcher,
)

__all__ = [
    "DEFAULT_RULES",
    "ReplyClassifier",
    "ReplyRule",
    "classify",
    "keyword_matcher",
]
