"""
Canned Reply Selection

Maps inbound chat text to one of the Wamid sales assistant's canned replies.

Enforces:
- Ordered rules, first match wins
- Case-insensitive keyword matching, no scoring
- Total: every input gets a non-empty reply
- No side effects
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

Matcher = Callable[[str], bool]


PRICE_REPLY = "Kindly share your car model and year, and I’ll prepare an estimate ✨"

CATALOG_REPLY = (
    "Here’s our digital showroom link 🏜️ "
    "Explore first, then I’ll tailor your customization."
)

WELCOME_REPLY = (
    "Welcome to Wamid ✨ Share your car model & year, "
    "and preferred edition (Sihoub/Sukoon/Shuhub)."
)


@dataclass(frozen=True)
class ReplyRule:
    """A matcher over lowercased text and the reply it selects."""

    name: str
    matcher: Matcher
    response: str

    def matches(self, text: str) -> bool:
        return bool(self.matcher(text))


def keyword_matcher(*keywords: str) -> Matcher:
    """Matcher that succeeds when any keyword occurs anywhere in the text."""
    pattern = re.compile("|".join(re.escape(k) for k in keywords), re.IGNORECASE)
    return lambda text: pattern.search(text) is not None


def always(_text: str) -> bool:
    return True


# Order is priority: a message asking for both price and catalog gets the price reply.
DEFAULT_RULES: Tuple[ReplyRule, ...] = (
    ReplyRule("price", keyword_matcher("price", "سعر"), PRICE_REPLY),
    ReplyRule("catalog", keyword_matcher("catalog", "كتالوج", "عرض"), CATALOG_REPLY),
    ReplyRule("welcome", always, WELCOME_REPLY),
)


class ReplyClassifier:
    """
    Ordered rule list evaluated top to bottom.

    A custom rule list without a catch-all still yields a reply
    through ``fallback``.
    """

    def __init__(
        self,
        rules: Iterable[ReplyRule] = DEFAULT_RULES,
        fallback: Optional[str] = WELCOME_REPLY,
    ):
        self.rules: Tuple[ReplyRule, ...] = tuple(rules)
        self.fallback = fallback

        if not self.rules and not fallback:
            raise ValueError("ReplyClassifier needs at least one rule or a fallback")

    def match(self, text: Optional[str]) -> Optional[ReplyRule]:
        """Return the first rule matching the text, or None."""
        low = (text or "").lower()
        for rule in self.rules:
            if rule.matches(low):
                return rule
        return None

    def classify(self, text: Optional[str]) -> str:
        """Reply text for an inbound message."""
        rule = self.match(text)
        if rule is not None:
            return rule.response
        return self.fallback or ""


_default_classifier = ReplyClassifier()


def classify(text: Optional[str]) -> str:
    """Classify with the default Wamid rules."""
    return _default_classifier.classify(text)
