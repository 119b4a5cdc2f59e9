from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Pattern, Tuple


class Restrictiveness(IntEnum):
    """
    Ordinal restrictiveness tier.

    Using IntEnum keeps tiers comparable with plain thresholds (0-2).
    """

    LEAST = 0
    MODERATE = 1
    MOST = 2


@dataclass(frozen=True)
class TierDecision:
    """
    Immutable classification outcome.

    - tier is a Restrictiveness member (not a free-form number)
    - rule_id names the rule that fired, or the default that applied
    """

    tier: Restrictiveness
    rule_id: str
    reason: str = ""

    def to_dict(self):
        return {"tier": int(self.tier), "rule_id": self.rule_id, "reason": self.reason}


def compile_terms(*terms: str) -> Pattern[str]:
    """Compile alternatives into one case-insensitive pattern."""

    return re.compile("|".join(f"(?:{t})" for t in terms), re.IGNORECASE)


@dataclass(frozen=True)
class PatternRule:
    """Fire when every pattern in `all_of` matches the text.

    Evaluation returns None when the rule does not apply so that the
    classifier can move on to the next rule.
    """

    rule_id: str
    tier: Restrictiveness
    all_of: Tuple[Pattern[str], ...]
    reason: str = ""

    def __post_init__(self) -> None:
        if not self.all_of:
            raise ValueError("PatternRule requires at least one pattern")

    def evaluate(self, text: str) -> Optional[TierDecision]:
        for pattern in self.all_of:
            if not pattern.search(text):
                return None
        return TierDecision(tier=self.tier, rule_id=self.rule_id, reason=self.reason)


@dataclass(frozen=True)
class TierClassifier:
    """
    Classifier that evaluates PatternRule objects in order.

    - Deterministic first-match evaluation
    - Empty text gets `empty_tier` without consulting rules
    - Text no rule matches gets `default_tier`
    """

    rules: Tuple[PatternRule, ...] = field(default_factory=tuple)
    default_tier: Restrictiveness = Restrictiveness.MODERATE
    empty_tier: Restrictiveness = Restrictiveness.MODERATE

    def __post_init__(self) -> None:
        for r in self.rules:
            if not isinstance(r, PatternRule):
                raise TypeError("All rules must be PatternRule instances")

    def explain(self, text: Optional[str]) -> TierDecision:
        folded = (text or "").strip().casefold()
        if not folded:
            return TierDecision(tier=self.empty_tier, rule_id="empty", reason="No description")

        for rule in self.rules:
            decision = rule.evaluate(folded)
            if decision is not None:
                return decision

        return TierDecision(tier=self.default_tier, rule_id="default", reason="No matching rule")

    def classify(self, text: Optional[str]) -> int:
        return int(self.explain(text).tier)
