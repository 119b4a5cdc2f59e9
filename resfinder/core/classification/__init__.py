"""Restrictiveness classification for catalog entries.

Free-text access and sensitivity descriptions are mapped to ordinal tiers
(0 = least, 1 = moderate, 2 = most) by ordered pattern rules.
"""

from .classifier import (
    ACCESS_MODEL_RULES,
    SENSITIVITY_RULES,
    classify_access_model,
    classify_sensitivity,
    explain_access_model,
    explain_sensitivity,
)
from .rules import PatternRule, Restrictiveness, TierClassifier, TierDecision

__all__ = [
    "classify_access_model",
    "classify_sensitivity",
    "explain_access_model",
    "explain_sensitivity",
    "ACCESS_MODEL_RULES",
    "SENSITIVITY_RULES",
    "PatternRule",
    "Restrictiveness",
    "TierClassifier",
    "TierDecision",
]
