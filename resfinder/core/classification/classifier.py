"""Heuristic restrictiveness tiers for free-text access and sensitivity fields.

The rule tables are deliberately small. A description that lands in the
wrong tier is a content-authoring problem, not a classifier bug.
"""

from __future__ import annotations

from typing import Optional

from .rules import PatternRule, Restrictiveness, TierClassifier, TierDecision, compile_terms

CONTROLLED_ACCESS = compile_terms(
    r"\bapprov\w*",
    r"\brestrict\w*",
    r"\bcontrolled\b",
    r"\bprotected\b",
    r"\bdua\b",
    r"\bdata use agreement",
)
OPEN_ACCESS = compile_terms(r"\bopen\b", r"\bpublic\w*", r"\bcatalog\w*")

PUBLIC_DATA = compile_terms(r"\bpublic\w*", r"\bopen\b")
DEIDENTIFIED_DATA = compile_terms(
    r"\bde-?identified\b", r"\blimited\b", r"\bmoderate\b"
)
SENSITIVE_DATA = compile_terms(r"\bcontrolled\b", r"\brestrict\w*", r"\bhigh\b")


# Mixed signals must be checked before the controlled-only rule.
ACCESS_MODEL_RULES = (
    PatternRule(
        rule_id="access-mixed",
        tier=Restrictiveness.MODERATE,
        all_of=(CONTROLLED_ACCESS, OPEN_ACCESS),
        reason="Both open and controlled terms",
    ),
    PatternRule(
        rule_id="access-controlled",
        tier=Restrictiveness.MOST,
        all_of=(CONTROLLED_ACCESS,),
        reason="Approval, restriction or agreement required",
    ),
)

SENSITIVITY_RULES = (
    PatternRule(
        rule_id="sensitivity-public",
        tier=Restrictiveness.LEAST,
        all_of=(PUBLIC_DATA,),
        reason="Public or open data",
    ),
    PatternRule(
        rule_id="sensitivity-limited",
        tier=Restrictiveness.MODERATE,
        all_of=(DEIDENTIFIED_DATA,),
        reason="De-identified or limited data",
    ),
    PatternRule(
        rule_id="sensitivity-controlled",
        tier=Restrictiveness.MOST,
        all_of=(SENSITIVE_DATA,),
        reason="Controlled, restricted or high sensitivity",
    ),
)

ACCESS_MODEL_CLASSIFIER = TierClassifier(
    rules=ACCESS_MODEL_RULES,
    default_tier=Restrictiveness.LEAST,
    empty_tier=Restrictiveness.MODERATE,
)

SENSITIVITY_CLASSIFIER = TierClassifier(
    rules=SENSITIVITY_RULES,
    default_tier=Restrictiveness.MODERATE,
    empty_tier=Restrictiveness.MODERATE,
)


def classify_access_model(text: Optional[str]) -> int:
    """Tier for an access-model description.

    empty -> 1, controlled and open -> 1, controlled only -> 2, otherwise 0.
    """

    return ACCESS_MODEL_CLASSIFIER.classify(text)


def classify_sensitivity(text: Optional[str]) -> int:
    """Tier for a data-sensitivity description.

    empty -> 1, public/open -> 0, de-identified/limited/moderate -> 1,
    controlled/restricted/high -> 2, no match -> 1.
    """

    return SENSITIVITY_CLASSIFIER.classify(text)


def explain_access_model(text: Optional[str]) -> TierDecision:
    return ACCESS_MODEL_CLASSIFIER.explain(text)


def explain_sensitivity(text: Optional[str]) -> TierDecision:
    return SENSITIVITY_CLASSIFIER.explain(text)
