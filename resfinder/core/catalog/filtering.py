"""Filter pipeline: search result, facet selections, toggles and thresholds.

Steps run in a fixed order:

1. search restriction (an active query with no matches returns empty at once)
2. facet selections (OR within a facet)
3. boolean toggles
4. restrictiveness thresholds

Steps 2-4 compose with AND.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from resfinder.core.normalization import Resource
from resfinder.utils.text import fold

from .facets import FACET_NAMES, facet_values

MAX_TIER = 2


def _frozen_selections(selections: Mapping[str, Iterable[str]]) -> Dict[str, FrozenSet[str]]:
    out: Dict[str, FrozenSet[str]] = {}
    for facet, values in selections.items():
        if facet not in FACET_NAMES:
            raise ValueError(f"Unknown facet: {facet}")
        if isinstance(values, str):
            values = (values,)
        picked = frozenset(v for v in values if v)
        if picked:
            out[facet] = picked
    return out


@dataclass(frozen=True)
class FilterState:
    """
    Complete filter state, replaced wholesale on every user action.

    - selections: facet name -> selected values (empty selections dropped)
    - thresholds are inclusive upper bounds in 0..2; 2 admits every tier
    """

    query: str = ""
    selections: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    requires_api: bool = False
    requires_web: bool = False
    free_only: bool = False
    open_access_only: bool = False
    max_access_restrictiveness: int = MAX_TIER
    max_sensitivity_restrictiveness: int = MAX_TIER

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", (self.query or "").strip())
        object.__setattr__(self, "selections", _frozen_selections(self.selections or {}))
        for name in ("max_access_restrictiveness", "max_sensitivity_restrictiveness"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= MAX_TIER:
                raise ValueError(f"{name} must be an integer in 0..{MAX_TIER}")

    @property
    def search_active(self) -> bool:
        return bool(self.query)

    def selected(self, facet: str) -> FrozenSet[str]:
        return self.selections.get(facet, frozenset())

    def with_query(self, query: str) -> "FilterState":
        return replace(self, query=query)

    def with_selection(self, facet: str, values: Iterable[str]) -> "FilterState":
        selections = dict(self.selections)
        selections[facet] = frozenset(values)
        return replace(self, selections=selections)

    def toggle_value(self, facet: str, value: str) -> "FilterState":
        """Add value to the facet selection, or remove it if present."""

        current = self.selected(facet)
        updated = current - {value} if value in current else current | {value}
        return self.with_selection(facet, updated)

    def cleared(self) -> "FilterState":
        """Reset facets, toggles and thresholds; keep the query."""

        return FilterState(query=self.query)


def _restrict_to_search(
    resources: Sequence[Resource], search_ids: Iterable[str]
) -> List[Resource]:
    by_id = {r.id: r for r in resources}
    out: List[Resource] = []
    seen = set()
    for rid in search_ids:
        r = by_id.get(rid)
        if r is not None and rid not in seen:
            seen.add(rid)
            out.append(r)
    return out


def _matches_selection(resource: Resource, facet: str, wanted: FrozenSet[str]) -> bool:
    own = {fold(v) for v in facet_values(resource, facet)}
    return any(fold(w) in own for w in wanted)


def filter_resources(
    resources: Sequence[Resource],
    state: FilterState,
    search_ids: Optional[Iterable[str]] = None,
) -> Tuple[Resource, ...]:
    """Apply a FilterState to a Resource collection.

    Args:
      resources: the full normalized collection
      state: current filter state
      search_ids: ids matched by the search index for state.query; ignored
        when no query is active. Order is preserved in the result.

    Pure function: equal inputs give equal outputs.

    Time:  O(n * f) for n resources and f active filters
    Space: O(n)
    """

    if state.search_active:
        subset = _restrict_to_search(resources, search_ids or ())
        if not subset:
            return ()
    else:
        subset = list(resources)

    for facet in FACET_NAMES:
        wanted = state.selected(facet)
        if wanted:
            subset = [r for r in subset if _matches_selection(r, facet, wanted)]

    if state.requires_api:
        subset = [r for r in subset if r.has_api]
    if state.requires_web:
        subset = [r for r in subset if r.is_web_based]
    if state.free_only:
        subset = [r for r in subset if "free" in r.cost_status.casefold()]
    if state.open_access_only:
        subset = [r for r in subset if "open access" in r.access_model.casefold()]

    return tuple(
        r
        for r in subset
        if r.access_restrictiveness <= state.max_access_restrictiveness
        and r.sensitivity_restrictiveness <= state.max_sensitivity_restrictiveness
    )
