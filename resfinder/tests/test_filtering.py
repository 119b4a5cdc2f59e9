import pytest

from resfinder.core.catalog import FilterState, filter_resources, resolve_active_id
from resfinder.core.normalization import Resource


def _ids(resources):
    return [r.id for r in resources]


def _abc():
    return (
        Resource(id="A", org_code="NCI", domains=("Cancer",), access_restrictiveness=0),
        Resource(id="B", org_code="NLM", domains=("Genomics",), access_restrictiveness=2),
        Resource(id="C", org_code="NCI", domains=("Genomics",), access_restrictiveness=1),
    )


def _mixed():
    return (
        Resource(
            id="web-api",
            org_code="NCI",
            domains=("Cancer",),
            has_api=True,
            is_web_based=True,
            cost_status="Free",
            access_model="Open access",
            access_restrictiveness=0,
            sensitivity_restrictiveness=0,
        ),
        Resource(
            id="web-only",
            maintaining_orgs=("NHGRI", "NLM"),
            domains=("Genomics", "Cancer"),
            is_web_based=True,
            cost_status="Fee-based",
            access_model="Controlled access",
            access_restrictiveness=2,
            sensitivity_restrictiveness=2,
        ),
        Resource(
            id="api-only",
            org_code="NLM",
            domains=("Chemistry",),
            has_api=True,
            cost_status="free tier available",
            access_model="open access after registration",
            access_restrictiveness=1,
            sensitivity_restrictiveness=1,
        ),
        Resource(id="orphan", domains=("Cancer",)),
    )


def test_org_selection_and_access_threshold_end_to_end():
    state = FilterState(selections={"organization": {"NCI"}}, max_access_restrictiveness=1)
    assert _ids(filter_resources(_abc(), state)) == ["A", "C"]


def test_no_filters_returns_everything_in_order():
    assert _ids(filter_resources(_abc(), FilterState())) == ["A", "B", "C"]


def test_or_within_facet_and_across_facets():
    resources = _abc()
    both_orgs = FilterState(selections={"organization": {"NCI", "NLM"}})
    assert _ids(filter_resources(resources, both_orgs)) == ["A", "B", "C"]

    org_and_domain = FilterState(selections={"organization": {"NCI"}, "domain": {"Genomics"}})
    assert _ids(filter_resources(resources, org_and_domain)) == ["C"]


def test_facet_match_ignores_case():
    state = FilterState(selections={"domain": {"genomics"}})
    assert _ids(filter_resources(_abc(), state)) == ["B", "C"]


def test_org_filter_uses_maintaining_orgs_and_excludes_orgless():
    resources = _mixed()
    state = FilterState(selections={"organization": {"NLM"}})
    assert _ids(filter_resources(resources, state)) == ["web-only", "api-only"]

    # org_code is ignored when maintaining_orgs is present.
    nhgri = FilterState(selections={"organization": {"NHGRI"}})
    assert _ids(filter_resources(resources, nhgri)) == ["web-only"]

    cancer = FilterState(selections={"organization": {"NCI", "NHGRI", "NLM"}, "domain": {"Cancer"}})
    assert "orphan" not in _ids(filter_resources(resources, cancer))


def test_single_valued_facets():
    resources = _mixed()
    state = FilterState(selections={"access_model": {"Controlled access"}})
    assert _ids(filter_resources(resources, state)) == ["web-only"]


def test_toggles():
    resources = _mixed()
    assert _ids(filter_resources(resources, FilterState(requires_api=True))) == ["web-api", "api-only"]
    assert _ids(filter_resources(resources, FilterState(requires_web=True))) == ["web-api", "web-only"]
    assert _ids(filter_resources(resources, FilterState(requires_api=True, requires_web=True))) == [
        "web-api"
    ]
    assert _ids(filter_resources(resources, FilterState(free_only=True))) == ["web-api", "api-only"]
    assert _ids(filter_resources(resources, FilterState(open_access_only=True))) == [
        "web-api",
        "api-only",
    ]


def test_thresholds_are_inclusive():
    resources = _mixed()
    assert _ids(filter_resources(resources, FilterState(max_access_restrictiveness=0))) == ["web-api"]
    assert _ids(filter_resources(resources, FilterState(max_sensitivity_restrictiveness=1))) == [
        "web-api",
        "api-only",
        "orphan",
    ]
    assert len(filter_resources(resources, FilterState(max_access_restrictiveness=2))) == 4


def test_search_restricts_and_preserves_search_order():
    state = FilterState(query="genomics")
    assert _ids(filter_resources(_abc(), state, ["C", "B", "missing", "C"])) == ["C", "B"]


def test_search_ids_ignored_without_query():
    assert _ids(filter_resources(_abc(), FilterState(), ["C"])) == ["A", "B", "C"]


def test_empty_search_short_circuits_everything():
    wide_open = FilterState(query="nothing matches")
    assert filter_resources(_abc(), wide_open, []) == ()
    assert filter_resources(_abc(), wide_open, None) == ()

    restrictive = FilterState(
        query="nothing matches",
        selections={"organization": {"NCI"}},
        requires_api=True,
        max_access_restrictiveness=0,
    )
    assert filter_resources(_abc(), restrictive, []) == ()


def test_activating_filters_never_grows_the_result():
    resources = _mixed()
    base = FilterState()
    base_count = len(filter_resources(resources, base))
    narrowed = [
        base.with_selection("domain", {"Cancer"}),
        base.with_selection("organization", {"NLM"}),
        FilterState(requires_api=True),
        FilterState(requires_web=True),
        FilterState(free_only=True),
        FilterState(open_access_only=True),
    ]
    for state in narrowed:
        assert len(filter_resources(resources, state)) <= base_count


def test_raising_a_threshold_never_shrinks_the_result():
    resources = _mixed()
    for lower, higher in ((0, 1), (1, 2), (0, 2)):
        lo = filter_resources(resources, FilterState(max_access_restrictiveness=lower))
        hi = filter_resources(resources, FilterState(max_access_restrictiveness=higher))
        assert len(lo) <= len(hi)
        lo = filter_resources(resources, FilterState(max_sensitivity_restrictiveness=lower))
        hi = filter_resources(resources, FilterState(max_sensitivity_restrictiveness=higher))
        assert len(lo) <= len(hi)


def test_filter_is_idempotent():
    state = FilterState(selections={"domain": {"Cancer"}}, requires_web=True)
    assert filter_resources(_mixed(), state) == filter_resources(_mixed(), state)


def test_filter_state_validation_and_replacement():
    with pytest.raises(ValueError):
        FilterState(selections={"color": {"red"}})
    with pytest.raises(ValueError):
        FilterState(max_access_restrictiveness=3)
    with pytest.raises(ValueError):
        FilterState(max_sensitivity_restrictiveness=-1)

    s = FilterState(query="  gdc  ", selections={"domain": [], "organization": ["NCI"]})
    assert s.query == "gdc"
    assert "domain" not in s.selections
    assert s.selected("organization") == frozenset({"NCI"})

    toggled = s.toggle_value("organization", "NLM").toggle_value("organization", "NCI")
    assert toggled.selected("organization") == frozenset({"NLM"})
    assert s.selected("organization") == frozenset({"NCI"})

    cleared = toggled.cleared()
    assert cleared.query == "gdc"
    assert cleared.selections == {}


def test_active_selection_is_stable():
    resources = _abc()
    first = filter_resources(resources, FilterState())
    assert resolve_active_id(first, None) == "A"
    assert resolve_active_id(first, "C") == "C"

    narrowed = filter_resources(resources, FilterState(selections={"domain": {"Genomics"}}))
    assert resolve_active_id(narrowed, "C") == "C"
    assert resolve_active_id(narrowed, "A") == "B"

    assert resolve_active_id((), "C") is None
