import pytest

from resfinder.core.exceptions import CatalogError, UnknownMetric, UnknownOrganization
from resfinder.core.metrics import MetricEngine, MetricTable, OrganizationMetrics, round_half_up
from resfinder.core.normalization import normalize_catalog


def _budget_table() -> MetricTable:
    return MetricTable.from_dict(
        {
            "first_year": 2020,
            "organizations": [
                {"code": "NCI", "name": "National Cancer Institute", "metrics": {"budget": 100}},
                {"code": "NLM", "metrics": {"budget": 200}},
                {"code": "NHGRI", "metrics": {"budget": 200, "staff": 12}},
            ],
        }
    )


def test_base_year_value_is_unchanged():
    engine = MetricEngine(_budget_table())
    assert engine.value("NCI", "budget", 2020) == 100
    assert engine.value("NHGRI", "staff", 2020) == 12


def test_yearly_growth_applies_to_every_metric():
    engine = MetricEngine(_budget_table())
    assert engine.value("NCI", "budget", 2022) == 103
    assert engine.value("NLM", "budget", 2022) == 206
    # 12 * 1.045 = 12.54
    assert engine.value("NHGRI", "staff", 2023) == 13


def test_ranking_is_descending_with_stable_ties():
    rows = MetricEngine(_budget_table()).ranking("budget", 2022)
    assert [(r.org, r.value, r.rank) for r in rows] == [
        ("NLM", 206, 1),
        ("NHGRI", 206, 2),
        ("NCI", 103, 3),
    ]
    assert rows[2].share == pytest.approx(0.2)
    assert sum(r.share for r in rows) == pytest.approx(1.0)


def test_rank_and_share_for_one_organization():
    engine = MetricEngine(_budget_table())
    assert engine.rank("NCI", "budget", 2022) == 3
    assert engine.share("NLM", "budget", 2022) == pytest.approx(0.4)
    assert engine.row("NHGRI", "budget", 2020).to_dict() == {
        "org": "NHGRI",
        "value": 200,
        "rank": 2,
        "share": pytest.approx(0.4),
    }


def test_missing_metric_counts_as_zero_for_that_organization():
    engine = MetricEngine(_budget_table())
    assert engine.value("NCI", "staff", 2020) == 0
    rows = engine.ranking("staff", 2020)
    assert rows[0].org == "NHGRI"
    assert rows[0].share == pytest.approx(1.0)


def test_zero_total_share_is_undefined():
    table = MetricTable(
        first_year=2020,
        organizations=(
            OrganizationMetrics(code="A", metrics={"grants": 0}),
            OrganizationMetrics(code="B", metrics={"grants": 0}),
        ),
    )
    engine = MetricEngine(table)
    assert engine.share("A", "grants", 2024) is None
    assert [r.rank for r in engine.ranking("grants", 2024)] == [1, 2]


def test_unknown_organization_and_metric_raise():
    engine = MetricEngine(_budget_table())
    with pytest.raises(UnknownOrganization):
        engine.value("NIMH", "budget", 2020)
    with pytest.raises(UnknownMetric):
        engine.value("NCI", "headcount", 2020)
    with pytest.raises(UnknownMetric):
        engine.ranking("headcount", 2020)
    with pytest.raises(CatalogError):
        engine.rank("NIMH", "budget", 2020)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_table_rejects_duplicate_codes_and_bad_rows():
    with pytest.raises(ValueError):
        MetricTable(
            first_year=2020,
            organizations=(OrganizationMetrics(code="A"), OrganizationMetrics(code="A")),
        )
    with pytest.raises(ValueError):
        MetricTable.from_dict({"first_year": 2020, "organizations": [{"name": "no code"}]})
    with pytest.raises(KeyError):
        MetricTable.from_dict({"organizations": []})


def test_metric_keys_keep_first_seen_order():
    assert _budget_table().metric_keys == ("budget", "staff")


def test_metrics_derived_from_catalog(raw_records):
    table = MetricTable.from_resources(normalize_catalog(raw_records), first_year=2020)

    assert [o.code for o in table.organizations] == ["NCI", "NLM", "NHGRI"]
    by_code = {o.code: o for o in table.organizations}
    assert by_code["NCI"].name == "National Cancer Institute"
    assert by_code["NHGRI"].name == ""
    assert by_code["NLM"].metrics["resources"] == 2
    assert by_code["NLM"].metrics["api_resources"] == 1
    assert by_code["NLM"].metrics["open_resources"] == 1
    assert by_code["NHGRI"].metrics["web_resources"] == 0

    rows = MetricEngine(table).ranking("resources", 2020)
    assert [(r.org, r.rank) for r in rows] == [("NLM", 1), ("NCI", 2), ("NHGRI", 3)]
    assert rows[0].share == pytest.approx(0.5)
