from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from resfinder.core.exceptions import UnknownMetric, UnknownOrganization
from resfinder.core.normalization import Resource

YEARLY_GROWTH = 0.015

# Metrics derived from the catalog when no metric table is configured.
CATALOG_METRICS = ("resources", "api_resources", "web_resources", "open_resources")


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class OrganizationMetrics:
    code: str
    name: str = ""
    metrics: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricTable:
    """Base metrics per organization for the first fiscal year.

    Organization order is significant: it breaks ranking ties.
    """

    first_year: int
    organizations: Tuple[OrganizationMetrics, ...] = ()

    def __post_init__(self) -> None:
        codes = [o.code for o in self.organizations]
        if len(set(codes)) != len(codes):
            raise ValueError("organization codes must be unique")

    @property
    def metric_keys(self) -> Tuple[str, ...]:
        keys: Dict[str, None] = {}
        for org in self.organizations:
            for k in org.metrics:
                keys.setdefault(k, None)
        return tuple(keys)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MetricTable":
        """Build a table from its JSON form.

        {"first_year": 2020,
         "organizations": [{"code": "NCI", "name": "...", "metrics": {"budget": 7.3}}]}
        """

        orgs = []
        for raw in data.get("organizations") or []:
            if not isinstance(raw, Mapping) or not raw.get("code"):
                raise ValueError("each organization needs a code")
            metrics = raw.get("metrics") or {}
            if not isinstance(metrics, Mapping):
                raise ValueError("organization metrics must be a mapping")
            orgs.append(
                OrganizationMetrics(
                    code=str(raw["code"]),
                    name=str(raw.get("name") or ""),
                    metrics={str(k): float(v) for k, v in metrics.items()},
                )
            )
        return cls(first_year=int(data["first_year"]), organizations=tuple(orgs))

    @classmethod
    def from_resources(cls, resources: Sequence[Resource], *, first_year: int) -> "MetricTable":
        """Derive catalog-based metrics per organization.

        Organizations appear in first-seen order.
        """

        counts: Dict[str, Dict[str, float]] = {}
        names: Dict[str, str] = {}
        for r in resources:
            for org in r.organizations():
                m = counts.setdefault(org, {k: 0.0 for k in CATALOG_METRICS})
                if org == r.org_code and r.org_name:
                    names.setdefault(org, r.org_name)
                m["resources"] += 1
                m["api_resources"] += 1 if r.has_api else 0
                m["web_resources"] += 1 if r.is_web_based else 0
                m["open_resources"] += 1 if r.access_restrictiveness == 0 else 0
        orgs = tuple(
            OrganizationMetrics(code=code, name=names.get(code, ""), metrics=m)
            for code, m in counts.items()
        )
        return cls(first_year=first_year, organizations=orgs)


@dataclass(frozen=True)
class MetricRow:
    org: str
    value: int
    rank: int
    share: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {"org": self.org, "value": self.value, "rank": self.rank, "share": self.share}


class MetricEngine:
    """Year-adjusted organization metrics.

    value = round(base * (1 + (year - first_year) * 0.015)), the same factor
    for every metric.
    """

    def __init__(self, table: MetricTable):
        self._table = table
        self._by_code = {o.code: o for o in table.organizations}

    @property
    def table(self) -> MetricTable:
        return self._table

    def _check_metric(self, metric: str) -> None:
        if not any(metric in o.metrics for o in self._table.organizations):
            raise UnknownMetric(metric)

    def _org(self, org: str) -> OrganizationMetrics:
        try:
            return self._by_code[org]
        except KeyError:
            raise UnknownOrganization(org) from None

    def _adjusted(self, org: OrganizationMetrics, metric: str, year: int) -> int:
        factor = 1 + (int(year) - self._table.first_year) * YEARLY_GROWTH
        return round_half_up(float(org.metrics.get(metric, 0.0)) * factor)

    def value(self, org: str, metric: str, year: int) -> int:
        self._check_metric(metric)
        return self._adjusted(self._org(org), metric, year)

    def ranking(self, metric: str, year: int) -> List[MetricRow]:
        """All organizations by value, descending; ties keep table order."""

        self._check_metric(metric)
        values = [(o.code, self._adjusted(o, metric, year)) for o in self._table.organizations]
        total = sum(v for _, v in values)
        ordered = sorted(values, key=lambda cv: cv[1], reverse=True)
        return [
            MetricRow(org=code, value=v, rank=i, share=(v / total) if total else None)
            for i, (code, v) in enumerate(ordered, start=1)
        ]

    def row(self, org: str, metric: str, year: int) -> MetricRow:
        self._org(org)
        for r in self.ranking(metric, year):
            if r.org == org:
                return r
        raise UnknownOrganization(org)

    def rank(self, org: str, metric: str, year: int) -> int:
        return self.row(org, metric, year).rank

    def share(self, org: str, metric: str, year: int) -> Optional[float]:
        """Share of the all-organization total, or None when the total is zero."""

        return self.row(org, metric, year).share
