"""Year-adjusted organization metrics, ranking and share of total."""

from .engine import (
    CATALOG_METRICS,
    YEARLY_GROWTH,
    MetricEngine,
    MetricRow,
    MetricTable,
    OrganizationMetrics,
    round_half_up,
)

__all__ = [
    "MetricEngine",
    "MetricTable",
    "MetricRow",
    "OrganizationMetrics",
    "CATALOG_METRICS",
    "YEARLY_GROWTH",
    "round_half_up",
]
