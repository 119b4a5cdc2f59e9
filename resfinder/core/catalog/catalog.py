from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from resfinder.core.config import CatalogConfig
from resfinder.core.metrics import MetricEngine, MetricRow, MetricTable
from resfinder.core.normalization import Resource, normalize_catalog
from resfinder.core.search import DEFAULT_LIMIT, SearchIndex, build_search_index

from .facets import FacetCatalog, build_facet_catalog
from .filtering import FilterState, filter_resources
from .loader import load_metric_table, load_raw_catalog

log = logging.getLogger("resfinder.catalog")


class ResourceCatalog:
    """Normalized collection plus everything derived from it.

    The search index, facet catalog and metric engine are built once in the
    constructor. A changed collection means a new ResourceCatalog.

    Time:  O(n log n) to build for n resources
    Space: O(n)
    """

    def __init__(
        self,
        resources: Sequence[Resource],
        *,
        search_engine: str = "bm25",
        search_limit: int = DEFAULT_LIMIT,
        metrics: Optional[MetricTable] = None,
        first_year: int = 2020,
    ):
        self._resources: Tuple[Resource, ...] = tuple(resources)
        self._by_id: Dict[str, Resource] = {r.id: r for r in self._resources}
        if len(self._by_id) != len(self._resources):
            raise ValueError("resource ids must be unique")

        self._index: SearchIndex = build_search_index(
            self._resources, engine=search_engine, default_limit=search_limit
        )
        self._facets = build_facet_catalog(self._resources)
        table = metrics or MetricTable.from_resources(self._resources, first_year=first_year)
        self._metrics = MetricEngine(table)

        log.info(
            "catalog built",
            extra={"resources": len(self._resources), "engine": self._index.engine},
        )

    @classmethod
    def from_records(cls, records: Any, **kwargs: Any) -> "ResourceCatalog":
        return cls(normalize_catalog(records), **kwargs)

    @classmethod
    def from_config(cls, cfg: CatalogConfig) -> "ResourceCatalog":
        """Load and build a catalog. Raises CatalogUnavailable on load failure."""

        records = load_raw_catalog(cfg.catalog_path)
        table = load_metric_table(cfg.metrics_path) if cfg.metrics_path else None
        return cls.from_records(
            records,
            search_engine=cfg.search_engine,
            search_limit=cfg.search_limit,
            metrics=table,
            first_year=cfg.first_year,
        )

    @property
    def resources(self) -> Tuple[Resource, ...]:
        return self._resources

    @property
    def facets(self) -> FacetCatalog:
        return self._facets

    @property
    def search_engine(self) -> str:
        return self._index.engine

    @property
    def metrics(self) -> MetricEngine:
        return self._metrics

    def get(self, resource_id: str) -> Optional[Resource]:
        return self._by_id.get(resource_id)

    def search(self, query: str, limit: Optional[int] = None) -> List[str]:
        """Ids matching a free-text query.

        An empty query matches everything without touching the index.
        """

        if not (query or "").strip():
            return [r.id for r in self._resources]
        return self._index.query(query, limit)

    def filter(self, state: FilterState) -> Tuple[Resource, ...]:
        search_ids = self.search(state.query) if state.search_active else None
        return filter_resources(self._resources, state, search_ids)

    def metric_value(self, org: str, metric: str, year: int) -> int:
        return self._metrics.value(org, metric, year)

    def metric_rank(self, org: str, metric: str, year: int) -> int:
        return self._metrics.rank(org, metric, year)

    def metric_share(self, org: str, metric: str, year: int) -> Optional[float]:
        return self._metrics.share(org, metric, year)

    def metric_ranking(self, metric: str, year: int) -> List[MetricRow]:
        return self._metrics.ranking(metric, year)
