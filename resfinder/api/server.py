from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from starlette.requests import Request

from resfinder.api.middleware import RESULT_COUNT_HEADER, CatalogRequestMiddleware
from resfinder.api.models import (
    FacetsOut,
    FilterResultOut,
    HealthOut,
    MetricRowOut,
    ResourceOut,
    SearchOut,
)
from resfinder.core.catalog import (
    ACCESS_MODEL,
    DATA_SENSITIVITY,
    DOMAIN,
    ORGANIZATION,
    RESOURCE_TYPE,
    FilterState,
    ResourceCatalog,
    resolve_active_id,
)
from resfinder.core.config import CatalogConfig
from resfinder.core.exceptions import CatalogUnavailable, UnknownMetric, UnknownOrganization
from resfinder.core.metrics import MetricRow
from resfinder.core.normalization import Resource

log = logging.getLogger("resfinder.api")


def _resource_out(r: Resource) -> ResourceOut:
    return ResourceOut(**r.to_dict())


def _metric_out(row: MetricRow, metric: str, year: int) -> MetricRowOut:
    return MetricRowOut(metric=metric, year=year, **row.to_dict())


def create_app(*, catalog_path: Optional[str] = None, cfg: Optional[CatalogConfig] = None) -> FastAPI:
    """Create the FastAPI app.

    The catalog is loaded once here. If loading fails the app still starts;
    every catalog endpoint then answers 503 catalog_unavailable.
    """

    cfg = cfg or CatalogConfig.from_env()
    if catalog_path:
        cfg = replace(cfg, catalog_path=Path(catalog_path))

    log.setLevel(os.environ.get("RESFINDER_LOG_LEVEL", "INFO").upper())

    app = FastAPI(title="Resource Finder API", version="0.1")
    app.state.cfg = cfg

    app.add_middleware(CatalogRequestMiddleware)

    try:
        app.state.catalog = ResourceCatalog.from_config(cfg)
    except CatalogUnavailable:
        log.exception("catalog unavailable")
        app.state.catalog = None

    def get_catalog(request: Request) -> ResourceCatalog:
        catalog = getattr(request.app.state, "catalog", None)
        if catalog is None:
            raise HTTPException(status_code=503, detail="catalog_unavailable")
        return catalog

    def get_filter_state(
        q: str = "",
        organization: List[str] = Query(default=[]),
        domain: List[str] = Query(default=[]),
        resource_type: List[str] = Query(default=[]),
        data_sensitivity: List[str] = Query(default=[]),
        access_model: List[str] = Query(default=[]),
        requires_api: bool = False,
        requires_web: bool = False,
        free_only: bool = False,
        open_access_only: bool = False,
        max_access: int = Query(default=2, ge=0, le=2),
        max_sensitivity: int = Query(default=2, ge=0, le=2),
    ) -> FilterState:
        return FilterState(
            query=q,
            selections={
                ORGANIZATION: organization,
                DOMAIN: domain,
                RESOURCE_TYPE: resource_type,
                DATA_SENSITIVITY: data_sensitivity,
                ACCESS_MODEL: access_model,
            },
            requires_api=requires_api,
            requires_web=requires_web,
            free_only=free_only,
            open_access_only=open_access_only,
            max_access_restrictiveness=max_access,
            max_sensitivity_restrictiveness=max_sensitivity,
        )

    @app.get("/health", response_model=HealthOut)
    def health(request: Request) -> HealthOut:
        catalog = getattr(request.app.state, "catalog", None)
        return HealthOut(
            ok=True,
            catalog_loaded=catalog is not None,
            resource_count=len(catalog.resources) if catalog else 0,
            search_engine=catalog.search_engine if catalog else None,
        )

    @app.get("/resources", response_model=FilterResultOut)
    def list_resources(
        response: Response,
        catalog: ResourceCatalog = Depends(get_catalog),
        state: FilterState = Depends(get_filter_state),
        active: Optional[str] = None,
    ) -> FilterResultOut:
        """Filtered resources.

        `active` is the id the client currently has expanded; it stays active
        while it is still in the result.
        """

        filtered = catalog.filter(state)
        response.headers[RESULT_COUNT_HEADER] = str(len(filtered))
        return FilterResultOut(
            count=len(filtered),
            active_id=resolve_active_id(filtered, active),
            resources=[_resource_out(r) for r in filtered],
        )

    @app.get("/resources/{resource_id}", response_model=ResourceOut)
    def get_resource(
        resource_id: str, catalog: ResourceCatalog = Depends(get_catalog)
    ) -> ResourceOut:
        r = catalog.get(resource_id)
        if r is None:
            raise HTTPException(status_code=404, detail="resource_not_found")
        return _resource_out(r)

    @app.get("/facets", response_model=FacetsOut)
    def facets(catalog: ResourceCatalog = Depends(get_catalog)) -> FacetsOut:
        return FacetsOut(facets=catalog.facets.to_dict())

    @app.get("/search", response_model=SearchOut)
    def search(
        response: Response,
        q: str = "",
        limit: Optional[int] = Query(default=None, ge=1),
        catalog: ResourceCatalog = Depends(get_catalog),
    ) -> SearchOut:
        ids = catalog.search(q, limit)
        response.headers[RESULT_COUNT_HEADER] = str(len(ids))
        return SearchOut(query=q, ids=ids)

    @app.get("/metrics/{metric}", response_model=List[MetricRowOut])
    def metric_ranking(
        metric: str,
        year: Optional[int] = None,
        catalog: ResourceCatalog = Depends(get_catalog),
    ) -> List[MetricRowOut]:
        y = year if year is not None else catalog.metrics.table.first_year
        try:
            rows = catalog.metric_ranking(metric, y)
        except UnknownMetric:
            raise HTTPException(status_code=404, detail="unknown_metric")
        return [_metric_out(r, metric, y) for r in rows]

    @app.get("/metrics/{metric}/{org}", response_model=MetricRowOut)
    def metric_for_org(
        metric: str,
        org: str,
        year: Optional[int] = None,
        catalog: ResourceCatalog = Depends(get_catalog),
    ) -> MetricRowOut:
        y = year if year is not None else catalog.metrics.table.first_year
        try:
            row = catalog.metrics.row(org, metric, y)
        except UnknownMetric:
            raise HTTPException(status_code=404, detail="unknown_metric")
        except UnknownOrganization:
            raise HTTPException(status_code=404, detail="unknown_organization")
        return _metric_out(row, metric, y)

    return app


def app_from_env() -> FastAPI:
    """Factory used by Uvicorn entrypoints.

    Reads RESFINDER_* variables (see CatalogConfig.from_env).

    """

    return create_app(cfg=CatalogConfig.from_env())
