"""Catalog facade, facet catalog, filter pipeline and selection rule."""

from .catalog import ResourceCatalog
from .facets import (
    ACCESS_MODEL,
    DATA_SENSITIVITY,
    DOMAIN,
    FACET_NAMES,
    ORGANIZATION,
    RESOURCE_TYPE,
    FacetCatalog,
    build_facet_catalog,
    facet_values,
    unique_sorted,
)
from .filtering import FilterState, filter_resources
from .loader import load_metric_table, load_raw_catalog
from .selection import resolve_active_id

__all__ = [
    "ResourceCatalog",
    "FacetCatalog",
    "build_facet_catalog",
    "facet_values",
    "unique_sorted",
    "FACET_NAMES",
    "ORGANIZATION",
    "DOMAIN",
    "RESOURCE_TYPE",
    "DATA_SENSITIVITY",
    "ACCESS_MODEL",
    "FilterState",
    "filter_resources",
    "resolve_active_id",
    "load_raw_catalog",
    "load_metric_table",
]
