"""Normalization helpers for the resource catalog.

Normalization maps loosely-typed raw catalog records into the canonical
Resource shape used by search, facets, filtering and the API.

Notes:
- Never assume raw records are well-formed; every field degrades to a default.
- Keep transforms deterministic and free of side effects.
"""

from .normalizer import normalize_catalog, normalize_resource, placeholder_id
from .schema import (
    UNTITLED_RESOURCE,
    AccessCostGroup,
    IdentityGroup,
    LifecycleGroup,
    PracticalUsageGroup,
    RawRecord,
    Resource,
    TaggingGroup,
    TypeContentGroup,
)

__all__ = [
    "normalize_resource",
    "normalize_catalog",
    "placeholder_id",
    "Resource",
    "RawRecord",
    "IdentityGroup",
    "TypeContentGroup",
    "AccessCostGroup",
    "PracticalUsageGroup",
    "LifecycleGroup",
    "TaggingGroup",
    "UNTITLED_RESOURCE",
]
