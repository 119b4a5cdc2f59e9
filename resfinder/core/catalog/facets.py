from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, Tuple

from resfinder.core.normalization import Resource
from resfinder.utils.text import collation_key, fold

ORGANIZATION = "organization"
DOMAIN = "domain"
RESOURCE_TYPE = "resource_type"
DATA_SENSITIVITY = "data_sensitivity"
ACCESS_MODEL = "access_model"


def _single(value: str) -> Tuple[str, ...]:
    return (value,) if value else ()


# Facet name -> the resource's own values for that facet.
FACET_VALUES: Mapping[str, Callable[[Resource], Tuple[str, ...]]] = {
    ORGANIZATION: lambda r: r.organizations(),
    DOMAIN: lambda r: r.domains,
    RESOURCE_TYPE: lambda r: r.resource_types,
    DATA_SENSITIVITY: lambda r: _single(r.data_sensitivity),
    ACCESS_MODEL: lambda r: _single(r.access_model),
}

FACET_NAMES: Tuple[str, ...] = tuple(FACET_VALUES)


def facet_values(resource: Resource, facet: str) -> Tuple[str, ...]:
    try:
        extract = FACET_VALUES[facet]
    except KeyError:
        raise ValueError(f"Unknown facet: {facet}") from None
    return tuple(v for v in extract(resource) if v)


def unique_sorted(values: Iterable[str]) -> Tuple[str, ...]:
    """Distinct non-empty values in collation order.

    Values equal up to case and accents collapse to the first spelling seen.

    Time:  O(n log n)
    Space: O(n)
    """

    first_seen: Dict[str, str] = {}
    for v in values:
        if not v:
            continue
        first_seen.setdefault(fold(v), v)
    return tuple(sorted(first_seen.values(), key=collation_key))


@dataclass(frozen=True)
class FacetCatalog:
    """
    Option lists per facet, derived from a Resource collection.

    Rebuilt wholesale when the collection changes; never patched.
    """

    options: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def get(self, facet: str) -> Tuple[str, ...]:
        if facet not in FACET_VALUES:
            raise ValueError(f"Unknown facet: {facet}")
        return self.options.get(facet, ())

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(self.options.get(name, ())) for name in FACET_NAMES}


def build_facet_catalog(resources: Sequence[Resource]) -> FacetCatalog:
    options = {
        name: unique_sorted(v for r in resources for v in facet_values(r, name))
        for name in FACET_NAMES
    }
    return FacetCatalog(options=options)
