from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Set, Tuple

from resfinder.core.classification import classify_access_model, classify_sensitivity

from .schema import UNTITLED_RESOURCE, RawRecord, Resource

log = logging.getLogger("resfinder.catalog")


def placeholder_id(index: int) -> str:
    return f"resource-{index}"


def _is_web_based(compute_location: Iterable[str]) -> bool:
    return any("web" in loc.casefold() for loc in compute_location)


def normalize_resource(raw: Any, index: int) -> Resource:
    """Normalize one raw catalog record into a Resource.

    Notes:
    - Never raises: absent or malformed groups degrade to typed defaults.
    - Pure function; records can be normalized independently and in any order.

    Time:  O(n) in the size of the record
    Space: O(n)
    """

    rec = RawRecord.from_raw(raw)
    ident = rec.identity
    access = rec.access_cost
    usage = rec.practical_usage

    return Resource(
        id=ident.id or placeholder_id(index),
        name=ident.resource_name or UNTITLED_RESOURCE,
        short_name=ident.short_name,
        org_code=ident.ic_code,
        org_name=ident.ic_name,
        primary_url=ident.primary_url,
        docs_url=ident.docs_url,
        api_url=ident.api_url,
        resource_types=rec.type_content.resource_type,
        domains=rec.type_content.domains,
        skills_required=usage.skills_required,
        compute_location=usage.compute_location,
        integration_parents=usage.integration_parents,
        keywords=rec.tagging.keywords,
        maintaining_orgs=rec.lifecycle.maintaining_ic,
        cost_status=access.cost_status,
        access_model=access.access_model,
        data_sensitivity=access.data_sensitivity,
        typical_use_cases=usage.typical_use_cases,
        notes=rec.lifecycle.notes,
        status=rec.lifecycle.status,
        requires_agreement=access.requires_dua,
        requires_registration=access.requires_registration,
        has_human_data=access.has_human_data,
        has_api=bool(ident.api_url),
        is_web_based=_is_web_based(usage.compute_location),
        access_restrictiveness=classify_access_model(access.access_model),
        sensitivity_restrictiveness=classify_sensitivity(access.data_sensitivity),
    )


def normalize_catalog(records: Any) -> Tuple[Resource, ...]:
    """Normalize a raw record sequence into a Resource collection.

    Duplicate ids are made unique by suffixing the record's position, so
    every id in the returned collection is distinct.
    """

    if not isinstance(records, (list, tuple)):
        return ()

    out: List[Resource] = []
    seen: Set[str] = set()
    for index, raw in enumerate(records):
        resource = normalize_resource(raw, index)
        if resource.id in seen:
            unique_id = f"{resource.id}-{index}"
            while unique_id in seen:
                unique_id = f"{unique_id}-{index}"
            log.warning("duplicate resource id %r renamed to %r", resource.id, unique_id)
            resource = replace(resource, id=unique_id)
        seen.add(resource.id)
        out.append(resource)
    return tuple(out)
