from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class HealthOut(BaseModel):
    ok: bool
    catalog_loaded: bool
    resource_count: int = 0
    search_engine: Optional[str] = None


class ResourceOut(BaseModel):
    """One normalized catalog entry."""

    id: str
    name: str
    short_name: str = ""
    org_code: str = ""
    org_name: str = ""
    primary_url: str = ""
    docs_url: str = ""
    api_url: str = ""
    resource_types: List[str] = Field(default_factory=list)
    domains: List[str] = Field(default_factory=list)
    skills_required: List[str] = Field(default_factory=list)
    compute_location: List[str] = Field(default_factory=list)
    integration_parents: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    maintaining_orgs: List[str] = Field(default_factory=list)
    cost_status: str = ""
    access_model: str = ""
    data_sensitivity: str = ""
    typical_use_cases: str = ""
    notes: str = ""
    status: str = ""
    requires_agreement: bool = False
    requires_registration: bool = False
    has_human_data: bool = False
    has_api: bool = False
    is_web_based: bool = False
    access_restrictiveness: int = 1
    sensitivity_restrictiveness: int = 1


class FilterResultOut(BaseModel):
    """Filtered resources plus the resource that stays active."""

    count: int
    active_id: Optional[str] = None
    resources: List[ResourceOut] = Field(default_factory=list)


class SearchOut(BaseModel):
    query: str
    ids: List[str] = Field(default_factory=list)


class FacetsOut(BaseModel):
    facets: Dict[str, List[str]] = Field(default_factory=dict)


class MetricRowOut(BaseModel):
    """One organization's year-adjusted metric. share is null when the total is zero."""

    org: str
    metric: str
    year: int
    value: int
    rank: int
    share: Optional[float] = None
