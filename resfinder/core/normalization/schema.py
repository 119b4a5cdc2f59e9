from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Tuple

UNTITLED_RESOURCE: str = "Untitled Resource"

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1"})


def as_text(value: Any) -> str:
    """Coerce a raw scalar into a string. Never raises."""

    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def as_text_list(value: Any) -> Tuple[str, ...]:
    """Coerce a raw sequence into a tuple of non-empty strings.

    A bare string becomes a one-element tuple.
    """

    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    out = []
    for item in value:
        text = as_text(item)
        if text:
            out.append(text)
    return tuple(out)


def as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


def _group(raw: Any, key: str) -> Mapping[str, Any]:
    value = raw.get(key) if isinstance(raw, Mapping) else None
    return value if isinstance(value, Mapping) else {}


@dataclass(frozen=True)
class IdentityGroup:
    """Who the resource is and where it lives."""

    id: str = ""
    resource_name: str = ""
    short_name: str = ""
    ic_code: str = ""
    ic_name: str = ""
    primary_url: str = ""
    docs_url: str = ""
    api_url: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "IdentityGroup":
        return cls(
            id=as_text(raw.get("id")),
            resource_name=as_text(raw.get("resource_name")),
            short_name=as_text(raw.get("short_name")),
            ic_code=as_text(raw.get("ic_code")),
            ic_name=as_text(raw.get("ic_name")),
            primary_url=as_text(raw.get("primary_url")),
            docs_url=as_text(raw.get("docs_url")),
            api_url=as_text(raw.get("api_url")),
        )


@dataclass(frozen=True)
class TypeContentGroup:
    resource_type: Tuple[str, ...] = ()
    domains: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "TypeContentGroup":
        return cls(
            resource_type=as_text_list(raw.get("resource_type")),
            domains=as_text_list(raw.get("domains")),
        )


@dataclass(frozen=True)
class AccessCostGroup:
    cost_status: str = ""
    access_model: str = ""
    requires_dua: bool = False
    requires_registration: bool = False
    data_sensitivity: str = ""
    has_human_data: bool = False

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "AccessCostGroup":
        return cls(
            cost_status=as_text(raw.get("cost_status")),
            access_model=as_text(raw.get("access_model")),
            requires_dua=as_flag(raw.get("requires_dua")),
            requires_registration=as_flag(raw.get("requires_registration")),
            data_sensitivity=as_text(raw.get("data_sensitivity")),
            has_human_data=as_flag(raw.get("has_human_data")),
        )


@dataclass(frozen=True)
class PracticalUsageGroup:
    compute_location: Tuple[str, ...] = ()
    skills_required: Tuple[str, ...] = ()
    typical_use_cases: str = ""
    integration_parents: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "PracticalUsageGroup":
        return cls(
            compute_location=as_text_list(raw.get("compute_location")),
            skills_required=as_text_list(raw.get("skills_required")),
            typical_use_cases=as_text(raw.get("typical_use_cases")),
            integration_parents=as_text_list(raw.get("integration_parents")),
        )


@dataclass(frozen=True)
class LifecycleGroup:
    maintaining_ic: Tuple[str, ...] = ()
    notes: str = ""
    status: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "LifecycleGroup":
        return cls(
            maintaining_ic=as_text_list(raw.get("maintaining_ic")),
            notes=as_text(raw.get("notes")),
            status=as_text(raw.get("status")),
        )


@dataclass(frozen=True)
class TaggingGroup:
    keywords: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "TaggingGroup":
        return cls(keywords=as_text_list(raw.get("keywords")))


@dataclass(frozen=True)
class RawRecord:
    """Typed view of one raw catalog record.

    Every group is present; absent or malformed groups are empty defaults.

    Time:  O(n) in the number of raw fields
    Space: O(n)
    """

    identity: IdentityGroup
    type_content: TypeContentGroup
    access_cost: AccessCostGroup
    practical_usage: PracticalUsageGroup
    lifecycle: LifecycleGroup
    tagging: TaggingGroup

    @classmethod
    def from_raw(cls, raw: Any) -> "RawRecord":
        return cls(
            identity=IdentityGroup.from_raw(_group(raw, "identity")),
            type_content=TypeContentGroup.from_raw(_group(raw, "type_content")),
            access_cost=AccessCostGroup.from_raw(_group(raw, "access_cost")),
            practical_usage=PracticalUsageGroup.from_raw(_group(raw, "practical_usage")),
            lifecycle=LifecycleGroup.from_raw(_group(raw, "lifecycle_curation")),
            tagging=TaggingGroup.from_raw(_group(raw, "tagging")),
        )


@dataclass(frozen=True)
class Resource:
    """
    Canonical, immutable catalog entry.

    Invariants
    - id is non-empty and unique within its collection
    - sequence fields are tuples (insertion order preserved for display)
    - restrictiveness tiers are in {0, 1, 2}
    """

    id: str
    name: str = UNTITLED_RESOURCE
    short_name: str = ""
    org_code: str = ""
    org_name: str = ""
    primary_url: str = ""
    docs_url: str = ""
    api_url: str = ""
    resource_types: Tuple[str, ...] = ()
    domains: Tuple[str, ...] = ()
    skills_required: Tuple[str, ...] = ()
    compute_location: Tuple[str, ...] = ()
    integration_parents: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    maintaining_orgs: Tuple[str, ...] = ()
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

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Resource.id must be a non-empty string")
        for tier in (self.access_restrictiveness, self.sensitivity_restrictiveness):
            if tier not in (0, 1, 2):
                raise ValueError("restrictiveness tiers must be 0, 1 or 2")

    def organizations(self) -> Tuple[str, ...]:
        """Organizations used for grouping and filtering.

        maintaining_orgs when present, else org_code, else nothing.
        """

        if self.maintaining_orgs:
            return self.maintaining_orgs
        if self.org_code:
            return (self.org_code,)
        return ()

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for k, v in out.items():
            if isinstance(v, tuple):
                out[k] = list(v)
        return out
