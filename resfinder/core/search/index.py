from __future__ import annotations

import bisect
import logging
from typing import FrozenSet, List, Optional, Protocol, Sequence, Tuple

from rank_bm25 import BM25Okapi

from resfinder.core.normalization import Resource
from resfinder.utils.text import fold, tokenize

log = logging.getLogger("resfinder.search")

DEFAULT_LIMIT = 100


def search_fields(resource: Resource) -> Tuple[str, ...]:
    """Searchable text fields of a resource, empty fields omitted.

    Sequence fields are joined by a single space.
    """

    fields = (
        resource.name,
        resource.short_name,
        resource.org_code,
        resource.org_name,
        " ".join(resource.resource_types),
        " ".join(resource.domains),
        resource.typical_use_cases,
        " ".join(resource.skills_required),
        " ".join(resource.keywords),
        resource.notes,
    )
    return tuple(f for f in fields if f)


def search_text(resource: Resource) -> str:
    return " ".join(search_fields(resource))


class SearchIndex(Protocol):
    """Capability interface shared by every index implementation.

    Both implementations answer with matching ids only, so callers never
    need to know which one is in use.
    """

    engine: str

    def query(self, text: str, limit: Optional[int] = None) -> List[str]:
        ...


class Bm25SearchIndex:
    """Engine-backed index using Okapi BM25 for ranking.

    Matching rules:
    - Query and document text are folded (case, accents) and split into
      alphanumeric tokens.
    - Each query token matches any indexed token it is a prefix of.
    - A resource matches when every query token matches.
    - Matches are ordered by BM25 score, ties in collection order, and
      truncated to `limit`.

    Time:  O(n * t) to build for n resources of t tokens; query O(n * q)
    Space: O(n * t)
    """

    engine = "bm25"

    def __init__(self, resources: Sequence[Resource], *, default_limit: int = DEFAULT_LIMIT):
        self._ids: List[str] = [r.id for r in resources]
        self._tokens: List[List[str]] = [tokenize(search_text(r)) for r in resources]
        self._token_sets: List[FrozenSet[str]] = [frozenset(t) for t in self._tokens]
        self._vocabulary: List[str] = sorted(set().union(*self._token_sets))
        self._default_limit = int(default_limit)
        # BM25Okapi divides by the average document length.
        self._bm25 = BM25Okapi(self._tokens) if self._vocabulary else None

    def _expand(self, prefix: str) -> FrozenSet[str]:
        start = bisect.bisect_left(self._vocabulary, prefix)
        out = []
        for term in self._vocabulary[start:]:
            if not term.startswith(prefix):
                break
            out.append(term)
        return frozenset(out)

    def query(self, text: str, limit: Optional[int] = None) -> List[str]:
        if not (text or "").strip():
            return list(self._ids)

        q_tokens = tokenize(text)
        if not q_tokens or self._bm25 is None:
            return []

        expansions = [self._expand(t) for t in q_tokens]
        if not all(expansions):
            return []

        matches = [
            i
            for i, tokens in enumerate(self._token_sets)
            if all(tokens & terms for terms in expansions)
        ]
        if not matches:
            return []

        scores = self._bm25.get_scores(sorted(frozenset().union(*expansions)))
        matches.sort(key=lambda i: -float(scores[i]))

        lim = self._default_limit if limit is None else int(limit)
        return [self._ids[i] for i in matches[: max(0, lim)]]


class SubstringSearchIndex:
    """Fallback index: case-insensitive substring scan.

    Returns every matching id in collection order; no ranking and no
    limit truncation.
    """

    engine = "scan"

    def __init__(self, resources: Sequence[Resource]):
        self._entries: List[Tuple[str, Tuple[str, ...]]] = [
            (r.id, tuple(fold(f) for f in search_fields(r))) for r in resources
        ]

    def query(self, text: str, limit: Optional[int] = None) -> List[str]:
        needle = fold((text or "").strip())
        if not needle:
            return [rid for rid, _ in self._entries]
        return [rid for rid, fields in self._entries if any(needle in f for f in fields)]


def build_search_index(
    resources: Sequence[Resource],
    *,
    engine: str = "bm25",
    default_limit: int = DEFAULT_LIMIT,
) -> SearchIndex:
    """Build the configured search index.

    Selection happens once, here; call sites only see SearchIndex.
    """

    if engine == "bm25":
        index: SearchIndex = Bm25SearchIndex(resources, default_limit=default_limit)
    elif engine == "scan":
        index = SubstringSearchIndex(resources)
    else:
        raise ValueError(f"Unknown search engine: {engine}")

    log.info("search index built", extra={"engine": index.engine, "resources": len(resources)})
    return index
