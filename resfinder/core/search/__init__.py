"""Text search over the normalized catalog.

Two interchangeable implementations share the SearchIndex interface:
an Okapi BM25 engine and a substring-scan fallback.
"""

from .index import (
    DEFAULT_LIMIT,
    Bm25SearchIndex,
    SearchIndex,
    SubstringSearchIndex,
    build_search_index,
    search_fields,
    search_text,
)

__all__ = [
    "SearchIndex",
    "Bm25SearchIndex",
    "SubstringSearchIndex",
    "build_search_index",
    "search_fields",
    "search_text",
    "DEFAULT_LIMIT",
]
