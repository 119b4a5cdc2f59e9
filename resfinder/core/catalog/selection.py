from __future__ import annotations

from typing import Optional, Sequence

from resfinder.core.normalization import Resource


def resolve_active_id(filtered: Sequence[Resource], previous_id: Optional[str]) -> Optional[str]:
    """Pick the active resource after the filtered sequence changes.

    The previous id stays active while it is still visible; otherwise the
    first visible resource becomes active, or nothing when none are visible.
    """

    if not filtered:
        return None
    if previous_id is not None and any(r.id == previous_id for r in filtered):
        return previous_id
    return filtered[0].id
