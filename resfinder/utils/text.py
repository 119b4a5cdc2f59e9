from __future__ import annotations

import re
import unicodedata
from typing import List, Tuple

_TOKEN_RE = re.compile(r"[0-9a-z]+")


def fold(s: str) -> str:
    """Case- and accent-insensitive form of a string ("Café" -> "cafe")."""

    nfkd = unicodedata.normalize("NFKD", s or "")
    return "".join(ch for ch in nfkd if not unicodedata.combining(ch)).casefold()


def collation_key(s: str) -> Tuple[str, str]:
    """Sort key approximating base-sensitivity locale collation.

    Ties between strings that differ only in case or accents are broken by
    the raw string so the order stays deterministic.
    """

    return (fold(s), s)


def tokenize(s: str) -> List[str]:
    return _TOKEN_RE.findall(fold(s))
