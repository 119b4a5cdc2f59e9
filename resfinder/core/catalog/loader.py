from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from resfinder.core.exceptions import CatalogUnavailable
from resfinder.core.metrics import MetricTable

log = logging.getLogger("resfinder.catalog")

PathLike = Union[str, Path]


def _read_json(path: PathLike) -> Any:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        log.error("catalog file not found: %s", p)
        raise CatalogUnavailable(f"file not found: {p}") from None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        log.error("catalog file unreadable: %s (%s)", p, e)
        raise CatalogUnavailable(f"unreadable: {p}") from e


def load_raw_catalog(path: PathLike) -> List[Any]:
    """Read the raw catalog: a JSON list of records.

    Individual records are not validated here; the normalizer accepts
    anything. Only a missing, unreadable or non-list file is a failure.
    """

    data = _read_json(path)
    if not isinstance(data, list):
        log.error("catalog top level is %s, expected a list", type(data).__name__)
        raise CatalogUnavailable("catalog must be a JSON list")
    return data


def load_metric_table(path: PathLike) -> MetricTable:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise CatalogUnavailable("metric table must be a JSON object")
    try:
        return MetricTable.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        log.error("metric table invalid: %s (%s)", path, e)
        raise CatalogUnavailable(f"invalid metric table: {path}") from e
