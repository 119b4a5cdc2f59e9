from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SEARCH_ENGINES = ("bm25", "scan")


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Configuration shared by the CLI and the API service.

    Notes:
    - metrics_path is optional. If not provided, metrics are derived from the
      catalog itself.
    - search_engine is selected once, when the catalog is built.

    """

    catalog_path: Path = Path("resources.json")
    metrics_path: Optional[Path] = None
    search_engine: str = "bm25"
    search_limit: int = 100
    first_year: int = 2020

    def __post_init__(self) -> None:
        if self.search_engine not in SEARCH_ENGINES:
            raise ValueError(f"search_engine must be one of {SEARCH_ENGINES}")
        if self.search_limit < 1:
            raise ValueError("search_limit must be positive")

    @staticmethod
    def from_env() -> "CatalogConfig":
        """Create a config from environment variables.

        - RESFINDER_CATALOG_PATH (default resources.json)
        - RESFINDER_METRICS_PATH (default unset)
        - RESFINDER_SEARCH_ENGINE (default bm25)
        - RESFINDER_SEARCH_LIMIT (default 100)
        - RESFINDER_FIRST_YEAR (default 2020)

        """

        metrics_raw = os.environ.get("RESFINDER_METRICS_PATH", "").strip()
        engine = os.environ.get("RESFINDER_SEARCH_ENGINE", "bm25").strip().lower() or "bm25"
        return CatalogConfig(
            catalog_path=Path(
                os.environ.get("RESFINDER_CATALOG_PATH", "").strip() or "resources.json"
            ),
            metrics_path=Path(metrics_raw) if metrics_raw else None,
            search_engine=engine,
            search_limit=max(1, env_int("RESFINDER_SEARCH_LIMIT", 100)),
            first_year=env_int("RESFINDER_FIRST_YEAR", 2020),
        )


def env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to default."""

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)
