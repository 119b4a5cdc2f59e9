from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from resfinder.core.catalog import (
    ACCESS_MODEL,
    DATA_SENSITIVITY,
    DOMAIN,
    ORGANIZATION,
    RESOURCE_TYPE,
    FilterState,
    ResourceCatalog,
    resolve_active_id,
)
from resfinder.core.classification import explain_access_model, explain_sensitivity
from resfinder.core.config import SEARCH_ENGINES, CatalogConfig
from resfinder.core.exceptions import CatalogUnavailable, UnknownMetric, UnknownOrganization
from resfinder.utils.json_safe import to_jsonable


def _print_json(payload) -> None:
    print(json.dumps(to_jsonable(payload), indent=2, sort_keys=True))


def _config_from_args(args: argparse.Namespace) -> CatalogConfig:
    """Environment defaults, overridden by explicit CLI flags."""

    cfg = CatalogConfig.from_env()
    if getattr(args, "catalog", None):
        cfg = replace(cfg, catalog_path=Path(args.catalog))
    if getattr(args, "metrics_table", None):
        cfg = replace(cfg, metrics_path=Path(args.metrics_table))
    if getattr(args, "engine", None):
        cfg = replace(cfg, search_engine=args.engine)
    if getattr(args, "first_year", None) is not None:
        cfg = replace(cfg, first_year=int(args.first_year))
    return cfg


def _load_catalog(args: argparse.Namespace) -> Optional[ResourceCatalog]:
    cfg = _config_from_args(args)
    try:
        return ResourceCatalog.from_config(cfg)
    except CatalogUnavailable as e:
        print(f"error: catalog unavailable: {e}", file=sys.stderr)
        return None


def cmd_normalize(args: argparse.Namespace) -> int:
    """Print normalized resources (all, or one by id)."""

    catalog = _load_catalog(args)
    if catalog is None:
        return 2

    if args.id:
        r = catalog.get(args.id)
        if r is None:
            print(f"error: resource not found: {args.id}", file=sys.stderr)
            return 2
        _print_json(r)
        return 0

    _print_json(list(catalog.resources))
    return 0


def cmd_facets(args: argparse.Namespace) -> int:
    catalog = _load_catalog(args)
    if catalog is None:
        return 2
    _print_json(catalog.facets)
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    catalog = _load_catalog(args)
    if catalog is None:
        return 2
    ids = catalog.search(args.query, args.limit)
    _print_json({"query": args.query, "engine": catalog.search_engine, "ids": ids})
    return 0


def cmd_filter(args: argparse.Namespace) -> int:
    """Apply a filter state and print the visible resources."""

    catalog = _load_catalog(args)
    if catalog is None:
        return 2

    try:
        state = FilterState(
            query=args.query or "",
            selections={
                ORGANIZATION: args.organization or [],
                DOMAIN: args.domain or [],
                RESOURCE_TYPE: args.resource_type or [],
                DATA_SENSITIVITY: args.data_sensitivity or [],
                ACCESS_MODEL: args.access_model or [],
            },
            requires_api=bool(args.requires_api),
            requires_web=bool(args.requires_web),
            free_only=bool(args.free_only),
            open_access_only=bool(args.open_access_only),
            max_access_restrictiveness=int(args.max_access),
            max_sensitivity_restrictiveness=int(args.max_sensitivity),
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    filtered = catalog.filter(state)
    output = {
        "count": len(filtered),
        "active_id": resolve_active_id(filtered, args.active),
    }
    if args.ids_only:
        output["ids"] = [r.id for r in filtered]
    else:
        output["resources"] = list(filtered)
    _print_json(output)
    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Explain the restrictiveness tier assigned to a description."""

    explain = explain_access_model if args.kind == "access" else explain_sensitivity
    _print_json({"kind": args.kind, "text": args.text, "decision": explain(args.text)})
    return 0


def cmd_metrics(args: argparse.Namespace) -> int:
    """Rank organizations by a year-adjusted metric (or show one organization)."""

    catalog = _load_catalog(args)
    if catalog is None:
        return 2

    year = args.year if args.year is not None else catalog.metrics.table.first_year
    try:
        if args.org:
            payload = catalog.metrics.row(args.org, args.metric, year)
        else:
            payload = catalog.metric_ranking(args.metric, year)
    except UnknownMetric:
        print(f"error: unknown metric: {args.metric}", file=sys.stderr)
        return 2
    except UnknownOrganization:
        print(f"error: unknown organization: {args.org}", file=sys.stderr)
        return 2

    _print_json({"metric": args.metric, "year": year, "rows": payload})
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server.

    Binds to 127.0.0.1 by default.
    """

    try:
        import uvicorn
    except Exception as e:
        print(f"error: uvicorn is required to serve the API: {e}", file=sys.stderr)
        return 2

    try:
        from resfinder.api.server import create_app
    except Exception as e:
        print(f"error: API server dependencies missing: {e}", file=sys.stderr)
        return 2

    app = create_app(cfg=_config_from_args(args))
    uvicorn.run(app, host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def _add_catalog_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--catalog", default=None, help="Raw catalog JSON (default: $RESFINDER_CATALOG_PATH)"
    )
    p.add_argument("--engine", choices=SEARCH_ENGINES, default=None, help="Search engine")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="resfinder", description="Research resource catalog tools")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = p.add_subparsers(dest="cmd", required=True)

    np = sub.add_parser("normalize", help="Print normalized resources")
    _add_catalog_args(np)
    np.add_argument("--id", default=None, help="Only the resource with this id")
    np.set_defaults(func=cmd_normalize)

    fp = sub.add_parser("facets", help="Print facet option lists")
    _add_catalog_args(fp)
    fp.set_defaults(func=cmd_facets)

    sp = sub.add_parser("search", help="Search resources by free text")
    _add_catalog_args(sp)
    sp.add_argument("query", help="Search text")
    sp.add_argument("--limit", type=int, default=None, help="Max results (bm25 engine only)")
    sp.set_defaults(func=cmd_search)

    fl = sub.add_parser("filter", help="Filter resources by query, facets, toggles, thresholds")
    _add_catalog_args(fl)
    fl.add_argument("--query", "-q", default="", help="Search text")
    fl.add_argument("--organization", action="append", help="Organization (repeatable)")
    fl.add_argument("--domain", action="append", help="Domain (repeatable)")
    fl.add_argument("--resource-type", action="append", help="Resource type (repeatable)")
    fl.add_argument("--data-sensitivity", action="append", help="Data sensitivity (repeatable)")
    fl.add_argument("--access-model", action="append", help="Access model (repeatable)")
    fl.add_argument("--requires-api", action="store_true", help="Only resources with an API")
    fl.add_argument("--requires-web", action="store_true", help="Only web-based resources")
    fl.add_argument("--free-only", action="store_true", help="Only free resources")
    fl.add_argument("--open-access-only", action="store_true", help="Only open access resources")
    fl.add_argument("--max-access", type=int, default=2, help="Access restrictiveness 0-2")
    fl.add_argument("--max-sensitivity", type=int, default=2, help="Sensitivity 0-2")
    fl.add_argument("--active", default=None, help="Currently active resource id")
    fl.add_argument("--ids-only", action="store_true", help="Print ids instead of resources")
    fl.set_defaults(func=cmd_filter)

    cp = sub.add_parser("classify", help="Explain a restrictiveness tier")
    cp.add_argument("kind", choices=("access", "sensitivity"), help="Which classifier")
    cp.add_argument("text", help="Free-text description")
    cp.set_defaults(func=cmd_classify)

    mp = sub.add_parser("metrics", help="Rank organizations by a metric")
    _add_catalog_args(mp)
    mp.add_argument("metric", help="Metric key, e.g. resources")
    mp.add_argument("--year", type=int, default=None, help="Fiscal year (default: first year)")
    mp.add_argument("--org", default=None, help="Only this organization")
    mp.add_argument("--metrics-table", default=None, help="Metric table JSON")
    mp.add_argument("--first-year", type=int, default=None, help="First fiscal year")
    mp.set_defaults(func=cmd_metrics)

    sv = sub.add_parser("serve", help="Run the FastAPI server")
    _add_catalog_args(sv)
    sv.add_argument("--metrics-table", default=None, help="Metric table JSON")
    sv.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    sv.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    sv.add_argument("--log-level", default="info", help="Uvicorn log level")
    sv.set_defaults(func=cmd_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
