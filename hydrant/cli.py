"""
Command-line debug harness: run one query against Solr and print the
decoded response (references, total and typed facets) as JSON.

Usage:

    python -m hydrant --url http://localhost:8983/solr/core \
        --type Post --facet blog_id:integer --facet published:boolean --page 1

Entities are not hydrated; only the raw references are shown.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from .config import FieldType, settings
from .errors import HydrantError
from .search.backends.solr import HttpSolrTransport
from .search.fields import FieldNameCodec
from .search.interfaces import Transport
from .search.query import FacetRequest, SearchQuery
from .search.session import SearchSession
from .utils.logging import configure_json_logging

log = logging.getLogger("hydrant.cli")


def _facet_request(value: str) -> FacetRequest:
    # name[:type], with "namespace/name" for dynamic fields
    name, _, type_name = value.partition(":")
    namespace: Optional[str] = None
    if "/" in name:
        namespace, name = name.split("/", 1)
    try:
        field_type = FieldType(type_name or FieldType.string.value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"unknown field type in {value!r}") from None
    return FacetRequest(name, field_type, namespace=namespace)


def build_query(args: argparse.Namespace, codec: FieldNameCodec) -> SearchQuery:
    facets: List[FacetRequest] = list(args.facet or [])
    params: Dict[str, Any] = {"q": args.q}
    if args.type:
        params["fq"] = "type:(" + " OR ".join(args.type) + ")"
    if args.per_page:
        params["rows"] = args.per_page
        params["start"] = ((args.page or 1) - 1) * args.per_page
    if facets:
        params["facet"] = "true"
        params["facet.field"] = [codec.encode(f.name, f.field_type, f.namespace) for f in facets]
    return SearchQuery(
        types=list(args.type or []),
        page=args.page,
        per_page=args.per_page,
        facets=facets,
        params=params,
    )


def _row_json(value: Any) -> Any:
    if hasattr(value, "start") and hasattr(value, "end"):
        return {"start": value.start.isoformat(), "end": value.end.isoformat()}
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hydrant", description="Decode one Solr search response")
    p.add_argument("--url", default=settings.SOLR_URL, help="Solr core URL (default: SOLR_URL)")
    p.add_argument("--q", default="*:*", help="Query string")
    p.add_argument("--type", action="append", help="Entity class to search (repeatable)")
    p.add_argument("--page", type=int, default=None)
    p.add_argument("--per-page", type=int, default=None)
    p.add_argument(
        "--facet",
        action="append",
        type=_facet_request,
        help="Facet to request as name[:type] or namespace/name[:type] (repeatable)",
    )
    p.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level (default: LOG_LEVEL)")
    return p


def main(argv: Optional[Sequence[str]] = None, transport: Optional[Transport] = None) -> int:
    args = _parser().parse_args(argv)
    configure_json_logging(args.log_level)

    codec = FieldNameCodec.from_settings(settings)
    query = build_query(args, codec)
    if transport is None:
        if not args.url:
            log.error("cli.no_url")
            print("error: --url or SOLR_URL is required", file=sys.stderr)
            return 2
        transport = owned = HttpSolrTransport(args.url)
    else:
        owned = None

    try:
        rs = SearchSession(transport).search(query)
    except HydrantError as exc:
        log.error("cli.search_failed error=%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if owned is not None:
            owned.close()

    out: Dict[str, Any] = {
        "total": rs.total,
        "results": [[r.class_name, r.primary_key] for r in rs.raw_results],
        "facets": {},
        "facet_errors": {k: str(v) for k, v in rs.facet_errors.items()},
    }
    for req in query.facets:
        label = f"{req.namespace}/{req.name}" if req.namespace else req.name
        try:
            field = rs.dynamic_facet(req.namespace, req.name) if req.namespace else rs.facet(req.name)
        except HydrantError:
            continue
        out["facets"][label] = [
            {
                "value": None if row.error else _row_json(row.value),
                "count": row.count,
                "error": str(row.error) if row.error else None,
            }
            for row in field.rows
        ]

    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0
