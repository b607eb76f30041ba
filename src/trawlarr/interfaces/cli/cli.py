from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import structlog

from trawlarr.domain.definitions import DefinitionError
from trawlarr.domain.entities import IndexerConfig, RankedResult, SearchQuery
from trawlarr.infrastructure.composition import open_services
from trawlarr.infrastructure.config import AppConfig, load_config
from trawlarr.infrastructure.definitions import DefinitionRegistry
from trawlarr.infrastructure.logging.setup import configure_logging

log = structlog.get_logger(__name__)


def _parse_param(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected Name=value, got {raw!r}")
    return name.strip(), value


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    # Config wiring flags (no business logic), shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    common.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    common.add_argument(
        "--definitions-dir",
        default=None,
        help="Override indexer definitions directory.",
    )
    common.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    common.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    parser = argparse.ArgumentParser(prog="trawlarr")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser(
        "search", parents=[common], help="Search all enabled indexers."
    )
    search.add_argument("keywords", nargs="+", help="Search keywords.")
    search.add_argument(
        "--category",
        "-c",
        dest="categories",
        action="append",
        type=int,
        default=[],
        help="Category ID (repeatable).",
    )
    search.add_argument(
        "--param",
        "-p",
        dest="params",
        action="append",
        type=_parse_param,
        default=[],
        metavar="NAME=VALUE",
        help="Extra query parameter, e.g. Season=1 (repeatable).",
    )
    search.add_argument(
        "--indexer",
        "-i",
        dest="indexers",
        action="append",
        default=[],
        help="Only search this definition id (repeatable).",
    )
    search.add_argument("--min-seeders", type=int, default=0)
    search.add_argument("--max-results", type=int, default=None)
    search.add_argument(
        "--no-dedup",
        action="store_true",
        help="Keep duplicate releases reported by several indexers.",
    )

    sub.add_parser("list", parents=[common], help="List indexer definitions.")

    return parser.parse_args(argv)


def _result_to_dict(ranked: RankedResult) -> dict[str, Any]:
    r = ranked.result
    return {
        "title": r.title,
        "indexer": r.indexer,
        "download_url": r.download_url,
        "info_url": r.info_url,
        "size": r.size,
        "size_human": r.format_size(),
        "seeders": r.seeders,
        "leechers": r.leechers,
        "grabs": r.grabs,
        "category": r.category,
        "published_at": r.published_at.isoformat() if r.published_at else None,
        "imdb_id": r.imdb_id,
        "tmdb_id": r.tmdb_id,
        "quality": r.quality_description(),
        "score": round(ranked.final_score, 4),
    }


def _select_indexers(
    indexers: Sequence[IndexerConfig], wanted: Sequence[str]
) -> list[IndexerConfig]:
    if not wanted:
        return list(indexers)
    known = {i.definition.id for i in indexers}
    for name in wanted:
        if name not in known:
            log.warning("indexer_unknown", indexer=name)
    return [i for i in indexers if i.definition.id in wanted]


async def _run_search(config: AppConfig, args: argparse.Namespace) -> int:
    query = SearchQuery(
        keywords=" ".join(args.keywords),
        categories=tuple(args.categories),
        params=dict(args.params),
        min_seeders=args.min_seeders,
        max_results=args.max_results,
        deduplicate=not args.no_dedup,
    )

    async with open_services(config) as services:
        indexers = _select_indexers(services.indexers, args.indexers)
        ranked = await services.use_case.execute_ranked(indexers, query)

    json.dump([_result_to_dict(r) for r in ranked], sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def _run_list(config: AppConfig) -> int:
    registry = DefinitionRegistry(config.definitions_dir)
    try:
        definitions = registry.load_all()
    except DefinitionError as e:
        log.error("definitions_invalid", error=str(e))
        return 1

    rows: list[dict[str, Any]] = []
    for d in definitions:
        settings = config.indexers.get(d.id)
        rows.append(
            {
                "id": d.id,
                "name": d.name,
                "type": d.type,
                "language": d.language,
                "link": d.links[0] if d.links else None,
                "enabled": settings.enabled if settings else True,
            }
        )
    json.dump(rows, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """Process entrypoint: load config exactly once, then dispatch."""
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.definitions_dir:
        cli_overrides["definitions_dir"] = args.definitions_dir
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )

    configure_logging(config)

    if args.command == "list":
        return _run_list(config)
    return asyncio.run(_run_search(config, args))


if __name__ == "__main__":
    raise SystemExit(start())
