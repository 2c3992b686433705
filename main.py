from __future__ import annotations

import argparse
import logging
from datetime import timezone
from pathlib import Path

import requests

from mapdata.base import RunContext
from mapdata.extract import build_categorized_output, find_group_by_type
from mapdata.fetch import fetch_document, load_document
from mapdata.models import CategoryTabs
from mapdata.output import write_group, write_outputs
from utils.logs import setup_logging
from utils.settings import get_setting, load_settings
from utils.time import is_yyyymmdd, utc_date_yyyymmdd, utc_now

logger = logging.getLogger("main")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Mirror the game map data into per-category JSON files"
    )
    ap.add_argument("--settings", default="config/settings.yaml")
    ap.add_argument(
        "--out", default="", help="Output directory (defaults to output.dir in settings)"
    )
    ap.add_argument(
        "--input",
        default="",
        help="Read the map data from a saved JSON file instead of fetching it.",
    )
    ap.add_argument(
        "--group-type",
        action="append",
        default=[],
        help="Also write the raw top-level group with this type (repeatable).",
    )
    ap.add_argument(
        "--run-date", default="", help="UTC date YYYY-MM-DD (defaults to today)"
    )
    ap.add_argument("--log-file", default="")
    ap.add_argument("--debug", action="store_true")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    setup_logging(
        logging.DEBUG if args.debug else logging.INFO,
        log_file=args.log_file.strip() or None,
    )

    settings_path = Path(args.settings)
    if settings_path.exists() or args.settings != "config/settings.yaml":
        settings = load_settings(settings_path)
    else:
        logger.warning(f"[main] {settings_path} not found, using built-in settings")
        settings = load_settings()

    now = utc_now()
    run_date = args.run_date.strip() or utc_date_yyyymmdd(now)
    if not is_yyyymmdd(run_date):
        logger.error(f"[main] Invalid --run-date {run_date!r}, expected YYYY-MM-DD")
        return 2

    ctx = RunContext(
        run_date_utc=run_date,
        started_at_utc=now.astimezone(timezone.utc).isoformat(),
        settings=settings,
        debug=bool(args.debug),
    )

    out_dir = Path(args.out.strip() or str(get_setting(settings, "output.dir", "static/data")))

    try:
        if args.input.strip():
            data = load_document(args.input.strip())
        else:
            data = fetch_document(ctx)

        result = build_categorized_output(data, CategoryTabs.from_settings(settings))
        write_outputs(result, out_dir, run_date=run_date)

        for category_type in args.group_type:
            group = find_group_by_type(category_type, data)
            if group is None:
                logger.warning(f"[main] No group with type {category_type!r}")
                continue
            path = write_group(group, out_dir, category_type)
            logger.info(f"[main] Wrote group {category_type!r} to {path}")
    except (requests.RequestException, ValueError, OSError) as exc:
        logger.error(f"[main] Run failed: {exc}")
        return 1

    logger.info(f"[main] Map data version={result.version} lastBuild={result.last_build}")
    for category, points in result.categories().items():
        logger.info(f"[main]   {category}: {len(points)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
