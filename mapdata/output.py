from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from mapdata.models import CategorizedOutput
from utils.jsonio import sha256_file, write_json
from utils.time import utc_now

logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"
MANIFEST_FILE = "manifest.json"
GROUPS_DIR = "groups"


def _file_entry(path: Path, rows: int | None = None) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "path": path.as_posix(),
        "sha256": sha256_file(path),
        "bytes": path.stat().st_size,
    }
    if rows is not None:
        entry["rows"] = rows
    return entry


def write_outputs(
    result: CategorizedOutput, out_dir: Path, *, run_date: str | None = None
) -> list[dict[str, Any]]:
    """Write one JSON file per category plus metadata and manifest.

    Returns the manifest's output entries, category files first.
    """

    entries: list[dict[str, Any]] = []
    for category, points in result.categories().items():
        # Keep record key order: name, purity, location.
        path = write_json(
            out_dir / f"{category}.json",
            [p.to_dict() for p in points],
            sort_keys=False,
        )
        entries.append(_file_entry(path, rows=len(points)))

    metadata_path = write_json(out_dir / METADATA_FILE, result.metadata())
    entries.append(_file_entry(metadata_path))

    manifest = {
        "generated_at_utc": utc_now().isoformat(),
        "run_date_utc": run_date,
        "version": result.version,
        "lastBuild": result.last_build,
        "outputs": entries,
    }
    write_json(out_dir / MANIFEST_FILE, manifest)

    logger.info(f"[output] Wrote {len(entries)} files to {out_dir}")
    return entries


def _safe_file_stem(value: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", value).strip("._")
    return stem or "group"


def write_group(group: dict[str, Any], out_dir: Path, category_type: str) -> Path:
    path = out_dir / GROUPS_DIR / f"{_safe_file_stem(category_type)}.json"
    return write_json(path, group)
