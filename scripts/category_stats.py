from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path
from typing import Any

CATEGORIES = ["resources", "collectibles", "artifacts", "wells"]

PURITY_LABELS = {1: "impure", 2: "normal", 3: "pure"}


def _read_records(path: Path) -> tuple[list[dict[str, Any]], str | None]:
    """Return (records, error_or_none) for one category file."""
    if not path.exists():
        return [], "missing_file"
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return [], f"json_decode_error: {e}"
    if not isinstance(obj, list):
        return [], f"not_a_list: {type(obj).__name__}"
    return [r for r in obj if isinstance(r, dict)], None


def _pct(n: int, d: int) -> str:
    if d <= 0:
        return "0.0%"
    return f"{(100.0 * n / d):.1f}%"


def _category_report(records: list[dict[str, Any]]) -> dict[str, Any]:
    names = Counter(str(r.get("name") or "") for r in records)

    purity: Counter[str] = Counter()
    for r in records:
        p = r.get("purity")
        purity[PURITY_LABELS.get(p, "none") if isinstance(p, int) else "none"] += 1

    return {
        "records": len(records),
        "distinct_names": len(names),
        "top_names": names.most_common(15),
        "purity": dict(purity),
    }


def build_report(data_dir: Path) -> dict[str, Any]:
    categories: dict[str, Any] = {}
    errors: dict[str, str] = {}
    total = 0

    for category in CATEGORIES:
        records, error = _read_records(data_dir / f"{category}.json")
        if error:
            errors[category] = error
        categories[category] = _category_report(records)
        total += len(records)

    metadata: dict[str, Any] = {}
    metadata_path = data_dir / "metadata.json"
    if metadata_path.exists():
        try:
            loaded = json.loads(metadata_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            errors["metadata"] = f"json_decode_error: {e}"
        else:
            if isinstance(loaded, dict):
                metadata = loaded
    else:
        errors["metadata"] = "missing_file"

    return {
        "input": str(data_dir),
        "version": metadata.get("version"),
        "lastBuild": metadata.get("lastBuild"),
        "records_total": total,
        "categories": categories,
        "errors": errors,
    }


def _print_report(report: dict[str, Any]) -> None:
    print(f"Input: {report['input']}")
    print(f"Version: {report['version']} | lastBuild: {report['lastBuild']}")
    print(f"Total records: {report['records_total']}")

    for category, c in report["categories"].items():
        n = c["records"]
        print(f"\n[{category}]")
        print(f"- records: {n} | distinct names: {c['distinct_names']}")

        if c["purity"]:
            print("- purity:")
            for label, count in sorted(c["purity"].items()):
                print(f"  - {label}: {count} ({_pct(count, n)})")

        if c["top_names"]:
            print("- top names:")
            for name, count in c["top_names"][:8]:
                print(f"  - {name}: {count}")

    if report["errors"]:
        print("\nProblems:")
        for key, error in report["errors"].items():
            print(f"- {key}: {error}")


def main() -> int:
    ap = argparse.ArgumentParser(
        description="Summarise the per-category map data files"
    )
    ap.add_argument(
        "--in",
        dest="input_dir",
        default="static/data",
        help="Directory holding the category JSON files (default: static/data)",
    )
    ap.add_argument(
        "--json", action="store_true", help="Print the report as JSON instead"
    )

    args = ap.parse_args()
    data_dir = Path(args.input_dir)
    if not data_dir.is_dir():
        raise SystemExit(f"Input directory not found: {data_dir}")

    report = build_report(data_dir)
    if args.json:
        print(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        _print_report(report)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
