from __future__ import annotations

import logging
from typing import Any

from mapdata.models import (
    CategorizedOutput,
    CategoryTabs,
    Group,
    OptionNode,
    PointOfInterest,
)

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

PURITY_RANKS: dict[str, int] = {
    "impure": 1,
    "normal": 2,
    "pure": 3,
}


class InvalidInput(ValueError):
    """Raised when there is no document to transform."""


def normalize_purity(purity: Any) -> int | None:
    if not isinstance(purity, str) or not purity:
        return None
    return PURITY_RANKS.get(purity.lower())


def collect_points(
    option: Any,
    fallback_name: str | None = None,
    fallback_purity: Any = None,
) -> list[PointOfInterest]:
    """Flatten an option subtree into point-of-interest records.

    Pre-order: a node's own markers come before anything from its children,
    and children are walked in array order. Each node passes its resolved
    name and purity down as the fallbacks for its children. Malformed nodes
    and markers are skipped.
    """

    out: list[PointOfInterest] = []
    stack: list[tuple[Any, str | None, Any]] = [(option, fallback_name, fallback_purity)]

    while stack:
        raw, inherited_name, inherited_purity = stack.pop()
        node = OptionNode.from_raw(raw)
        if node is None:
            continue

        name = node.name or inherited_name or UNKNOWN_NAME
        node_purity = node.purity if node.purity is not None else inherited_purity

        for marker in node.valid_markers():
            raw_purity = marker.purity if marker.purity is not None else node_purity
            out.append(
                PointOfInterest(
                    name=name,
                    location=marker.location,
                    purity=normalize_purity(raw_purity),
                )
            )

        if node.options is not None:
            # Reversed so the first child is popped next.
            for child in reversed(node.options):
                stack.append((child, name, node_purity))

    return out


def _groups(data: Any) -> list[Group]:
    if not isinstance(data, dict):
        return []
    raw_groups = data.get("options")
    if not isinstance(raw_groups, list):
        return []

    out: list[Group] = []
    for raw in raw_groups:
        group = Group.from_raw(raw)
        if group is not None:
            out.append(group)
    return out


def extract_by_tab(tab_id: str, data: Any) -> list[PointOfInterest]:
    tab = next((g for g in _groups(data) if g.tab_id == tab_id), None)
    if tab is None or tab.options is None:
        logger.debug(f"[extract] No usable tab {tab_id!r}")
        return []

    out: list[PointOfInterest] = []
    for raw in tab.options:
        node = OptionNode.from_raw(raw)
        seed_name = (node.name if node is not None else None) or tab.name
        out.extend(collect_points(raw, seed_name))

    logger.debug(f"[extract] Tab {tab_id!r}: {len(out)} points")
    return out


def find_group_by_type(category_type: str, data: Any) -> dict[str, Any] | None:
    """Return the raw top-level group whose `type` matches, unmodified."""

    if not isinstance(data, dict):
        return None
    raw_groups = data.get("options")
    if not isinstance(raw_groups, list):
        return None

    for raw in raw_groups:
        group = Group.from_raw(raw)
        if group is not None and group.category_type == category_type:
            return raw
    return None


def _version(data: Any) -> int:
    value = data.get("version") if isinstance(data, dict) else None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return -1


def _last_build(data: Any) -> str:
    value = data.get("lastBuild") if isinstance(data, dict) else None
    if isinstance(value, str) and value:
        return value
    return "unknown"


def build_categorized_output(
    data: Any, tabs: CategoryTabs | None = None
) -> CategorizedOutput:
    if data is None:
        raise InvalidInput("No map data provided")

    if tabs is None:
        tabs = CategoryTabs()

    return CategorizedOutput(
        version=_version(data),
        last_build=_last_build(data),
        resources=extract_by_tab(tabs.resources, data),
        collectibles=extract_by_tab(tabs.collectibles, data),
        artifacts=extract_by_tab(tabs.artifacts, data),
        wells=extract_by_tab(tabs.wells, data),
    )
