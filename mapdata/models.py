from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


def _is_number(value: Any) -> bool:
    # JSON booleans decode to bool, which is an int subclass. json.loads
    # also accepts NaN and Infinity, which strict JSON readers reject.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _name_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _array_or_none(value: Any) -> tuple[Any, ...] | None:
    if isinstance(value, list):
        return tuple(value)
    return None


@dataclass(frozen=True)
class Location:
    x: float
    y: float
    z: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class PointOfInterest:
    name: str
    location: Location
    purity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.purity is not None:
            out["purity"] = self.purity
        out["location"] = self.location.to_dict()
        return out


@dataclass(frozen=True)
class Marker:
    """A marker whose three coordinates are numeric.

    `purity` is the raw upstream value (None when the key is missing).
    """

    x: float
    y: float
    z: float
    purity: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> Marker | None:
        if not isinstance(raw, dict):
            return None
        x, y, z = raw.get("x"), raw.get("y"), raw.get("z")
        if not (_is_number(x) and _is_number(y) and _is_number(z)):
            return None
        return cls(x=x, y=y, z=z, purity=raw.get("purity"))

    @property
    def location(self) -> Location:
        return Location(x=self.x, y=self.y, z=self.z)


@dataclass(frozen=True)
class OptionNode:
    """One node of the upstream option tree.

    Every field is None when the upstream key is missing or has the wrong
    shape. `markers` and `options` keep the raw array entries; children are
    only parsed when the traversal reaches them.
    """

    name: str | None = None
    purity: Any = None
    markers: tuple[Any, ...] | None = None
    options: tuple[Any, ...] | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> OptionNode | None:
        if not isinstance(raw, dict):
            return None
        return cls(
            name=_name_or_none(raw.get("name")),
            purity=raw.get("purity"),
            markers=_array_or_none(raw.get("markers")),
            options=_array_or_none(raw.get("options")),
        )

    def valid_markers(self) -> list[Marker]:
        out: list[Marker] = []
        for raw in self.markers or ():
            marker = Marker.from_raw(raw)
            if marker is not None:
                out.append(marker)
        return out


@dataclass(frozen=True)
class Group:
    """A top-level tab of the document."""

    tab_id: str | None = None
    category_type: str | None = None
    name: str | None = None
    options: tuple[Any, ...] | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> Group | None:
        if not isinstance(raw, dict):
            return None
        tab_id = raw.get("tabId")
        category_type = raw.get("type")
        return cls(
            tab_id=tab_id if isinstance(tab_id, str) else None,
            category_type=category_type if isinstance(category_type, str) else None,
            name=_name_or_none(raw.get("name")),
            options=_array_or_none(raw.get("options")),
        )


@dataclass(frozen=True)
class CategoryTabs:
    resources: str = "resource_nodes"
    collectibles: str = "collectibles"
    artifacts: str = "artifacts"
    wells: str = "resource_wells"

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> CategoryTabs:
        cfg = settings.get("categories")
        if not isinstance(cfg, dict):
            cfg = {}
        defaults = cls()

        def _tab(key: str, default: str) -> str:
            value = cfg.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return default

        return cls(
            resources=_tab("resources", defaults.resources),
            collectibles=_tab("collectibles", defaults.collectibles),
            artifacts=_tab("artifacts", defaults.artifacts),
            wells=_tab("wells", defaults.wells),
        )


@dataclass(frozen=True)
class CategorizedOutput:
    version: int
    last_build: str
    resources: list[PointOfInterest] = field(default_factory=list)
    collectibles: list[PointOfInterest] = field(default_factory=list)
    artifacts: list[PointOfInterest] = field(default_factory=list)
    wells: list[PointOfInterest] = field(default_factory=list)

    def categories(self) -> dict[str, list[PointOfInterest]]:
        return {
            "resources": self.resources,
            "collectibles": self.collectibles,
            "artifacts": self.artifacts,
            "wells": self.wells,
        }

    def metadata(self) -> dict[str, Any]:
        return {"version": self.version, "lastBuild": self.last_build}
