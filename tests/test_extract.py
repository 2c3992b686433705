"""
Tests for the option-tree extraction and tab routing.
"""

import copy
import unittest

from mapdata.extract import (
    InvalidInput,
    build_categorized_output,
    collect_points,
    extract_by_tab,
    find_group_by_type,
    normalize_purity,
)
from mapdata.models import CategoryTabs, Location, PointOfInterest


def _doc(*groups, **extra):
    data = {"version": 7, "lastBuild": "2025-10-06", "options": list(groups)}
    data.update(extra)
    return data


class TestNormalizePurity(unittest.TestCase):
    """Purity string to rank lookup."""

    def test_known_values(self):
        self.assertEqual(normalize_purity("impure"), 1)
        self.assertEqual(normalize_purity("normal"), 2)
        self.assertEqual(normalize_purity("pure"), 3)

    def test_case_insensitive(self):
        self.assertEqual(normalize_purity("PURE"), 3)
        self.assertEqual(normalize_purity("Impure"), 1)

    def test_absent_and_unknown(self):
        self.assertIsNone(normalize_purity(None))
        self.assertIsNone(normalize_purity(""))
        self.assertIsNone(normalize_purity("radioactive"))
        self.assertIsNone(normalize_purity(3))


class TestCollectPoints(unittest.TestCase):
    """Recursive walk over option nodes."""

    def test_absent_node(self):
        self.assertEqual(collect_points(None), [])
        self.assertEqual(collect_points("not a node"), [])

    def test_location_is_copied_unchanged(self):
        points = collect_points({"name": "Iron", "markers": [{"x": 1.5, "y": -2, "z": 300000}]})

        self.assertEqual(len(points), 1)
        self.assertEqual(points[0].location, Location(x=1.5, y=-2, z=300000))

    def test_unknown_name_fallback(self):
        points = collect_points({"markers": [{"x": 0, "y": 0, "z": 0}]})
        self.assertEqual(points[0].name, "Unknown")

    def test_fallback_name_used_when_node_has_none(self):
        points = collect_points({"markers": [{"x": 0, "y": 0, "z": 0}]}, "Caterium")
        self.assertEqual(points[0].name, "Caterium")

    def test_name_inheritance(self):
        tree = {
            "name": "Bauxite",
            "options": [
                {"markers": [{"x": 1, "y": 1, "z": 1}]},
                {
                    "name": "Copper",
                    "markers": [{"x": 2, "y": 2, "z": 2}],
                    "options": [{"markers": [{"x": 3, "y": 3, "z": 3}]}],
                },
            ],
        }

        names = [p.name for p in collect_points(tree)]

        self.assertEqual(names, ["Bauxite", "Copper", "Copper"])

    def test_own_markers_precede_children(self):
        tree = {
            "name": "root",
            "options": [
                {"name": "a", "markers": [{"x": 1, "y": 0, "z": 0}],
                 "options": [{"name": "a1", "markers": [{"x": 2, "y": 0, "z": 0}]}]},
                {"name": "b", "markers": [{"x": 3, "y": 0, "z": 0}]},
            ],
            "markers": [{"x": 0, "y": 0, "z": 0}],
        }

        points = collect_points(tree)

        self.assertEqual([p.name for p in points], ["root", "a", "a1", "b"])
        self.assertEqual([p.location.x for p in points], [0, 1, 2, 3])

    def test_marker_purity_overrides_node_purity(self):
        tree = {
            "purity": "impure",
            "markers": [
                {"x": 0, "y": 0, "z": 0, "purity": "pure"},
                {"x": 1, "y": 1, "z": 1},
            ],
        }

        points = collect_points(tree)

        self.assertEqual([p.purity for p in points], [3, 1])

    def test_present_marker_purity_wins_even_if_unknown(self):
        tree = {"purity": "pure", "markers": [{"x": 0, "y": 0, "z": 0, "purity": "weird"}]}
        self.assertIsNone(collect_points(tree)[0].purity)

    def test_absent_purity_omits_field(self):
        point = collect_points({"name": "Slug", "markers": [{"x": 0, "y": 0, "z": 0}]})[0]

        self.assertIsNone(point.purity)
        self.assertNotIn("purity", point.to_dict())

    def test_unknown_purity_omits_field(self):
        point = collect_points(
            {"name": "Uranium", "purity": "radioactive", "markers": [{"x": 0, "y": 0, "z": 0}]}
        )[0]
        self.assertNotIn("purity", point.to_dict())

    def test_invalid_markers_dropped(self):
        tree = {
            "name": "Iron",
            "markers": [
                {"x": 1, "y": 2, "z": "3"},
                {"x": 4, "y": 5, "z": 6},
                {"x": 7, "y": 8},
                {"x": True, "y": 0, "z": 0},
                None,
                "marker",
            ],
        }

        points = collect_points(tree)

        self.assertEqual(len(points), 1)
        self.assertEqual(points[0].location, Location(x=4, y=5, z=6))

    def test_non_finite_marker_dropped(self):
        tree = {
            "name": "Iron",
            "markers": [
                {"x": float("nan"), "y": 1, "z": 2},
                {"x": 1, "y": float("inf"), "z": 2},
                {"x": 3, "y": 4, "z": 5},
            ],
        }

        points = collect_points(tree)

        self.assertEqual([p.location for p in points], [Location(x=3, y=4, z=5)])

    def test_node_with_markers_and_children(self):
        tree = {
            "name": "Limestone",
            "markers": [{"x": 1, "y": 1, "z": 1}],
            "options": [{"markers": [{"x": 2, "y": 2, "z": 2}]}],
        }
        self.assertEqual(len(collect_points(tree)), 2)

    def test_non_list_markers_and_options_ignored(self):
        tree = {"name": "Coal", "markers": {"x": 1, "y": 1, "z": 1}, "options": "nope"}
        self.assertEqual(collect_points(tree), [])

    def test_empty_name_treated_as_absent(self):
        points = collect_points({"name": "", "markers": [{"x": 0, "y": 0, "z": 0}]}, "Sulfur")
        self.assertEqual(points[0].name, "Sulfur")

    def test_deep_nesting(self):
        tree = {"name": "Deep"}
        node = tree
        for _ in range(5000):
            child = {}
            node["options"] = [child]
            node = child
        node["markers"] = [{"x": 9, "y": 9, "z": 9}]

        points = collect_points(tree)

        self.assertEqual(len(points), 1)
        self.assertEqual(points[0].name, "Deep")

    def test_rerun_is_identical(self):
        tree = {"name": "Quartz", "purity": "normal", "markers": [{"x": 1, "y": 2, "z": 3}] * 3}
        snapshot = copy.deepcopy(tree)

        first = [p.to_dict() for p in collect_points(tree)]
        second = [p.to_dict() for p in collect_points(tree)]

        self.assertEqual(first, second)
        self.assertEqual(len(first), 3)
        self.assertEqual(tree, snapshot)


class TestExtractByTab(unittest.TestCase):
    """Selecting a tab and flattening its options."""

    def test_iron_scenario(self):
        data = _doc(
            {
                "tabId": "resource_nodes",
                "options": [
                    {
                        "name": "Iron",
                        "purity": "pure",
                        "markers": [{"x": 1, "y": 2, "z": 3}],
                        "options": [{"markers": [{"x": 4, "y": 5, "z": 6}]}],
                    }
                ],
            }
        )

        points = extract_by_tab("resource_nodes", data)

        self.assertEqual(
            [p.to_dict() for p in points],
            [
                {"name": "Iron", "purity": 3, "location": {"x": 1, "y": 2, "z": 3}},
                {"name": "Iron", "purity": 3, "location": {"x": 4, "y": 5, "z": 6}},
            ],
        )

    def test_child_purity_applies_per_marker(self):
        data = _doc(
            {
                "tabId": "resource_nodes",
                "options": [
                    {
                        "name": "Iron",
                        "purity": "pure",
                        "options": [
                            {"purity": "impure", "markers": [
                                {"x": 0, "y": 0, "z": 0},
                                {"x": 1, "y": 1, "z": 1, "purity": "normal"},
                            ]},
                        ],
                    }
                ],
            }
        )

        purities = [p.purity for p in extract_by_tab("resource_nodes", data)]

        self.assertEqual(purities, [1, 2])

    def test_missing_tab(self):
        data = _doc({"tabId": "collectibles", "options": []})
        self.assertEqual(extract_by_tab("resource_nodes", data), [])

    def test_tab_without_options(self):
        data = _doc({"tabId": "artifacts", "options": None})
        self.assertEqual(extract_by_tab("artifacts", data), [])

    def test_document_without_groups(self):
        self.assertEqual(extract_by_tab("artifacts", {"version": 1}), [])
        self.assertEqual(extract_by_tab("artifacts", {"options": "x"}), [])

    def test_first_matching_tab_wins(self):
        data = _doc(
            {"tabId": "wells", "options": [{"name": "First", "markers": [{"x": 0, "y": 0, "z": 0}]}]},
            {"tabId": "wells", "options": [{"name": "Second", "markers": [{"x": 0, "y": 0, "z": 0}]}]},
        )

        points = extract_by_tab("wells", data)

        self.assertEqual([p.name for p in points], ["First"])

    def test_tab_name_seeds_unnamed_options(self):
        data = _doc(
            {
                "tabId": "collectibles",
                "name": "Collectibles",
                "options": [
                    {"markers": [{"x": 0, "y": 0, "z": 0}]},
                    {"name": "Somersloop", "markers": [{"x": 1, "y": 1, "z": 1}]},
                    42,
                ],
            }
        )

        names = [p.name for p in extract_by_tab("collectibles", data)]

        self.assertEqual(names, ["Collectibles", "Somersloop"])

    def test_unnamed_tab_and_option(self):
        data = _doc({"tabId": "artifacts", "options": [{"markers": [{"x": 0, "y": 0, "z": 0}]}]})
        self.assertEqual(extract_by_tab("artifacts", data)[0].name, "Unknown")

    def test_type_does_not_select_tab(self):
        data = _doc({"type": "resource_nodes", "options": [{"markers": [{"x": 0, "y": 0, "z": 0}]}]})
        self.assertEqual(extract_by_tab("resource_nodes", data), [])


class TestFindGroupByType(unittest.TestCase):
    """Direct lookup by group type."""

    def test_returns_raw_group(self):
        group = {"type": "playerPositions", "tabId": "other", "options": [{"x": 1}]}
        data = _doc({"type": "x"}, group)

        self.assertIs(find_group_by_type("playerPositions", data), group)

    def test_missing(self):
        self.assertIsNone(find_group_by_type("nothing", _doc({"type": "x"})))
        self.assertIsNone(find_group_by_type("nothing", {}))
        self.assertIsNone(find_group_by_type("nothing", None))

    def test_tab_id_does_not_match_type(self):
        self.assertIsNone(find_group_by_type("collectibles", _doc({"tabId": "collectibles"})))


class TestBuildCategorizedOutput(unittest.TestCase):
    """Four-category assembly."""

    def _sample(self):
        marker = {"x": 1, "y": 2, "z": 3}
        return _doc(
            {"tabId": "resource_nodes", "options": [{"name": "Iron", "purity": "normal", "markers": [marker]}]},
            {"tabId": "collectibles", "options": [{"name": "Mercer Sphere", "markers": [marker, marker]}]},
            {"tabId": "artifacts", "options": []},
            {"tabId": "resource_wells", "options": [{"name": "Nitrogen", "options": [{"markers": [marker]}]}]},
        )

    def test_categories(self):
        result = build_categorized_output(self._sample())

        self.assertEqual(result.version, 7)
        self.assertEqual(result.last_build, "2025-10-06")
        self.assertEqual(
            result.resources,
            [PointOfInterest(name="Iron", location=Location(1, 2, 3), purity=2)],
        )
        self.assertEqual(len(result.collectibles), 2)
        self.assertEqual(result.artifacts, [])
        self.assertEqual([p.name for p in result.wells], ["Nitrogen"])

    def test_custom_tabs(self):
        tabs = CategoryTabs(resources="collectibles")
        result = build_categorized_output(self._sample(), tabs)
        self.assertEqual([p.name for p in result.resources], ["Mercer Sphere", "Mercer Sphere"])

    def test_metadata_fallbacks(self):
        result = build_categorized_output({})

        self.assertEqual(result.version, -1)
        self.assertEqual(result.last_build, "unknown")
        self.assertEqual(result.metadata(), {"version": -1, "lastBuild": "unknown"})
        for points in result.categories().values():
            self.assertEqual(points, [])

    def test_non_integer_version(self):
        result = build_categorized_output({"version": "12", "lastBuild": ""})
        self.assertEqual(result.version, -1)
        self.assertEqual(result.last_build, "unknown")

    def test_non_dict_document(self):
        for data in ([], "x", 42):
            result = build_categorized_output(data)

            self.assertEqual(result.metadata(), {"version": -1, "lastBuild": "unknown"})
            for points in result.categories().values():
                self.assertEqual(points, [])

    def test_zero_version_kept(self):
        self.assertEqual(build_categorized_output({"version": 0}).version, 0)

    def test_boolean_version(self):
        self.assertEqual(build_categorized_output({"version": True}).version, -1)

    def test_missing_document(self):
        with self.assertRaises(InvalidInput):
            build_categorized_output(None)


if __name__ == "__main__":
    unittest.main()
