import copy
import unittest

from location_stock.availability.config_resolver import (
    default_config,
    load_raw_config,
    resolve_config,
    resolve_location_records,
    resolve_region_groups,
)
from location_stock.availability.models import (
    ClickAction,
    LocationsMode,
    RowContentMode,
    SortMode,
)


class ResolveDefaultsTests(unittest.TestCase):
    def test_none_and_empty_resolve_to_defaults(self):
        self.assertEqual(resolve_config(None), resolve_config({}))
        self.assertEqual(resolve_config(None), default_config())

    def test_default_values(self):
        config = default_config()
        self.assertEqual(config.thresholds.out_of_stock_max, 0)
        self.assertEqual(config.thresholds.in_stock_min, 5)
        self.assertEqual(config.symbols.in_stock, "◯")
        self.assertEqual(config.labels.out_of_stock, "在庫なし")
        self.assertEqual(config.quantity_display.label, "在庫")
        self.assertIs(config.quantity_display.row_content_mode, RowContentMode.SYMBOL_AND_LABEL)
        self.assertIs(config.locations_mode.mode, LocationsMode.ALL)
        self.assertIs(config.click.action, ClickAction.NONE)
        self.assertIs(config.sort_mode, SortMode.NONE)
        self.assertIsNone(config.notice)
        self.assertIsNone(config.pinned_location_id)
        self.assertEqual(config.region_groups, ())
        self.assertEqual(config.locations, ())
        self.assertEqual(config.future.region_unset_label, "その他")

    def test_non_object_raw_resolves_to_defaults(self):
        for raw in ([], "text", 7, True):
            self.assertEqual(resolve_config(raw), default_config())


class ResolveLeafTests(unittest.TestCase):
    def test_type_mismatch_only_affects_that_leaf(self):
        raw = {
            "thresholds": {"outOfStockMax": "x", "inStockMin": 10},
            "symbols": {"inStock": "●"},
            "sort": {"mode": "quantity_desc"},
        }
        config = resolve_config(raw)
        self.assertEqual(config.thresholds.out_of_stock_max, 0)
        self.assertEqual(config.thresholds.in_stock_min, 10)
        self.assertEqual(config.symbols.in_stock, "●")
        self.assertEqual(config.symbols.low_stock, "△")
        self.assertIs(config.sort_mode, SortMode.QUANTITY_DESCENDING)

    def test_booleans_are_not_numbers(self):
        config = resolve_config({"thresholds": {"outOfStockMax": True}})
        self.assertEqual(config.thresholds.out_of_stock_max, 0)

    def test_camel_case_enum_aliases(self):
        raw = {
            "sort": {"mode": "quantityDescending"},
            "locationsMode": {"mode": "onlineOnly"},
            "click": {"action": "openMap"},
        }
        config = resolve_config(raw)
        self.assertIs(config.sort_mode, SortMode.QUANTITY_DESCENDING)
        self.assertIs(config.locations_mode.mode, LocationsMode.ONLINE_ONLY)
        self.assertIs(config.click.action, ClickAction.OPEN_MAP)

    def test_unknown_enum_falls_back(self):
        config = resolve_config({"sort": {"mode": "random"}, "click": {"action": 3}})
        self.assertIs(config.sort_mode, SortMode.NONE)
        self.assertIs(config.click.action, ClickAction.NONE)

    def test_quantity_display_legacy_section(self):
        raw = {"quantityDisplay": {"label": "Stock", "showQuantity": False}}
        config = resolve_config(raw)
        self.assertEqual(config.quantity_display.label, "Stock")
        self.assertFalse(config.quantity_display.show_quantity)

    def test_quantity_section_wins_over_legacy(self):
        raw = {
            "quantity": {"quantityLabel": "New"},
            "quantityDisplay": {"label": "Old"},
        }
        self.assertEqual(resolve_config(raw).quantity_display.label, "New")

    def test_notice_and_pinned_are_trimmed(self):
        raw = {"notice": {"text": "  sale today "}, "pinnedLocationId": "  gid://1 "}
        config = resolve_config(raw)
        self.assertEqual(config.notice.text, "sale today")
        self.assertEqual(config.pinned_location_id, "gid://1")

    def test_blank_notice_and_pinned_are_dropped(self):
        config = resolve_config({"notice": {"text": "  "}, "pinnedLocationId": ""})
        self.assertIsNone(config.notice)
        self.assertIsNone(config.pinned_location_id)

    def test_inverted_thresholds_kept_and_logged(self):
        raw = {"thresholds": {"outOfStockMax": 5, "inStockMin": 3}}
        with self.assertLogs(
            "location_stock.availability.config_resolver", level="WARNING"
        ) as logs:
            config = resolve_config(raw)
        self.assertEqual(config.thresholds.out_of_stock_max, 5)
        self.assertEqual(config.thresholds.in_stock_min, 3)
        self.assertTrue(any("inverted" in line for line in logs.output))

    def test_raw_is_not_mutated(self):
        raw = {
            "thresholds": {"outOfStockMax": "bad"},
            "locations": [{"locationId": "a", "enabled": "yes"}],
            "custom": {"keep": True},
        }
        snapshot = copy.deepcopy(raw)
        resolve_config(raw)
        self.assertEqual(raw, snapshot)

    def test_resolution_is_idempotent(self):
        raw = {
            "thresholds": {"outOfStockMax": 1, "inStockMin": 8},
            "sort": {"mode": "inStockFirst"},
            "regionGroups": [{"id": "east", "name": "East"}],
            "locations": [{"locationId": "a", "publicName": "Shop A", "regionGroupId": "east"}],
            "future": {"nearbyOtherHeading": "  Others  "},
        }
        first = resolve_config(raw)
        self.assertEqual(resolve_config(first.to_json()), first)


class RegionGroupTests(unittest.TestCase):
    def test_invalid_groups_dropped(self):
        groups = resolve_region_groups(
            [{"id": "a", "name": "A"}, {"id": "", "name": "B"}, {"id": "c"}, "x"]
        )
        self.assertEqual([group.id for group in groups], ["a"])

    def test_missing_sort_order_defaults_to_position(self):
        groups = resolve_region_groups(
            [{"id": "b", "name": "B"}, {"id": "a", "name": "A", "sortOrder": 1}]
        )
        self.assertEqual([(group.id, group.sort_order) for group in groups], [("a", 1), ("b", 1)])

    def test_ties_break_by_id(self):
        groups = resolve_region_groups(
            [
                {"id": "z", "name": "Z", "sortOrder": 2},
                {"id": "m", "name": "M", "sortOrder": 2},
                {"id": "a", "name": "A", "sortOrder": 3},
            ]
        )
        self.assertEqual([group.id for group in groups], ["m", "z", "a"])

    def test_duplicate_ids_keep_first_position_last_value(self):
        groups = resolve_region_groups(
            [
                {"id": "east", "name": "East"},
                {"id": "west", "name": "West"},
                {"id": "east", "name": "Kanto"},
            ]
        )
        self.assertEqual(
            [(group.id, group.name, group.sort_order) for group in groups],
            [("east", "Kanto", 1), ("west", "West", 2)],
        )


class LocationRecordTests(unittest.TestCase):
    def test_defaults_per_leaf(self):
        (record,) = resolve_location_records([{"locationId": "a", "sortOrder": "1"}])
        self.assertTrue(record.enabled)
        self.assertEqual(record.public_name, "")
        self.assertEqual(record.sort_order, 999999)
        self.assertIsNone(record.region_group_id)
        self.assertFalse(record.exclude_from_nearby)

    def test_entries_without_id_skipped(self):
        self.assertEqual(resolve_location_records([{"publicName": "x"}, {"locationId": " "}]), ())

    def test_duplicate_ids_keep_last_value(self):
        records = resolve_location_records(
            [
                {"locationId": "a", "sortOrder": 1},
                {"locationId": "b", "sortOrder": 2},
                {"locationId": "a", "sortOrder": 3},
            ]
        )
        self.assertEqual([(r.location_id, r.sort_order) for r in records], [("a", 3), ("b", 2)])


class LoadRawConfigTests(unittest.TestCase):
    def test_blank_values(self):
        self.assertEqual(load_raw_config(None), {})
        self.assertEqual(load_raw_config("   "), {})

    def test_malformed_json_logged(self):
        with self.assertLogs(
            "location_stock.availability.config_resolver", level="WARNING"
        ):
            self.assertEqual(load_raw_config("{not json"), {})

    def test_non_object_json(self):
        with self.assertLogs(
            "location_stock.availability.config_resolver", level="WARNING"
        ):
            self.assertEqual(load_raw_config("[1, 2]"), {})

    def test_deeply_nested_json_logged(self):
        value = '{"notice": ' + "[" * 200000 + "]" * 200000 + "}"
        with self.assertLogs(
            "location_stock.availability.config_resolver", level="WARNING"
        ):
            self.assertEqual(load_raw_config(value), {})

    def test_object_json(self):
        self.assertEqual(load_raw_config('{"sort": {"mode": "none"}}'), {"sort": {"mode": "none"}})
