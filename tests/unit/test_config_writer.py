import copy
import unittest

from location_stock.availability.config_resolver import resolve_config
from location_stock.availability.config_writer import (
    LocationSettingsUpdate,
    merge_display_settings,
    merge_location_settings,
)
from location_stock.availability.models import SortMode

STORED = {
    "thresholds": {"outOfStockMax": 1, "inStockMin": 6, "legacy": "keep"},
    "messages": {"loading": "Loading stock", "empty": "Nothing here"},
    "locations": [{"locationId": "gid://loc/1", "sortOrder": 3}],
    "sort": {"mode": "quantity_desc", "direction": "kept"},
    "regionGroups": [{"id": "east", "name": "East", "sortOrder": 1}],
    "future": {"groupByRegion": True, "experimental": 1},
    "analytics": {"enabled": True},
}


class MergeDisplaySettingsTests(unittest.TestCase):
    def test_unknown_keys_preserved_and_input_untouched(self):
        raw = copy.deepcopy(STORED)
        merged = merge_display_settings(raw, {"symbols": {"inStock": "●"}})
        self.assertEqual(raw, STORED)
        self.assertEqual(merged["analytics"], {"enabled": True})
        self.assertEqual(merged["thresholds"]["legacy"], "keep")
        self.assertEqual(merged["symbols"], {"inStock": "●"})
        self.assertEqual(merged["locations"], STORED["locations"])

    def test_thresholds_clamped_and_parsed(self):
        merged = merge_display_settings(
            STORED, {"thresholds": {"outOfStockMax": -4, "inStockMin": "8"}}
        )
        self.assertEqual(merged["thresholds"]["outOfStockMax"], 0)
        self.assertEqual(merged["thresholds"]["inStockMin"], 8)

    def test_threshold_strings_parse_leading_integer(self):
        merged = merge_display_settings(
            STORED, {"thresholds": {"outOfStockMax": "2.5", "inStockMin": " 7 items"}}
        )
        self.assertEqual(merged["thresholds"]["outOfStockMax"], 2)
        self.assertEqual(merged["thresholds"]["inStockMin"], 7)

    def test_unparseable_threshold_uses_default(self):
        merged = merge_display_settings(STORED, {"thresholds": {"inStockMin": "many"}})
        self.assertEqual(merged["thresholds"]["inStockMin"], 5)
        self.assertEqual(merged["thresholds"]["outOfStockMax"], 1)

    def test_blank_strings_fall_back(self):
        merged = merge_display_settings(
            STORED,
            {
                "labels": {"inStock": "  "},
                "messages": {"loading": "", "error": " "},
                "quantity": {"quantityLabel": " 在庫数 "},
            },
        )
        self.assertEqual(merged["labels"]["inStock"], "在庫あり")
        self.assertEqual(merged["messages"]["loading"], "Loading stock")
        self.assertEqual(
            merged["messages"]["error"],
            "在庫情報の取得に失敗しました。時間をおいて再度お試しください。",
        )
        self.assertEqual(merged["messages"]["empty"], "Nothing here")
        self.assertEqual(merged["quantity"]["quantityLabel"], "在庫数")

    def test_enum_leaves_stored_by_wire_value(self):
        merged = merge_display_settings(
            {},
            {
                "click": {"action": "openUrl"},
                "quantity": {"rowContentMode": "bogus"},
                "locationsMode": {"mode": "online_only", "usePublicName": False},
            },
        )
        self.assertEqual(merged["click"]["action"], "open_url")
        self.assertEqual(merged["quantity"]["rowContentMode"], "symbol_and_label")
        self.assertEqual(merged["locationsMode"], {"mode": "online_only", "usePublicName": False})

    def test_notice_text_trimmed(self):
        merged = merge_display_settings(STORED, {"notice": {"text": "  closed Monday "}})
        self.assertEqual(merged["notice"], {"text": "closed Monday"})
        self.assertIsNone(resolve_config(merge_display_settings(merged, {"notice": {"text": ""}})).notice)

    def test_unknown_update_leaves_ignored(self):
        merged = merge_display_settings({}, {"symbols": {"sparkle": "*"}, "bogus": {"x": 1}})
        self.assertEqual(merged, {"symbols": {}})


class MergeLocationSettingsTests(unittest.TestCase):
    def test_replaces_location_owned_keys(self):
        raw = copy.deepcopy(STORED)
        update = LocationSettingsUpdate(
            locations=[
                {"locationId": "gid://loc/2", "publicName": "Ginza", "sortOrder": 1},
                {"publicName": "no id"},
            ],
            sort_mode="storePickupFirst",
            pinned_location_id="  gid://loc/2 ",
            future={"nearbyOtherHeading": "  Other stores ", "groupByRegion": "yes"},
        )
        merged = merge_location_settings(raw, update)
        self.assertEqual(raw, STORED)
        self.assertEqual(
            merged["locations"],
            [
                {
                    "locationId": "gid://loc/2",
                    "enabled": True,
                    "publicName": "Ginza",
                    "sortOrder": 1,
                    "excludeFromNearby": False,
                }
            ],
        )
        self.assertEqual(merged["sort"], {"mode": "store_pickup_first", "direction": "kept"})
        self.assertEqual(merged["pinnedLocationId"], "gid://loc/2")
        self.assertEqual(merged["regionGroups"], [{"id": "east", "name": "East", "sortOrder": 1}])
        self.assertEqual(
            merged["future"],
            {"groupByRegion": True, "experimental": 1, "nearbyOtherHeading": "Other stores"},
        )
        self.assertEqual(merged["analytics"], {"enabled": True})
        self.assertEqual(merged["thresholds"], STORED["thresholds"])

    def test_unknown_sort_and_blank_pin(self):
        merged = merge_location_settings(
            STORED, LocationSettingsUpdate(sort_mode="sideways", pinned_location_id=" ")
        )
        self.assertEqual(merged["sort"]["mode"], "none")
        self.assertIsNone(merged["pinnedLocationId"])
        self.assertEqual(merged["locations"], [])

    def test_region_groups_normalized(self):
        update = LocationSettingsUpdate(
            region_groups=[
                {"id": "west", "name": "West"},
                {"id": "north", "name": ""},
                {"id": "east", "name": "East", "sortOrder": 1},
            ]
        )
        merged = merge_location_settings({}, update)
        self.assertEqual(
            merged["regionGroups"],
            [
                {"id": "east", "name": "East", "sortOrder": 1},
                {"id": "west", "name": "West", "sortOrder": 1},
            ],
        )

    def test_blank_region_unset_label_resets_default(self):
        merged = merge_location_settings(
            {"future": {"regionUnsetLabel": "Misc"}},
            LocationSettingsUpdate(future={"regionUnsetLabel": "  "}),
        )
        self.assertEqual(merged["future"]["regionUnsetLabel"], "その他")

    def test_merged_config_resolves(self):
        merged = merge_location_settings(
            STORED,
            LocationSettingsUpdate(
                locations=[{"locationId": "a", "regionGroupId": "east"}],
                sort_mode="in_stock_first",
            ),
        )
        config = resolve_config(merged)
        self.assertIs(config.sort_mode, SortMode.IN_STOCK_FIRST)
        self.assertEqual(config.locations[0].region_group_id, "east")
        self.assertTrue(config.future.group_by_region)
