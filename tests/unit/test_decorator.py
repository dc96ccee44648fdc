import itertools
import unittest

from location_stock.availability.decorator import decorate_stocks
from location_stock.availability.models import (
    CapabilityFlags,
    InventorySnapshot,
    LocationRecord,
    RegionGroup,
)


def _snapshot(location_id, name, quantity=1, online=True, pickup=False):
    return InventorySnapshot(
        location_id=location_id,
        location_name=name,
        quantity_available=quantity,
        supports_online_fulfillment=online,
        pickup_enabled=pickup,
    )


class DecorateStocksTests(unittest.TestCase):
    def setUp(self):
        self.snapshots = [
            _snapshot("a", "Alpha", quantity=3),
            _snapshot("b", "Bravo", quantity=0, pickup=True),
            _snapshot("c", "Charlie", quantity=9),
        ]
        self.groups = (RegionGroup(id="east", name="East", sort_order=1),)

    def test_record_overrides_name_and_order(self):
        records = (
            LocationRecord("a", public_name="Alpha Store", sort_order=2, region_group_id="east"),
            LocationRecord("b", sort_order=1, exclude_from_nearby=True),
        )
        rows = decorate_stocks(self.snapshots, records, {}, None, self.groups)
        self.assertEqual([row.location_id for row in rows], ["b", "a", "c"])
        alpha = rows[1]
        self.assertEqual(alpha.display_name, "Alpha Store")
        self.assertEqual(alpha.location_name, "Alpha")
        self.assertEqual(alpha.region_key, "East")
        self.assertTrue(alpha.from_config)
        bravo = rows[0]
        self.assertEqual(bravo.display_name, "Bravo")
        self.assertTrue(bravo.exclude_from_nearby)
        self.assertTrue(bravo.store_pickup_enabled)
        self.assertEqual(bravo.region_key, "__unset__")

    def test_location_without_record_is_unranked(self):
        records = (LocationRecord("a", sort_order=1),)
        rows = decorate_stocks(self.snapshots, records, {}, None, ())
        charlie = next(row for row in rows if row.location_id == "c")
        self.assertFalse(charlie.from_config)
        self.assertEqual(charlie.sort_order, 999999)
        self.assertEqual(charlie.display_name, "Charlie")
        self.assertEqual(charlie.region_key, "__unset__")

    def test_pinned_region_key(self):
        rows = decorate_stocks(self.snapshots, (), {}, "c", self.groups)
        keys = {row.location_id: row.region_key for row in rows}
        self.assertEqual(keys, {"a": "__unset__", "b": "__unset__", "c": "pinned"})

    def test_unknown_region_group_is_unset(self):
        records = (LocationRecord("a", region_group_id="west"),)
        rows = decorate_stocks(self.snapshots, records, {}, None, self.groups)
        self.assertEqual(rows[0].region_key, "__unset__")

    def test_capabilities_attached_with_default(self):
        capability_map = {"a": CapabilityFlags(has_shipping=True, has_local_delivery=True)}
        rows = decorate_stocks(self.snapshots, (), capability_map, None, ())
        flags = {row.location_id: (row.has_shipping, row.has_local_delivery) for row in rows}
        self.assertEqual(flags, {"a": (True, True), "b": (False, False), "c": (False, False)})

    def test_disabled_records_never_appear(self):
        ids = ["a", "b", "c"]
        for enabled_flags in itertools.product([True, False], repeat=3):
            for pinned in (None, "a", "b"):
                records = tuple(
                    LocationRecord(location_id, enabled=enabled, sort_order=index)
                    for index, (location_id, enabled) in enumerate(zip(ids, enabled_flags))
                )
                rows = decorate_stocks(self.snapshots, records, {}, pinned, self.groups)
                disabled = {r.location_id for r in records if not r.enabled}
                self.assertFalse(disabled & {row.location_id for row in rows})

    def test_equal_sort_order_breaks_on_display_name(self):
        snapshots = [_snapshot("2", "beta"), _snapshot("1", "Alpha"), _snapshot("3", "ＡＬＰＨＡ２")]
        rows = decorate_stocks(snapshots, (), {}, None, ())
        self.assertEqual([row.location_id for row in rows], ["1", "3", "2"])
