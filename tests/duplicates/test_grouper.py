"""Tests for group_duplicates and find_duplicates_for_customer."""
import unittest

from orderlens.duplicates.grouper import DuplicateGroup, find_duplicates_for_customer, group_duplicates
from orderlens.orders.record import OrderRecord, REFUND_TYPE

from ..test_utils import make_order


class GroupDuplicatesTest(unittest.TestCase):
    """Tests for grouping orders by signature."""

    def test_reordered_items_grouped(self):
        """O1={A×1, B×2} and O2={B×2, A×1} form one group in product mode."""
        o1 = make_order(1, 'a@example.com', [('A', 1), ('B', 2)])
        o2 = make_order(2, 'a@example.com', [('B', 2), ('A', 1)])

        groups = group_duplicates([o1, o2], False)

        self.assertEqual(1, len(groups))
        self.assertEqual(2, groups[0].count)
        self.assertEqual([1, 2], groups[0].order_ids)
        self.assertEqual(('A', 'B'), groups[0].signature)

    def test_quantity_mode(self):
        """O1={A×1} and O3={A×2} group only when quantities are ignored."""
        o1 = make_order(1, 'a@example.com', [('A', 1)])
        o3 = make_order(3, 'a@example.com', [('A', 2)])

        self.assertEqual([], group_duplicates([o1, o3], True))

        groups = group_duplicates([o1, o3], False)
        self.assertEqual(1, len(groups))
        self.assertEqual([1, 3], groups[0].order_ids)

    def test_all_distinct(self):
        """Distinct signatures yield no groups."""
        orders = [
            make_order(1, 'a@example.com', [('A', 1)]),
            make_order(2, 'a@example.com', [('B', 1)]),
            make_order(3, 'a@example.com', [('A', 1), ('B', 1)]),
        ]

        self.assertEqual([], group_duplicates(orders, False))

    def test_empty_input(self):
        self.assertEqual([], group_duplicates([], False))
        self.assertEqual([], group_duplicates(iter([]), True))

    def test_member_order_preserved(self):
        """Members keep their input order rather than being sorted."""
        orders = [
            make_order(30, 'a@example.com', [('A', 1)]),
            make_order(10, 'a@example.com', [('A', 1)]),
            make_order(20, 'a@example.com', [('A', 1)]),
        ]

        groups = group_duplicates(orders, False)

        self.assertEqual(1, len(groups))
        self.assertEqual([30, 10, 20], groups[0].order_ids)

    def test_group_order_follows_first_occurrence(self):
        """Groups are listed by first occurrence of their signature, not alphabetically."""
        orders = [
            make_order(1, 'a@example.com', [('Z', 1)]),
            make_order(2, 'a@example.com', [('A', 1)]),
            make_order(3, 'a@example.com', [('A', 1)]),
            make_order(4, 'a@example.com', [('Z', 1)]),
        ]

        groups = group_duplicates(orders, False)

        self.assertEqual([('Z',), ('A',)], [group.signature for group in groups])
        self.assertEqual([1, 4], groups[0].order_ids)
        self.assertEqual([2, 3], groups[1].order_ids)

    def test_orders_without_signature_excluded(self):
        """Orders without items or with only deleted products are never grouped."""
        orders = [
            make_order(1, 'a@example.com', []),
            make_order(2, 'a@example.com', []),
            make_order(3, 'a@example.com', [(None, 1)]),
            make_order(4, 'a@example.com', [(None, 1)]),
        ]

        self.assertEqual([], group_duplicates(orders, False))

    def test_imported_orders_with_deleted_products_excluded(self):
        """Exported lines with product_id 0 refer to deleted products and do not make orders identical."""
        orders = [
            OrderRecord.from_dict({
                'id': order_id,
                'date_created': '2024-01-05T10:00:00',
                'billing': {'email': 'a@example.com'},
                'line_items': [{'id': order_id, 'product_id': 0, 'variation_id': 0, 'quantity': 1}],
            })
            for order_id in (1, 2)
        ]

        self.assertEqual([], group_duplicates(orders, False))

    def test_refunds_excluded(self):
        """Refund records never join a group."""
        orders = [
            make_order(1, 'a@example.com', [('A', 1)]),
            make_order(2, 'a@example.com', [('A', 1)], order_type=REFUND_TYPE),
        ]

        self.assertEqual([], group_duplicates(orders, False))

    def test_each_order_in_one_group(self):
        """An order belongs to at most one group."""
        orders = [
            make_order(1, 'a@example.com', [('A', 1), ('B', 1)]),
            make_order(2, 'a@example.com', [('A', 1)]),
            make_order(3, 'a@example.com', [('B', 1), ('A', 1)]),
            make_order(4, 'a@example.com', [('A', 1)]),
        ]

        groups = group_duplicates(orders, False)
        member_ids = [order_id for group in groups for order_id in group.order_ids]

        self.assertEqual(sorted(member_ids), sorted(set(member_ids)))
        self.assertEqual([[1, 3], [2, 4]], [group.order_ids for group in groups])

    def test_idempotent(self):
        """Running the grouping twice gives the same groups in the same order."""
        orders = [
            make_order(1, 'a@example.com', [('A', 1)]),
            make_order(2, 'a@example.com', [('B', 2)]),
            make_order(3, 'a@example.com', [('A', 1)]),
            make_order(4, 'a@example.com', [('B', 2)]),
        ]

        first = group_duplicates(orders, True)
        second = group_duplicates(orders, True)

        self.assertEqual([g.signature for g in first], [g.signature for g in second])
        self.assertEqual([g.order_ids for g in first], [g.order_ids for g in second])

    def test_group_members_are_input_records(self):
        o1 = make_order(1, 'a@example.com', [('A', 1)])
        o2 = make_order(2, 'a@example.com', [('A', 1)])

        group = group_duplicates([o1, o2], False)[0]

        self.assertIsInstance(group, DuplicateGroup)
        self.assertIs(o1, group.members[0])
        self.assertIs(o2, group.members[1])


class FindDuplicatesForCustomerTest(unittest.TestCase):
    """Tests for the per-customer finder."""

    def test_single_order(self):
        """A single order cannot have duplicates."""
        order = make_order(1, 'a@example.com', [('A', 1)])

        self.assertEqual([], find_duplicates_for_customer([order], False))

    def test_same_as_grouper(self):
        orders = [
            make_order(1, 'a@example.com', [('A', 1)]),
            make_order(2, 'a@example.com', [('A', 1)]),
            make_order(3, 'a@example.com', [('B', 1)]),
        ]

        groups = find_duplicates_for_customer(orders, False)

        self.assertEqual([[1, 2]], [group.order_ids for group in groups])


if __name__ == '__main__':
    unittest.main()
