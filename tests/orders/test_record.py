"""Tests for OrderRecord and LineItem."""
import unittest
from datetime import datetime, timezone
from decimal import Decimal

from orderlens.duplicates.signature import build_signature
from orderlens.orders.record import LineItem, OrderRecord, ORDER_TYPE, REFUND_TYPE


class OrderRecordMsgpackTest(unittest.TestCase):
    """Tests for msgpack serialization of orders."""

    def test_serialize_full_record(self):
        """All fields survive serialization."""
        record = OrderRecord(
            1042, 'alice@example.com',
            [
                LineItem(17, 2, item_id=7, name='Mug', sku='MUG-1', subtotal=Decimal('20.00'),
                         total=Decimal('18.00')),
                LineItem(None, 1, item_id=8, name='Discontinued'),
            ],
            datetime(2024, 3, 5, 14, 30, 0), 'processing', Decimal('23.50'),
            currency='EUR', customer_name='Alice Smith', phone='555-0100', payment_method='Card',
            billing_address='Alice Smith<br/>1 Main St', shipping_address=None,
            subtotal=Decimal('20.00'), shipping_total=Decimal('5.50'), tax_total=Decimal('0.00'),
            discount_total=Decimal('2.00')
        )

        restored = OrderRecord.from_msgpack(record.to_msgpack())

        self.assertEqual(1042, restored.order_id)
        self.assertEqual('alice@example.com', restored.customer_email)
        self.assertEqual(datetime(2024, 3, 5, 14, 30, 0), restored.created_at)
        self.assertEqual('processing', restored.status)
        self.assertEqual(Decimal('23.50'), restored.total)
        self.assertEqual(ORDER_TYPE, restored.order_type)
        self.assertEqual('EUR', restored.currency)
        self.assertEqual('Alice Smith', restored.customer_name)
        self.assertIsNone(restored.shipping_address)
        self.assertEqual(Decimal('5.50'), restored.shipping_total)
        self.assertEqual(Decimal('2.00'), restored.discount_total)

        self.assertEqual(2, len(restored.items))
        mug, discontinued = restored.items
        self.assertEqual(17, mug.product_id)
        self.assertEqual(2, mug.quantity)
        self.assertEqual('MUG-1', mug.sku)
        self.assertEqual(Decimal('18.00'), mug.total)
        self.assertIsNone(discontinued.product_id)
        self.assertEqual('Discontinued', discontinued.name)


class OrderRecordFromDictTest(unittest.TestCase):
    """Tests for loading orders from export objects."""

    def test_minimal_entry(self):
        record = OrderRecord.from_dict({'id': 5, 'date_created': '2024-01-02T03:04:05'})

        self.assertEqual(5, record.order_id)
        self.assertEqual('', record.customer_email)
        self.assertEqual((), record.items)
        self.assertEqual(Decimal('0'), record.total)
        self.assertEqual(ORDER_TYPE, record.order_type)
        self.assertFalse(record.is_refund)

    def test_billing_block(self):
        """Email, name and phone are taken from a billing block when not given directly."""
        record = OrderRecord.from_dict({
            'id': 9,
            'date_created': '2024-01-02 03:04:05',
            'billing': {'email': 'bob@example.com', 'first_name': 'Bob', 'last_name': 'Jones', 'phone': '123'},
            'line_items': [{'id': 1, 'product_id': 3, 'quantity': 4, 'name': 'Pen', 'total': '4.00'}],
            'total': '4.00',
        })

        self.assertEqual('bob@example.com', record.customer_email)
        self.assertEqual('Bob Jones', record.customer_name)
        self.assertEqual('123', record.phone)
        self.assertEqual(1, len(record.items))
        self.assertEqual(3, record.items[0].product_id)
        self.assertEqual(4, record.items[0].quantity)
        self.assertEqual(1, record.items[0].item_id)
        self.assertEqual(Decimal('4.00'), record.items[0].subtotal)

    def test_deleted_product(self):
        """A product_id of 0 marks a deleted product and loads as unresolvable."""
        record = OrderRecord.from_dict({
            'id': 12,
            'date_created': '2024-01-02T03:04:05',
            'line_items': [{'id': 1, 'product_id': 0, 'variation_id': 0, 'quantity': 1, 'name': 'Gone'}],
        })

        self.assertIsNone(record.items[0].product_id)
        self.assertIsNone(build_signature(record, False))

    def test_variation_identifies_item(self):
        """Lines of a variable product are identified by their variation."""
        small, large = (
            OrderRecord.from_dict({
                'id': order_id,
                'date_created': '2024-01-02T03:04:05',
                'line_items': [{'id': 1, 'product_id': 30, 'variation_id': variation_id, 'quantity': 1}],
            })
            for order_id, variation_id in ((13, 31), (14, 32))
        )

        self.assertEqual(31, small.items[0].product_id)
        self.assertEqual(32, large.items[0].product_id)
        self.assertNotEqual(build_signature(small, False), build_signature(large, False))

    def test_simple_product_ignores_zero_variation(self):
        record = OrderRecord.from_dict({
            'id': 15,
            'date_created': '2024-01-02T03:04:05',
            'line_items': [{'id': 1, 'product_id': 30, 'variation_id': 0, 'quantity': 1}],
        })

        self.assertEqual(30, record.items[0].product_id)

    def test_utc_designator(self):
        """GMT timestamps ending in Z are accepted."""
        record = OrderRecord.from_dict({'id': 16, 'date_created': '2024-01-02T03:04:05Z'})

        self.assertEqual(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), record.created_at)

    def test_refund_entry(self):
        record = OrderRecord.from_dict({'id': 11, 'date_created': '2024-01-02', 'type': REFUND_TYPE})

        self.assertTrue(record.is_refund)

    def test_missing_id(self):
        with self.assertRaises(KeyError):
            OrderRecord.from_dict({'date_created': '2024-01-02'})

    def test_bad_date(self):
        with self.assertRaises(ValueError):
            OrderRecord.from_dict({'id': 1, 'date_created': 'yesterday'})


if __name__ == '__main__':
    unittest.main()
