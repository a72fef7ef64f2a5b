"""Tests for the show command."""
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path

from orderlens.commands.show import ShowArgs, do_show
from orderlens.store.order_store import OrderNotFound, OrderStore

from ..test_utils import capture_output, make_order

ADMIN_URL = 'https://shop.example.com/wp-admin/'


class ShowTest(unittest.TestCase):
    """Tests for do_show."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.store = OrderStore(Path(self._tmpdir.name), create=True)

    def tearDown(self):
        self.store.close()
        self._tmpdir.cleanup()

    def test_show_order(self):
        self.store.write_order(make_order(
            123, 'alice@example.com', [(17, 2, 'Blue Mug'), (None, 1, 'Old Poster')], '2024-02-03T04:05:06',
            total='42.50', customer_name='Alice Smith', phone='555-0100', payment_method='Credit Card',
            billing_address='Alice Smith<br/>1 Main St<br>Springfield', tax_total=Decimal('3.25')
        ))

        record, output = capture_output(do_show, self.store, ShowArgs('123', ADMIN_URL))

        self.assertEqual(123, record.order_id)
        self.assertIn('=== Order #123 ===', output)
        self.assertIn('Status: completed', output)
        self.assertIn('Date Created: 2024-02-03 04:05:06', output)
        self.assertIn('Customer: Alice Smith', output)
        self.assertIn('Email: alice@example.com', output)
        self.assertIn('Payment Method: Credit Card', output)
        self.assertIn('Total: $42.50', output)
        self.assertIn('Admin URL: https://shop.example.com/wp-admin/post.php?post=123&action=edit', output)
        self.assertIn('Alice Smith\n1 Main St\nSpringfield', output)
        self.assertNotIn('Shipping Address', output)
        self.assertIn('Blue Mug', output)
        self.assertIn('N/A', output)
        self.assertIn('Tax: $3.25', output)
        self.assertIn('Order #123 displayed successfully.', output)

    def test_show_shipping_address(self):
        self.store.write_order(make_order(5, 'a@example.com', [('A', 1)], shipping_address='Dock 4<br />Harbor'))

        _, output = capture_output(do_show, self.store, ShowArgs('5', ADMIN_URL))

        self.assertIn('--- Shipping Address ---\nDock 4\nHarbor', output)

    def test_show_order_without_items(self):
        self.store.write_order(make_order(7, 'a@example.com', []))

        _, output = capture_output(do_show, self.store, ShowArgs('7', ADMIN_URL))

        self.assertIn('No items in this order.', output)

    def test_order_not_found(self):
        with self.assertRaises(OrderNotFound) as context:
            capture_output(do_show, self.store, ShowArgs('999', ADMIN_URL))

        self.assertEqual('Order #999 not found.', str(context.exception))


if __name__ == '__main__':
    unittest.main()
