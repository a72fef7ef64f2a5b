"""Order snapshot types shared by the order store, the duplicate engine and the reports."""

from datetime import datetime
from decimal import Decimal
from typing import Any

import msgpack

ORDER_TYPE = 'shop_order'
REFUND_TYPE = 'shop_order_refund'

OrderId = int | str
ProductId = int | str


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == '':
        return Decimal('0')
    return Decimal(str(value))


def _parse_timestamp(value: str) -> datetime:
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


class LineItem:
    """One line of an order.

    Attributes:
        product_id: Identifier of the ordered product, or None when the product can no longer be
                    resolved (for example because it was deleted after the order was placed).
        quantity: Ordered quantity
        item_id: Identifier of the line within its order
        name: Product name as recorded on the order line
        sku: Product SKU, empty when unknown
        subtotal: Line amount before discounts
        total: Line amount after discounts
    """

    __slots__ = ('product_id', 'quantity', 'item_id', 'name', 'sku', 'subtotal', 'total')

    def __init__(self, product_id: ProductId | None, quantity: int, *, item_id: int | str | None = None,
                 name: str = '', sku: str = '', subtotal: Decimal | None = None, total: Decimal | None = None):
        self.product_id = product_id
        self.quantity = quantity
        self.item_id = item_id
        self.name = name
        self.sku = sku
        self.subtotal = subtotal if subtotal is not None else Decimal('0')
        self.total = total if total is not None else Decimal('0')

    def __repr__(self) -> str:
        return f"LineItem(product_id={self.product_id!r}, quantity={self.quantity!r})"

    def to_list(self) -> list[Any]:
        return [self.product_id, self.quantity, self.item_id, self.name, self.sku,
                str(self.subtotal), str(self.total)]

    @classmethod
    def from_list(cls, data: list[Any]) -> "LineItem":
        product_id, quantity, item_id, name, sku, subtotal, total = data
        return cls(product_id, quantity, item_id=item_id, name=name, sku=sku,
                   subtotal=Decimal(subtotal), total=Decimal(total))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        """Load a line item from an exported JSON object."""
        # Variations are matched by their own ID; 0 marks a product deleted since the order was placed
        product_id = data.get('variation_id') or data.get('product_id') or None
        return cls(
            product_id,
            int(data.get('quantity', 1)),
            item_id=data.get('item_id', data.get('id')),
            name=data.get('name', ''),
            sku=data.get('sku') or '',
            subtotal=_to_decimal(data.get('subtotal', data.get('total'))),
            total=_to_decimal(data.get('total'))
        )


class OrderRecord:
    """Read-only snapshot of an order as fetched from the order source.

    Attributes:
        order_id: Order identifier
        customer_email: Billing email of the customer, empty for refunds
        items: Line items in the order they were recorded
        created_at: Creation time of the order
        status: Order status (e.g. 'completed', 'processing')
        total: Grand total of the order
        order_type: ORDER_TYPE for regular orders, REFUND_TYPE for refund records
        currency: ISO currency code of the amounts
        customer_name: Billing first and last name
        phone: Billing phone number
        payment_method: Human readable payment method title
        billing_address: Formatted billing address, lines separated by newlines
        shipping_address: Formatted shipping address, or None if the order has none
        subtotal, shipping_total, tax_total, discount_total: Order totals breakdown
    """

    def __init__(self, order_id: OrderId, customer_email: str, items: list[LineItem], created_at: datetime,
                 status: str, total: Decimal, *, order_type: str = ORDER_TYPE, currency: str = '',
                 customer_name: str = '', phone: str = '', payment_method: str = '',
                 billing_address: str = '', shipping_address: str | None = None,
                 subtotal: Decimal | None = None, shipping_total: Decimal | None = None,
                 tax_total: Decimal | None = None, discount_total: Decimal | None = None):
        self.order_id = order_id
        self.customer_email = customer_email
        self.items = tuple(items)
        self.created_at = created_at
        self.status = status
        self.total = total
        self.order_type = order_type
        self.currency = currency
        self.customer_name = customer_name
        self.phone = phone
        self.payment_method = payment_method
        self.billing_address = billing_address
        self.shipping_address = shipping_address
        self.subtotal = subtotal if subtotal is not None else Decimal('0')
        self.shipping_total = shipping_total if shipping_total is not None else Decimal('0')
        self.tax_total = tax_total if tax_total is not None else Decimal('0')
        self.discount_total = discount_total if discount_total is not None else Decimal('0')

    def __repr__(self) -> str:
        return f"OrderRecord(order_id={self.order_id!r}, customer_email={self.customer_email!r})"

    @property
    def is_refund(self) -> bool:
        return self.order_type == REFUND_TYPE

    def to_msgpack(self) -> bytes:
        """Serialize to msgpack format for storage.

        Returns:
            Msgpack-encoded bytes containing [order_id, customer_email, item_list, created_at, status, total,
            order_type, currency, customer_name, phone, payment_method, billing_address, shipping_address,
            subtotal, shipping_total, tax_total, discount_total], with decimals and the timestamp as strings
        """
        result = msgpack.dumps([
            self.order_id,
            self.customer_email,
            [item.to_list() for item in self.items],
            self.created_at.isoformat(),
            self.status,
            str(self.total),
            self.order_type,
            self.currency,
            self.customer_name,
            self.phone,
            self.payment_method,
            self.billing_address,
            self.shipping_address,
            str(self.subtotal),
            str(self.shipping_total),
            str(self.tax_total),
            str(self.discount_total),
        ])
        assert isinstance(result, bytes)
        return result

    @classmethod
    def from_msgpack(cls, data: bytes) -> "OrderRecord":
        decoded = msgpack.loads(data)
        assert isinstance(decoded, list)
        order_id, customer_email, item_list, created_at, status, total, order_type, currency, customer_name, \
            phone, payment_method, billing_address, shipping_address, subtotal, shipping_total, tax_total, \
            discount_total = decoded

        return cls(
            order_id, customer_email, [LineItem.from_list(item) for item in item_list],
            datetime.fromisoformat(created_at), status, Decimal(total),
            order_type=order_type, currency=currency, customer_name=customer_name, phone=phone,
            payment_method=payment_method, billing_address=billing_address, shipping_address=shipping_address,
            subtotal=Decimal(subtotal), shipping_total=Decimal(shipping_total), tax_total=Decimal(tax_total),
            discount_total=Decimal(discount_total)
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderRecord":
        """Load an order from an exported JSON object.

        Only 'id' and 'date_created' are required. Missing amounts default to zero and missing
        strings to empty.

        Raises:
            KeyError: If a required key is missing
            ValueError: If the creation date or an amount cannot be parsed
        """
        billing = data.get('billing') or {}
        customer_name = data.get('customer_name')
        if customer_name is None:
            customer_name = ' '.join(
                part for part in (billing.get('first_name', ''), billing.get('last_name', '')) if part)

        return cls(
            data['id'],
            data.get('customer_email', billing.get('email')) or '',
            [LineItem.from_dict(item) for item in data.get('items', data.get('line_items', []))],
            _parse_timestamp(data['date_created']),
            data.get('status', ''),
            _to_decimal(data.get('total')),
            order_type=data.get('type', ORDER_TYPE),
            currency=data.get('currency', ''),
            customer_name=customer_name,
            phone=data.get('phone', billing.get('phone')) or '',
            payment_method=data.get('payment_method_title', data.get('payment_method', '')),
            billing_address=data.get('billing_address', ''),
            shipping_address=data.get('shipping_address'),
            subtotal=_to_decimal(data.get('subtotal')),
            shipping_total=_to_decimal(data.get('shipping_total')),
            tax_total=_to_decimal(data.get('total_tax', data.get('tax_total'))),
            discount_total=_to_decimal(data.get('discount_total'))
        )
