"""Canonical item signatures used to compare orders."""

from ..orders.record import OrderRecord

Signature = tuple[str, ...]


def build_signature(order: OrderRecord, match_quantity: bool) -> Signature | None:
    """Build the signature of an order from its resolvable line items.

    Each item with a product contributes one token: the product ID, or 'product_id:quantity' when
    match_quantity is set. Items whose product cannot be resolved contribute nothing. Tokens are
    sorted so the order in which items were recorded does not matter, and repeated tokens are kept,
    making signature equality a multiset comparison. Two lines of the same product at different
    quantities stay two tokens.

    Args:
        order: Order to fingerprint
        match_quantity: Whether quantities are part of the comparison

    Returns:
        Sorted tuple of tokens, or None when the order has no resolvable items. Orders without a
        signature never take part in duplicate detection.
    """
    tokens = []
    for item in order.items:
        if item.product_id is None:
            continue

        if match_quantity:
            tokens.append(f"{item.product_id}:{item.quantity}")
        else:
            tokens.append(str(item.product_id))

    if not tokens:
        return None

    tokens.sort()
    return tuple(tokens)
