"""
Order lookup service.

Resolves an inbound (order number, customer email) pair to a single Squarespace
order and converts it into the internal Order model.

Public API:
  resolve_order(order_number, customer_email, client) -> Order
  find_order(orders, order_number, customer_email) -> SquarespaceOrder | None
  extract_purchases(line_items) -> tuple[Purchase, ...]
"""

import logging
from typing import Iterable, Optional, Protocol

from app.errors import NotFoundError, ValidationError
from app.models.order import (
    CustomerInfo,
    Order,
    Purchase,
    SquarespaceLineItem,
    SquarespaceOrder,
)

logger = logging.getLogger(__name__)

SUBJECT_ADDRESS_LABEL = "Subject Property Address"


class OrderSource(Protocol):
    def fetch_orders(self) -> list[SquarespaceOrder]: ...


def find_order(
    orders: Iterable[SquarespaceOrder],
    order_number: str,
    customer_email: str,
) -> Optional[SquarespaceOrder]:
    """
    Return the first order whose order number and customer email both match
    exactly (case-sensitive), or None.

    Order numbers are only unique together with the customer email.
    """
    for order in orders:
        if order.customer_email == customer_email and order.order_number == order_number:
            return order
    return None


def _subject_address(line_item: SquarespaceLineItem) -> str:
    """Value of the first "Subject Property Address" customization, or ""."""
    for field in line_item.customizations or []:
        if field.label == SUBJECT_ADDRESS_LABEL:
            return field.value
    return ""


def extract_purchases(line_items: Iterable[SquarespaceLineItem]) -> tuple[Purchase, ...]:
    """Build one Purchase per line item, preserving line-item order."""
    purchases: list[Purchase] = []
    for item in line_items:
        price = item.unit_price_paid
        purchases.append(
            Purchase(
                sku=item.sku,
                product_name=item.product_name,
                subject_address=_subject_address(item),
                currency=price.currency if price else "",
                paid_value=price.value if price else "",
            )
        )
    return tuple(purchases)


def to_order(upstream: SquarespaceOrder) -> Order:
    billing = upstream.billing_address
    return Order(
        id=upstream.id,
        order_number=upstream.order_number,
        customer=CustomerInfo(
            first_name=(billing.first_name if billing else None) or "",
            last_name=(billing.last_name if billing else None) or "",
            email=upstream.customer_email,
            phone=(billing.phone if billing else None) or "",
        ),
        purchases=extract_purchases(upstream.line_items),
    )


def resolve_order(order_number: str, customer_email: str, client: OrderSource) -> Order:
    """
    Resolve the order identified by (order_number, customer_email).

    Args:
        order_number:   Human-facing Squarespace order number.
        customer_email: Email the order was placed with.
        client:         Anything with a ``fetch_orders()`` returning Squarespace orders.

    Returns:
        The matching Order.

    Raises:
        ValidationError: either argument is empty (no upstream call is made).
        NotFoundError:   no order matches.
        UpstreamError:   propagated from the client.
    """
    if not order_number or not customer_email:
        logger.warning("No order specified")
        raise ValidationError("No order specified")

    match = find_order(client.fetch_orders(), order_number, customer_email)
    if match is None:
        logger.info(f"No order {order_number!r} found for {customer_email!r}")
        raise NotFoundError("Invalid order")

    return to_order(match)
