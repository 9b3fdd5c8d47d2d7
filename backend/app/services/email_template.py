"""
New-order notification email.

Public API:
  render_subject(purchase) -> str
  render_new_order_email(order, purchase) -> str
"""

import html

from app.models.order import Order, Purchase


def _esc(text: str) -> str:
    return html.escape(text or "", quote=True)


def render_subject(purchase: Purchase) -> str:
    """Single-line subject; line breaks in the product name are folded to spaces."""
    return f"New Order: {' '.join(purchase.product_name.split())}"


def _row(label: str, value: str) -> str:
    return (
        "<tr>"
        f'<td style="padding:4px 12px 4px 0;color:#555;">{_esc(label)}</td>'
        f'<td style="padding:4px 0;"><strong>{_esc(value)}</strong></td>'
        "</tr>"
    )


def render_new_order_email(order: Order, purchase: Purchase) -> str:
    """
    Render the HTML body for one purchase of ``order``.

    Optional details (phone, subject property address, price paid) are only
    listed when present. Every value is HTML-escaped.
    """
    customer = order.customer

    order_rows = [
        _row("Order number", order.order_number),
        _row("Order ID", order.id),
    ]

    customer_rows = [
        _row("Name", customer.full_name),
        _row("Email", customer.email),
    ]
    if customer.phone:
        customer_rows.append(_row("Phone", customer.phone))

    purchase_rows = [
        _row("Product", purchase.product_name),
        _row("SKU", purchase.sku),
    ]
    if purchase.subject_address:
        purchase_rows.append(_row("Subject property address", purchase.subject_address))
    if purchase.paid_value:
        purchase_rows.append(
            _row("Price paid", f"{purchase.paid_value} {purchase.currency}".strip())
        )

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{_esc(render_subject(purchase))}</title>
</head>
<body style="font-family: Arial, sans-serif; color: #222;">
    <h2>New order received</h2>
    <p>A new order for <strong>{_esc(purchase.product_name)}</strong> was placed.</p>
    <h3>Order</h3>
    <table>{"".join(order_rows)}</table>
    <h3>Customer</h3>
    <table>{"".join(customer_rows)}</table>
    <h3>Purchase</h3>
    <table>{"".join(purchase_rows)}</table>
</body>
</html>
"""
