"""
Notifier: one email per purchase, results aggregated per order.

Failures are scoped to the purchase they happen on. An unroutable SKU, a render
failure or a transport failure marks that purchase as not sent and the loop
moves on to the next one. Mail already sent is never recalled.
"""

import logging

from app.errors import NoPurchasesError, PurchaseNotificationError, RenderError
from app.models.notification import EmailMessage, NotificationReport, PurchaseResult
from app.models.order import Order, Purchase
from app.services.email_template import render_new_order_email, render_subject
from app.services.mailer import MailTransport
from app.services.recipient_router import RoutingTable, recipients_for

logger = logging.getLogger(__name__)


def _build_email(
    order: Order,
    purchase: Purchase,
    sender: str,
    recipients: tuple[str, ...],
) -> EmailMessage:
    try:
        subject = render_subject(purchase)
        body = render_new_order_email(order, purchase)
    except Exception as exc:
        logger.error(f"Failed to render email template. Err: {exc}")
        raise RenderError(f"Failed to render email: {exc}") from exc

    return EmailMessage(
        sender=sender,
        recipients=recipients,
        subject=subject,
        html_body=body,
    )


def _notify_one(
    order: Order,
    purchase: Purchase,
    routing_table: RoutingTable,
    mailer: MailTransport,
    sender: str,
) -> PurchaseResult:
    recipients: tuple[str, ...] = ()
    try:
        recipients = recipients_for(purchase.sku, routing_table)
        mailer.send(_build_email(order, purchase, sender, recipients))
    except PurchaseNotificationError as exc:
        logger.warning(
            f"Could not notify recipients for purchase of {purchase.product_name!r} "
            f"(SKU {purchase.sku!r}): {exc}"
        )
        return PurchaseResult(
            sku=purchase.sku,
            product_name=purchase.product_name,
            recipients=recipients,
            sent=False,
            error=str(exc),
        )

    logger.info(
        f"Email successfully sent to recipients {', '.join(recipients)} "
        f"for purchase of {purchase.product_name}"
    )
    return PurchaseResult(
        sku=purchase.sku,
        product_name=purchase.product_name,
        recipients=recipients,
        sent=True,
    )


def notify_all(
    order: Order,
    routing_table: RoutingTable,
    mailer: MailTransport,
    sender: str,
) -> NotificationReport:
    """
    Email the routed recipients of every purchase in ``order``, in order.

    Args:
        order:         The resolved order.
        routing_table: SKU → recipients.
        mailer:        Mail transport; ``send`` raises TransportError on failure.
        sender:        From address.

    Returns:
        A NotificationReport with one result per purchase.

    Raises:
        NoPurchasesError: the order has no purchases; nothing is sent.
    """
    if not order.purchases:
        logger.warning(f"Order {order.id!r} has no valid purchases")
        raise NoPurchasesError("Order has no valid purchases")

    results = [
        _notify_one(order, purchase, routing_table, mailer, sender)
        for purchase in order.purchases
    ]
    return NotificationReport(results=tuple(results))
