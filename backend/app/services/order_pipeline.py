"""
New-order pipeline: validate → notify → record.

    START ──resolve + dedup check──▶ VALIDATED ──notify──▶ NOTIFIED ──record──▶ RECORDED ──▶ DONE

Every transition can abort with an OrderPipelineError. Each stage takes the
current PipelineContext and returns a new one; contexts are immutable and
belong to a single request.

Recording rules:
  - Lookup, dedup-check and no-purchase failures abort before any email is sent.
  - If every notification failed, nothing is recorded so a later request for
    the same order can try again.
  - If at least one notification went out, the order is recorded. A failure to
    record is reported to the caller even though mail was sent.
"""

import logging
from enum import Enum
from typing import Optional, Protocol

from pydantic import BaseModel

from app.errors import (
    AllNotificationsFailedError,
    DuplicateOrderError,
    RecordingError,
    StoreError,
)
from app.models.notification import NotificationOutcome, NotificationReport
from app.models.order import Order
from app.services.mailer import MailTransport
from app.services.notifier import notify_all
from app.services.order_lookup import OrderSource, resolve_order
from app.services.recipient_router import RoutingTable

logger = logging.getLogger(__name__)

ALL_SENT_MESSAGE = "Successfully notified recipients for all purchases."
PARTIAL_MESSAGE = "Partially failed. Could not notify all recipients for purchases."


class OrderStore(Protocol):
    def is_processed(self, order_id: str) -> bool: ...

    def mark_processed(self, order_id: str) -> None: ...


class PipelineStage(str, Enum):
    START = "start"
    VALIDATED = "validated"
    NOTIFIED = "notified"
    RECORDED = "recorded"
    DONE = "done"


class PipelineContext(BaseModel):
    """Snapshot of one request's progress through the pipeline."""
    model_config = {"frozen": True}

    order_number: str
    customer_email: str
    stage: PipelineStage = PipelineStage.START
    order: Optional[Order] = None
    report: Optional[NotificationReport] = None


class PipelineResult(BaseModel):
    """Final successful outcome of a request."""
    model_config = {"frozen": True}

    status_code: int
    message: str
    order_id: str
    outcome: NotificationOutcome


class OrderPipeline:
    """Runs one inbound new-order request end to end."""

    def __init__(
        self,
        order_source: OrderSource,
        store: OrderStore,
        routing_table: RoutingTable,
        mailer: MailTransport,
        sender: str,
    ):
        self.order_source = order_source
        self.store = store
        self.routing_table = routing_table
        self.mailer = mailer
        self.sender = sender

    def validate(self, ctx: PipelineContext) -> PipelineContext:
        order = resolve_order(ctx.order_number, ctx.customer_email, self.order_source)

        if self.store.is_processed(order.id):
            logger.info(f"Order entry already processed: {order.id}")
            raise DuplicateOrderError("Order entry already processed")

        return ctx.model_copy(update={"stage": PipelineStage.VALIDATED, "order": order})

    def notify(self, ctx: PipelineContext) -> PipelineContext:
        report = notify_all(ctx.order, self.routing_table, self.mailer, self.sender)

        if report.outcome is NotificationOutcome.ALL_FAILED:
            logger.error(f"Failed to notify any recipients for order {ctx.order.id}")
            raise AllNotificationsFailedError(
                "Failed to notify all recipients for purchases."
            )

        return ctx.model_copy(update={"stage": PipelineStage.NOTIFIED, "report": report})

    def record(self, ctx: PipelineContext) -> PipelineContext:
        try:
            self.store.mark_processed(ctx.order.id)
        except StoreError as exc:
            if ctx.report.outcome is NotificationOutcome.ALL_SUCCEEDED:
                msg = "Recipients emailed but could not log order."
            else:
                msg = "Recipients partially emailed but could not log order."
            logger.error(f"{msg} Order {ctx.order.id}: {exc}")
            raise RecordingError(msg) from exc

        return ctx.model_copy(update={"stage": PipelineStage.RECORDED})

    def respond(self, ctx: PipelineContext) -> PipelineResult:
        outcome = ctx.report.outcome
        if outcome is NotificationOutcome.ALL_SUCCEEDED:
            status_code, message = 200, ALL_SENT_MESSAGE
        else:
            status_code, message = 207, PARTIAL_MESSAGE

        logger.info(
            f"Order {ctx.order.id} done: {ctx.report.sent_count}/"
            f"{len(ctx.report.results)} purchases notified"
        )
        return PipelineResult(
            status_code=status_code,
            message=message,
            order_id=ctx.order.id,
            outcome=outcome,
        )

    def run(self, order_number: str, customer_email: str) -> PipelineResult:
        """
        Process one new-order request.

        Raises:
            OrderPipelineError: any subclass, carrying the status to respond with.
        """
        ctx = PipelineContext(order_number=order_number, customer_email=customer_email)
        ctx = self.validate(ctx)
        ctx = self.notify(ctx)
        ctx = self.record(ctx)
        return self.respond(ctx)
