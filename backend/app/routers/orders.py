"""
New-order webhook router.

Endpoints:
  GET /newOrder?orderId=<order number>&customerEmailAddress=<email>

Responses are plain text. The status code reflects the aggregate outcome:

  200  every purchase notified, order recorded
  207  some purchases notified, order recorded
  412  orderId or customerEmailAddress missing
  400  no such order, or order already processed
  500  upstream / store failure, no purchases, every notification failed,
       or mail sent but order not recorded

Errors are raised as OrderPipelineError subclasses and rendered by the
handler registered in app.main.
"""

import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from app.config import get_settings
from app.errors import ConfigurationError, ValidationError
from app.services.dedup_store import ProcessedOrderStore
from app.services.mailer import SmtpMailer
from app.services.order_pipeline import OrderPipeline
from app.services.recipient_router import build_routing_table
from app.services.squarespace_client import SquarespaceClient

logger = logging.getLogger(__name__)

router = APIRouter()


class NewOrderQuery(BaseModel):
    order_number: str
    customer_email: str


def _require_order_query(
    orderId: Optional[str] = None,
    customerEmailAddress: Optional[str] = None,
) -> NewOrderQuery:
    """Reject the request before any collaborator is built if either param is missing."""
    if not orderId or not customerEmailAddress:
        logger.warning("No order specified")
        raise ValidationError("No order specified")
    return NewOrderQuery(order_number=orderId, customer_email=customerEmailAddress)


def get_order_pipeline() -> Iterator[OrderPipeline]:
    """
    Build the pipeline for one request from settings.

    The Squarespace client holds an HTTP connection pool and is closed when the
    request finishes.
    """
    settings = get_settings()
    try:
        client = SquarespaceClient.from_settings(settings)
    except ValueError as exc:
        logger.error(f"Order pipeline is not configured: {exc}")
        raise ConfigurationError("Error validating order") from exc

    try:
        yield OrderPipeline(
            order_source=client,
            store=ProcessedOrderStore(table=settings.processed_orders_table),
            routing_table=build_routing_table(settings),
            mailer=SmtpMailer.from_settings(settings),
            sender=settings.sender_email,
        )
    finally:
        client.close()


@router.get("/newOrder", response_class=PlainTextResponse)
def new_order(
    query: NewOrderQuery = Depends(_require_order_query),
    pipeline: OrderPipeline = Depends(get_order_pipeline),
) -> PlainTextResponse:
    """
    Notify the recipients of a newly placed Squarespace order.

    Declared as a plain ``def`` so FastAPI runs it in the threadpool: every
    collaborator call (orders fetch, SMTP, Supabase) blocks.
    """
    result = pipeline.run(query.order_number, query.customer_email)
    return PlainTextResponse(f"{result.message}\n", status_code=result.status_code)
