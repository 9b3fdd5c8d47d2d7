"""
Order Notifier API
FastAPI application that turns Squarespace new-order webhooks into
recipient notification emails.
"""

import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from app.config import get_settings
from app.errors import OrderPipelineError, StoreError
from app.routers import orders
from app.services.dedup_store import ProcessedOrderStore

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Order Notifier API",
    description="Emails the right recipients when a Squarespace order comes in",
    version="0.1.0",
)

# The webhook path is fixed by the Squarespace-side integration, so no prefix
app.include_router(orders.router, tags=["orders"])


@app.exception_handler(OrderPipelineError)
async def order_pipeline_error_handler(
    request: Request, exc: OrderPipelineError
) -> PlainTextResponse:
    """Render pipeline failures as plain text with the status they carry."""
    return PlainTextResponse(f"{exc.message}\n", status_code=exc.status_code)


@app.on_event("startup")
async def log_startup() -> None:
    """Log the port and which collaborators are configured."""
    settings = get_settings()
    logger.info(
        "Order Notifier API listening on port %s\n"
        "  Squarespace API key: %s\n"
        "  SMTP server:         %s:%s\n"
        "  Supabase:            %s",
        settings.port,
        "set" if settings.sqspace_api_key else "MISSING",
        settings.smtp_server or "MISSING",
        settings.smtp_port,
        settings.supabase_url or "MISSING",
    )


@app.get("/")
async def root():
    return {"message": "Order Notifier API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/health/db")
def health_db():
    """
    Test the Supabase database connection.

    Selects at most one row from the processed-orders table. Returns 503 on
    failure.
    """
    store = ProcessedOrderStore(table=get_settings().processed_orders_table)
    try:
        store.ping()
    except StoreError as exc:
        logger.error(f"Database health check failed: {exc.message}")
        raise HTTPException(status_code=503, detail=exc.message)

    return {"status": "ok", "database": "reachable"}


def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured port."""
    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    run()
