"""
Error taxonomy for the new-order pipeline.

Two families:

  OrderPipelineError         aborts the whole request. Carries the HTTP status
                             the /newOrder endpoint answers with.
  PurchaseNotificationError  localized to one purchase. Caught and aggregated by
                             the notifier, never surfaced to the caller directly.

All messages are plain, human-readable text; the endpoint returns them as the
response body.
"""


class OrderPipelineError(Exception):
    """Base class for request-level failures."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(OrderPipelineError):
    """A collaborator needed for this request is not configured."""

    status_code = 500


class ValidationError(OrderPipelineError):
    """Missing or malformed request parameters. Caller's fault, not retried."""

    status_code = 412


class NotFoundError(OrderPipelineError):
    """No upstream order matches (order number, customer email)."""

    status_code = 400


class DuplicateOrderError(OrderPipelineError):
    """The order was already processed; its recipients were already notified."""

    status_code = 400


class UpstreamError(OrderPipelineError):
    """The order source failed, timed out, or returned an unusable payload."""

    status_code = 500


class StoreError(OrderPipelineError):
    """The processed-orders store could not be read or written."""

    status_code = 500


class NoPurchasesError(OrderPipelineError):
    """The resolved order has no purchases to notify about."""

    status_code = 500


class AllNotificationsFailedError(OrderPipelineError):
    """Not a single purchase could be notified. Nothing was recorded."""

    status_code = 500


class RecordingError(OrderPipelineError):
    """Mail went out but the order could not be marked processed."""

    status_code = 500


class PurchaseNotificationError(Exception):
    """Base class for failures scoped to a single purchase."""


class UnroutableError(PurchaseNotificationError):
    """No recipients are configured for the purchased SKU."""

    def __init__(self, sku: str):
        super().__init__(f"No valid recipients found for SKU {sku!r}")
        self.sku = sku


class RenderError(PurchaseNotificationError):
    """The notification email could not be rendered."""


class TransportError(PurchaseNotificationError):
    """The mail transport failed to send the notification."""
