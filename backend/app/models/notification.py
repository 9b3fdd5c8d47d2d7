"""
Models produced and consumed by the notifier.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, computed_field


class EmailMessage(BaseModel):
    """A rendered notification, ready for the mail transport."""
    model_config = {"frozen": True}

    sender: str
    recipients: tuple[str, ...]
    subject: str
    html_body: str


class NotificationOutcome(str, Enum):
    ALL_FAILED = "all_failed"
    PARTIAL_SUCCESS = "partial_success"
    ALL_SUCCEEDED = "all_succeeded"


class PurchaseResult(BaseModel):
    """What happened to one purchase's notification."""
    model_config = {"frozen": True}

    sku: str
    product_name: str
    recipients: tuple[str, ...] = ()
    sent: bool
    error: Optional[str] = None


class NotificationReport(BaseModel):
    """Per-purchase results for one order, in purchase order."""
    model_config = {"frozen": True}

    results: tuple[PurchaseResult, ...]

    @computed_field  # type: ignore[misc]
    @property
    def sent_count(self) -> int:
        return sum(1 for r in self.results if r.sent)

    @computed_field  # type: ignore[misc]
    @property
    def outcome(self) -> NotificationOutcome:
        """
        ALL_FAILED when nothing was sent, ALL_SUCCEEDED when every purchase was
        sent, PARTIAL_SUCCESS otherwise.
        """
        if self.sent_count == 0:
            return NotificationOutcome.ALL_FAILED
        if self.sent_count == len(self.results):
            return NotificationOutcome.ALL_SUCCEEDED
        return NotificationOutcome.PARTIAL_SUCCESS
