"""
Pydantic models for orders.

Models:
  SquarespaceCustomization   : label/value pair on a line item (form fields)
  SquarespaceLineItem        : one line item as returned by the Commerce API
  SquarespaceOrder           : one order as returned by the Commerce API
  SquarespaceOrdersResponse  : body of GET /1.0/commerce/orders/
  CustomerInfo               : customer details carried into notifications
  Purchase                   : one line item, routed independently
  Order                      : a resolved, immutable order for one request
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Squarespace Commerce API payload
#
# Squarespace sends null for text fields that were never filled in. Those
# become "" so one sparse order cannot fail the whole listing. Only a missing
# ``result`` list or order ``id`` is treated as malformed.
# ---------------------------------------------------------------------------

def _null_to_empty(v: Any) -> Any:
    return "" if v is None else v


class SquarespaceCustomization(BaseModel):
    """A form field the customer filled in at checkout."""
    model_config = {"extra": "ignore"}

    label: str = ""
    value: str = ""

    @field_validator("label", "value", mode="before")
    @classmethod
    def null_text_is_empty(cls, v: Any) -> Any:
        return _null_to_empty(v)


class SquarespaceMoney(BaseModel):
    model_config = {"extra": "ignore"}

    currency: str = ""
    value: str = ""

    @field_validator("currency", "value", mode="before")
    @classmethod
    def null_text_is_empty(cls, v: Any) -> Any:
        return _null_to_empty(v)


class SquarespaceBillingAddress(BaseModel):
    """
    Subset of the billing address block. Squarespace sends null for fields the
    customer left blank, so everything is optional.
    """
    model_config = {"extra": "ignore", "populate_by_name": True}

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = None


class SquarespaceLineItem(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    sku: str = ""
    product_name: str = Field(default="", alias="productName")
    # None when the product has no checkout form attached
    customizations: Optional[list[SquarespaceCustomization]] = None
    unit_price_paid: Optional[SquarespaceMoney] = Field(default=None, alias="unitPricePaid")

    @field_validator("sku", "product_name", mode="before")
    @classmethod
    def null_text_is_empty(cls, v: Any) -> Any:
        return _null_to_empty(v)


class SquarespaceOrder(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    id: str
    order_number: str = Field(default="", alias="orderNumber")
    customer_email: str = Field(default="", alias="customerEmail")
    billing_address: Optional[SquarespaceBillingAddress] = Field(
        default=None, alias="billingAddress"
    )
    line_items: list[SquarespaceLineItem] = Field(default_factory=list, alias="lineItems")

    @field_validator("order_number", "customer_email", mode="before")
    @classmethod
    def null_text_is_empty(cls, v: Any) -> Any:
        return _null_to_empty(v)

    @field_validator("line_items", mode="before")
    @classmethod
    def null_line_items_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class SquarespaceOrdersResponse(BaseModel):
    """
    Body of the orders listing endpoint.

    Only ``result`` is required. ``pagination`` is kept for logging; the
    lookup works on the single page it receives.
    """
    model_config = {"extra": "ignore"}

    result: list[SquarespaceOrder]
    pagination: Optional[dict] = None


# ---------------------------------------------------------------------------
# Internal representation
# ---------------------------------------------------------------------------

class CustomerInfo(BaseModel):
    model_config = {"frozen": True}

    first_name: str = ""
    last_name: str = ""
    email: str
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Purchase(BaseModel):
    """
    One purchased line item.

    ``sku`` is the routing key. ``subject_address`` is the value of the first
    "Subject Property Address" customization, or "" when the line item has none.
    """
    model_config = {"frozen": True}

    sku: str
    product_name: str
    subject_address: str = ""
    currency: str = ""
    paid_value: str = ""


class Order(BaseModel):
    """A resolved order. Lives for the duration of one request only."""
    model_config = {"frozen": True}

    id: str
    order_number: str
    customer: CustomerInfo
    purchases: tuple[Purchase, ...] = ()
