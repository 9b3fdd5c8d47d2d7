"""
Unit tests for the new-order email template.
"""

from app.models.order import CustomerInfo, Order, Purchase
from app.services.email_template import render_new_order_email, render_subject


def _order(**customer) -> Order:
    values = {"first_name": "Jane", "last_name": "Doe", "email": "jane@example.com"}
    values.update(customer)
    return Order(id="id-1", order_number="1001", customer=CustomerInfo(**values))


def _purchase(**overrides) -> Purchase:
    values = {"sku": "SQ5929745", "product_name": "Residential Property Appraisal"}
    values.update(overrides)
    return Purchase(**values)


class TestRenderSubject:

    def test_subject_names_the_product(self):
        assert render_subject(_purchase()) == "New Order: Residential Property Appraisal"

    def test_line_breaks_in_product_name_are_folded(self):
        purchase = _purchase(product_name="Residential\r\nProperty\nAppraisal")
        assert render_subject(purchase) == "New Order: Residential Property Appraisal"


class TestRenderNewOrderEmail:

    def test_includes_order_customer_and_purchase(self):
        body = render_new_order_email(_order(), _purchase())

        assert "1001" in body
        assert "id-1" in body
        assert "Jane Doe" in body
        assert "jane@example.com" in body
        assert "Residential Property Appraisal" in body
        assert "SQ5929745" in body

    def test_subject_address_listed_when_present(self):
        body = render_new_order_email(_order(), _purchase(subject_address="123 Jasper Ave"))
        assert "Subject property address" in body
        assert "123 Jasper Ave" in body

    def test_subject_address_omitted_when_empty(self):
        body = render_new_order_email(_order(), _purchase())
        assert "Subject property address" not in body

    def test_phone_listed_only_when_present(self):
        assert "Phone" not in render_new_order_email(_order(), _purchase())
        body = render_new_order_email(_order(phone="780-555-0100"), _purchase())
        assert "780-555-0100" in body

    def test_price_paid(self):
        body = render_new_order_email(
            _order(), _purchase(paid_value="450.00", currency="CAD")
        )
        assert "450.00 CAD" in body

    def test_values_are_html_escaped(self):
        body = render_new_order_email(
            _order(first_name="<script>alert(1)</script>"),
            _purchase(subject_address='1 "Main" St & Co'),
        )
        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "1 &quot;Main&quot; St &amp; Co" in body
