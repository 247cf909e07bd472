"""
API tests for checkout and order history.
"""
import pytest
from decimal import Decimal
from unittest.mock import patch

from inventory.exceptions import TransactionConflictError
from orders.models import Order


@pytest.mark.django_db
class TestCheckoutAPI:
    """Tests for POST /api/orders/checkout/."""

    url = "/api/orders/checkout/"

    def test_checkout(self, cashier_client, cashier_user, cappuccino, coffee_beans, milk):
        response = cashier_client.post(
            self.url,
            {"items": [{"product_id": cappuccino.id, "quantity": 2}], "total": "7.56"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["cashier_name"] == cashier_user.username
        assert response.data["total"] == "7.56"
        assert response.data["items"][0]["product_name"] == "Cappuccino"
        milk.refresh_from_db()
        assert milk.stock_level == Decimal("9800")

    def test_empty_cart(self, cashier_client):
        response = cashier_client.post(self.url, {"items": []}, format="json")

        assert response.status_code == 400
        assert response.data == {"status": "error", "message": "Cannot check out an empty order."}

    def test_invalid_quantity(self, cashier_client, espresso):
        response = cashier_client.post(
            self.url, {"items": [{"product_id": espresso.id, "quantity": 0}]}, format="json"
        )

        assert response.status_code == 400
        assert not Order.objects.exists()

    def test_missing_conversion(self, cashier_client, sweet_latte):
        response = cashier_client.post(
            self.url, {"items": [{"product_id": sweet_latte.id, "quantity": 1}]}, format="json"
        )

        assert response.status_code == 400
        assert response.data["message"] == "No conversion path found from kilogram to gram."
        assert not Order.objects.exists()

    def test_conflict(self, cashier_client, espresso):
        with patch(
            "orders.services.checkout_service.OrderProcessor.checkout",
            side_effect=TransactionConflictError("Checkout"),
        ):
            response = cashier_client.post(
                self.url, {"items": [{"product_id": espresso.id, "quantity": 1}]}, format="json"
            )

        assert response.status_code == 409
        assert response.data["status"] == "error"

    def test_requires_authentication(self, api_client, espresso):
        response = api_client.post(
            self.url, {"items": [{"product_id": espresso.id, "quantity": 1}]}, format="json"
        )

        assert response.status_code in (401, 403)

    def test_oversized_quantity_is_rejected(self, cashier_client, espresso, coffee_beans):
        response = cashier_client.post(
            self.url, {"items": [{"product_id": espresso.id, "quantity": 10**10}]}, format="json"
        )

        assert response.status_code == 400
        assert "quantity" in str(response.data)
        assert not Order.objects.exists()
        coffee_beans.refresh_from_db()
        assert coffee_beans.stock_level == Decimal("1000")

    def test_deduction_too_large_for_stock_is_bad_request(self, cashier_client, espresso, coffee_beans):
        """A quantity within the line limit can still overflow an ingredient's stock."""
        coffee_beans.stock_level = Decimal("-9999990000")
        coffee_beans.save()

        response = cashier_client.post(
            self.url, {"items": [{"product_id": espresso.id, "quantity": 9999}]}, format="json"
        )

        assert response.status_code == 400
        assert response.data["status"] == "error"
        assert "out of range" in response.data["message"]
        assert not Order.objects.exists()


@pytest.mark.django_db
class TestOrderListAPI:
    """Tests for GET /api/orders/."""

    def test_list_and_retrieve(self, cashier_client, espresso):
        created = cashier_client.post(
            "/api/orders/checkout/", {"items": [{"product_id": espresso.id, "quantity": 1}]}, format="json"
        )

        listing = cashier_client.get("/api/orders/")
        detail = cashier_client.get(f"/api/orders/{created.data['id']}/")

        assert listing.status_code == 200
        assert listing.data["count"] == 1
        assert detail.status_code == 200
        assert detail.data["items"][0]["quantity"] == 1
