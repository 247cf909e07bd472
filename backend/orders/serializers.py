from decimal import Decimal

from rest_framework import serializers

from orders.models import Order, OrderItem
from orders.services import OrderProcessor

# Upper bound for the quantity of one cart line
MAX_ITEM_QUANTITY = 9999


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "product_name", "quantity", "price_at_sale", "total_price"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    cashier_name = serializers.CharField(source="cashier.username", read_only=True, allow_null=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = ["id", "created_at", "total", "cashier", "cashier_name", "items"]
        read_only_fields = fields


class CheckoutItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_ITEM_QUANTITY)
    price_at_sale = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )


class CheckoutSerializer(serializers.Serializer):
    """
    Input for POST /api/orders/checkout/.
    An empty item list is passed through so the service reports it.
    """
    items = CheckoutItemSerializer(many=True)
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )

    def save(self, cashier=None):
        return OrderProcessor().checkout(
            self.validated_data["items"],
            total=self.validated_data.get("total"),
            cashier=cashier,
        )
