from decimal import Decimal

from rest_framework import serializers

from inventory.models import Ingredient, PurchaseLogEntry, StockHistoryEntry
from inventory.services import PurchaseService, RestockProcessor


class IngredientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ingredient
        fields = ["id", "name", "stock_level", "stock_unit", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Ingredient name and stock unit are required.")
        return value

    def validate_stock_unit(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Ingredient name and stock unit are required.")
        return value

    def validate_stock_level(self, value):
        # The engine may drive stock negative; people may not.
        if value < 0:
            raise serializers.ValidationError("Stock level cannot be negative.")
        return value


class StockHistoryUserSerializer(serializers.Serializer):
    """Lightweight user serializer for stock history"""
    id = serializers.IntegerField()
    username = serializers.CharField()


class StockHistoryEntrySerializer(serializers.ModelSerializer):
    user = StockHistoryUserSerializer(read_only=True)
    ingredient_name = serializers.CharField(source="ingredient.name", read_only=True, allow_null=True)
    product_name = serializers.CharField(source="product.name", read_only=True, allow_null=True)

    class Meta:
        model = StockHistoryEntry
        fields = [
            "id",
            "ingredient", "ingredient_name",
            "product", "product_name",
            "user",
            "operation_type",
            "quantity_change",
            "previous_quantity",
            "new_quantity",
            "unit",
            "detailed_reason",
            "reference_id",
            "timestamp",
        ]
        read_only_fields = fields


class RestockSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=Decimal("0.0001"))

    def save(self, user=None):
        return RestockProcessor().restock(
            self.validated_data["product_id"],
            self.validated_data["quantity"],
            user=user,
        )


class PurchaseLogEntrySerializer(serializers.ModelSerializer):
    ingredient_name = serializers.CharField(source="ingredient.name", read_only=True)
    user_name = serializers.CharField(source="user.username", read_only=True, allow_null=True)

    class Meta:
        model = PurchaseLogEntry
        fields = [
            "id",
            "ingredient", "ingredient_name",
            "quantity_purchased",
            "unit",
            "total_cost",
            "supplier",
            "notes",
            "user_name",
            "created_at",
        ]
        read_only_fields = fields


class LogPurchaseSerializer(serializers.Serializer):
    ingredient_id = serializers.IntegerField(min_value=1)
    quantity_purchased = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=Decimal("0.0001"))
    unit = serializers.CharField(max_length=50)
    total_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    created_at = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def save(self, user=None):
        data = self.validated_data
        return PurchaseService.log_purchase(
            data["ingredient_id"],
            data["quantity_purchased"],
            data["unit"],
            data["total_cost"],
            user=user,
            supplier=data["supplier"],
            notes=data["notes"],
            created_at=data["created_at"],
        )
