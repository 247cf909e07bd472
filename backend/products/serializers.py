from decimal import Decimal

from rest_framework import serializers

from inventory.models import Ingredient
from products.models import Product, RecipeItem


class RecipeItemSerializer(serializers.ModelSerializer):
    ingredient_name = serializers.CharField(source="ingredient.name", read_only=True, allow_null=True)
    sub_product_name = serializers.CharField(source="sub_product.name", read_only=True, allow_null=True)

    class Meta:
        model = RecipeItem
        fields = [
            "id",
            "ingredient", "ingredient_name",
            "sub_product", "sub_product_name",
            "quantity", "unit", "position",
        ]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    categories = serializers.StringRelatedField(many=True, read_only=True)
    is_stock_tracked = serializers.BooleanField(read_only=True)
    recipe_items = RecipeItemSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "categories",
            "is_for_sale",
            "stock_level",
            "stock_unit",
            "is_stock_tracked",
            "recipe_items",
        ]
        read_only_fields = fields


class RecipeComponentInputSerializer(serializers.Serializer):
    """One recipe line: exactly one of ingredient or sub_product."""
    ingredient = serializers.PrimaryKeyRelatedField(
        queryset=Ingredient.objects.all(), required=False, allow_null=True
    )
    sub_product = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.all(), required=False, allow_null=True
    )
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=4, min_value=Decimal("0.0001")
    )
    unit = serializers.CharField(max_length=50)

    def validate(self, data):
        has_ingredient = data.get("ingredient") is not None
        has_sub_product = data.get("sub_product") is not None
        if has_ingredient == has_sub_product:
            raise serializers.ValidationError("Set exactly one of ingredient or sub_product.")
        return data


class SetRecipeSerializer(serializers.Serializer):
    components = RecipeComponentInputSerializer(many=True)


class BOMQuerySerializer(serializers.Serializer):
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=4, min_value=Decimal("0.0001"), required=False, default=Decimal("1")
    )
