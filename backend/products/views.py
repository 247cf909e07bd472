from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from inventory.models import Ingredient
from products.exceptions import RecipeError
from products.models import Product
from products.serializers import BOMQuerySerializer, ProductSerializer, SetRecipeSerializer
from products.services import BOMExpander, IngredientComponent, RecipeStore, SubProductComponent


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read access to products and their recipes.

    bom: GET /api/products/{id}/bom/?quantity=2 previews the flattened
        bill of materials without touching stock.
    recipe: PUT /api/products/{id}/recipe/ replaces the whole recipe (staff only).
    """
    serializer_class = ProductSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_fields = ["is_for_sale", "categories"]
    search_fields = ["name"]

    def get_queryset(self):
        return Product.objects.prefetch_related(
            "categories",
            "recipe_items__ingredient",
            "recipe_items__sub_product",
        )

    def get_permissions(self):
        if self.action == "recipe":
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    @action(detail=True, methods=["get"])
    def bom(self, request, pk=None):
        product = self.get_object()
        query = BOMQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        quantity = query.validated_data["quantity"]

        try:
            bom = BOMExpander().expand(product.id, quantity)
        except (RecipeError, ValueError) as e:
            return Response(
                {"status": "error", "message": str(e)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        ingredients = Ingredient.objects.in_bulk([iid for iid, _ in bom.ingredient_deductions])
        products = Product.objects.in_bulk(list(bom.sub_product_deductions))

        return Response({
            "product": product.id,
            "quantity": str(quantity),
            "ingredients": [
                {
                    "ingredient": ingredient_id,
                    "ingredient_name": ingredients[ingredient_id].name,
                    "unit": unit,
                    "quantity": str(amount),
                }
                for (ingredient_id, unit), amount in sorted(bom.ingredient_deductions.items())
            ],
            "sub_products": [
                {
                    "product": product_id,
                    "product_name": products[product_id].name,
                    "unit": products[product_id].stock_unit,
                    "quantity": str(amount),
                }
                for product_id, amount in sorted(bom.sub_product_deductions.items())
            ],
        })

    @action(detail=True, methods=["put"])
    def recipe(self, request, pk=None):
        product = self.get_object()
        serializer = SetRecipeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        components = []
        for line in serializer.validated_data["components"]:
            if line.get("ingredient") is not None:
                components.append(IngredientComponent(line["ingredient"].id, line["quantity"], line["unit"]))
            else:
                components.append(SubProductComponent(line["sub_product"].id, line["quantity"], line["unit"]))

        try:
            RecipeStore.replace_recipe(product, components)
        except RecipeError as e:
            return Response(
                {"status": "error", "message": str(e)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        product = self.get_queryset().get(pk=product.pk)
        return Response(ProductSerializer(product).data)
