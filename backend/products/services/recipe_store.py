"""
Read and write access to product recipes.

The engine never touches RecipeItem rows directly: it reads recipes as
tuples of IngredientComponent / SubProductComponent values.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple, Union

from django.db import transaction

from products.exceptions import InvalidRecipeError
from products.models import Product, RecipeItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngredientComponent:
    ingredient_id: int
    quantity: Decimal
    unit: str


@dataclass(frozen=True)
class SubProductComponent:
    product_id: int
    quantity: Decimal
    unit: str


RecipeComponent = Union[IngredientComponent, SubProductComponent]


@dataclass(frozen=True)
class ProductStockInfo:
    """The parts of a Product the engine needs."""
    id: int
    name: str
    stock_unit: Optional[str]
    is_stock_tracked: bool


def component_from_item(item: RecipeItem) -> RecipeComponent:
    if item.ingredient_id is not None:
        return IngredientComponent(item.ingredient_id, item.quantity, item.unit)
    if item.sub_product_id is not None:
        return SubProductComponent(item.sub_product_id, item.quantity, item.unit)
    raise InvalidRecipeError(f"Recipe item {item.pk} has neither an ingredient nor a sub-product.")


class RecipeStore:
    """
    Recipe lookups memoised for the lifetime of one operation.

    Create one per checkout/restock so every line sees the same recipes.
    """

    def __init__(self):
        self._recipes: Dict[int, Tuple[RecipeComponent, ...]] = {}
        self._products: Dict[int, ProductStockInfo] = {}

    def get_product(self, product_id: int) -> ProductStockInfo:
        """
        Raises:
            ValueError: If the product does not exist.
        """
        if product_id not in self._products:
            self.load_products([product_id])
        try:
            return self._products[product_id]
        except KeyError:
            raise ValueError(f"Product with ID {product_id} does not exist.")

    def load_products(self, product_ids: Iterable[int]) -> None:
        """Fetch several products in one query."""
        missing = {pid for pid in product_ids if pid not in self._products}
        if not missing:
            return
        rows = Product.objects.filter(pk__in=missing).values_list(
            "id", "name", "stock_level", "stock_unit"
        )
        for pid, name, stock_level, stock_unit in rows:
            self._products[pid] = ProductStockInfo(pid, name, stock_unit, stock_level is not None)

    def is_stock_tracked(self, product_id: int) -> bool:
        return self.get_product(product_id).is_stock_tracked

    def get_recipe(self, product_id: int) -> Tuple[RecipeComponent, ...]:
        """Return the product's recipe in position order; empty if it has none."""
        if product_id not in self._recipes:
            items = RecipeItem.objects.filter(product_id=product_id).order_by("position", "id")
            self._recipes[product_id] = tuple(component_from_item(item) for item in items)
        return self._recipes[product_id]

    @staticmethod
    @transaction.atomic
    def replace_recipe(product: Product, components: Iterable[RecipeComponent]) -> list:
        """
        Replace a product's whole recipe with the given components.

        Raises:
            InvalidRecipeError: If a component is the product itself or has a
                non-positive quantity.
        """
        items = []
        for position, component in enumerate(components):
            if component.quantity <= 0:
                raise InvalidRecipeError("Recipe quantities must be positive.")
            if isinstance(component, IngredientComponent):
                items.append(RecipeItem(
                    product=product,
                    ingredient_id=component.ingredient_id,
                    quantity=component.quantity,
                    unit=component.unit.strip(),
                    position=position,
                ))
            elif isinstance(component, SubProductComponent):
                if component.product_id == product.pk:
                    raise InvalidRecipeError("A product cannot be used in its own recipe.")
                items.append(RecipeItem(
                    product=product,
                    sub_product_id=component.product_id,
                    quantity=component.quantity,
                    unit=component.unit.strip(),
                    position=position,
                ))
            else:
                raise TypeError(f"Unknown recipe component: {component!r}")

        RecipeItem.objects.filter(product=product).delete()
        created = RecipeItem.objects.bulk_create(items)
        logger.info(f"Replaced recipe for product {product.pk} with {len(created)} components")
        return created
