"""
Bill-of-materials expansion.

Flattens a product's recipe tree into raw-ingredient quantities (per
declared unit) plus quantities of stock-tracked sub-products, which are
deducted whole instead of being expanded.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple

from core_backend.config import engine_settings
from products.exceptions import RecipeDepthExceededError
from products.services.recipe_store import (
    IngredientComponent,
    RecipeStore,
    SubProductComponent,
)

logger = logging.getLogger(__name__)


@dataclass
class BillOfMaterials:
    """
    Flattened requirements of one or more order lines.

    ingredient_deductions is keyed by (ingredient_id, unit) so the same
    ingredient declared in two units stays in two buckets until it is
    converted to its stock unit.
    """
    ingredient_deductions: Dict[Tuple[int, str], Decimal] = field(default_factory=dict)
    sub_product_deductions: Dict[int, Decimal] = field(default_factory=dict)

    def add_ingredient(self, ingredient_id: int, unit: str, quantity: Decimal) -> None:
        key = (ingredient_id, unit)
        self.ingredient_deductions[key] = self.ingredient_deductions.get(key, Decimal("0")) + quantity

    def add_sub_product(self, product_id: int, quantity: Decimal) -> None:
        self.sub_product_deductions[product_id] = (
            self.sub_product_deductions.get(product_id, Decimal("0")) + quantity
        )

    def merge(self, other: "BillOfMaterials") -> "BillOfMaterials":
        """Return a new plan holding the sums of both plans."""
        merged = BillOfMaterials(
            ingredient_deductions=dict(self.ingredient_deductions),
            sub_product_deductions=dict(self.sub_product_deductions),
        )
        for (ingredient_id, unit), quantity in other.ingredient_deductions.items():
            merged.add_ingredient(ingredient_id, unit, quantity)
        for product_id, quantity in other.sub_product_deductions.items():
            merged.add_sub_product(product_id, quantity)
        return merged

    @property
    def ingredient_ids(self):
        return sorted({ingredient_id for ingredient_id, _ in self.ingredient_deductions})

    @property
    def is_empty(self) -> bool:
        return not self.ingredient_deductions and not self.sub_product_deductions


class BOMExpander:
    """
    Recursively expands recipes.

    - Ingredient components accumulate multiplier * quantity in their unit.
    - Stock-tracked sub-products are leaves and accumulate multiplier * quantity.
    - Other sub-products are expanded with multiplier * quantity.

    Nesting deeper than max_depth levels below the expanded product raises
    RecipeDepthExceededError. This is also what stops a product that contains
    itself.
    """

    def __init__(self, recipe_store: Optional[RecipeStore] = None, max_depth: Optional[int] = None):
        self.recipe_store = recipe_store or RecipeStore()
        self.max_depth = max_depth if max_depth is not None else engine_settings.max_recipe_depth

    def expand(self, product_id: int, quantity: Decimal) -> BillOfMaterials:
        """
        Flatten `quantity` units of a product.

        A stock-tracked product is sold from its own stock, so it comes back
        as a single sub-product deduction of itself.

        Raises:
            ValueError: If the product does not exist or quantity is not positive.
            RecipeDepthExceededError: If the recipe nests too deeply.
        """
        quantity = Decimal(quantity)
        if quantity <= 0:
            raise ValueError("Quantity must be positive.")

        bom = BillOfMaterials()
        # A tracked product is a leaf: its recipe was consumed when the batch was restocked
        if self.recipe_store.is_stock_tracked(product_id):
            bom.add_sub_product(product_id, quantity)
            return bom

        self._expand_into(bom, product_id, quantity, depth=0)
        return bom

    def _expand_into(self, bom: BillOfMaterials, product_id: int, multiplier: Decimal, depth: int) -> None:
        if depth > self.max_depth:
            logger.error(f"Recipe expansion exceeded depth {self.max_depth} at product {product_id}")
            raise RecipeDepthExceededError(product_id, self.max_depth)

        for component in self.recipe_store.get_recipe(product_id):
            amount = multiplier * component.quantity
            if isinstance(component, IngredientComponent):
                bom.add_ingredient(component.ingredient_id, component.unit, amount)
            elif isinstance(component, SubProductComponent):
                if self.recipe_store.is_stock_tracked(component.product_id):
                    bom.add_sub_product(component.product_id, amount)
                else:
                    self._expand_into(bom, component.product_id, amount, depth + 1)
            else:
                raise TypeError(f"Unknown recipe component: {component!r}")
