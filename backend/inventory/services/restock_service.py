"""
Preparation restocking.

Making more of a stock-tracked product (a batch of concentrate, a sauce)
adds to its stock and consumes the raw ingredients of its own recipe.
"""
import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from django.db import OperationalError, transaction

from conversions.exceptions import ConversionError
from conversions.services import ConversionResolver
from inventory.exceptions import InventoryError, NotStockTrackedError, TransactionConflictError
from inventory.models import StockHistoryEntry
from inventory.services.ledger import InventoryLedger
from products.exceptions import RecipeError
from products.models import Product
from products.services import IngredientComponent, RecipeStore

logger = logging.getLogger(__name__)

INVALID_RESTOCK_MESSAGE = "Valid product ID and a positive quantity are required to restock."


class RestockProcessor:
    """
    Restocks one stock-tracked product at a time.

    Only direct ingredient components are consumed. Sub-product components
    of the preparation are ignored; they are reconciled by their own restocks.
    """

    def __init__(
        self,
        resolver: Optional[ConversionResolver] = None,
        recipe_store: Optional[RecipeStore] = None,
    ):
        self.resolver = resolver or ConversionResolver()
        self.recipe_store = recipe_store or RecipeStore()

    def restock(self, product_id, quantity_to_add, user=None) -> Product:
        """
        Add quantity_to_add (in the product's stock unit) to a preparation.

        Raises:
            ValueError: If the product id or quantity is invalid, or the product does not exist.
            NotStockTrackedError: If the product has no stock level.
            NoConversionPathError: If a recipe unit cannot be converted to its
                ingredient's stock unit. Nothing is applied.
            TransactionConflictError: If the database aborted the transaction.
        """
        try:
            product_id = int(product_id)
            quantity_to_add = Decimal(str(quantity_to_add))
        except (InvalidOperation, TypeError, ValueError):
            raise ValueError(INVALID_RESTOCK_MESSAGE)
        if not product_id or not quantity_to_add.is_finite() or quantity_to_add <= 0:
            raise ValueError(INVALID_RESTOCK_MESSAGE)

        reference_id = f"restock_{uuid.uuid4().hex[:12]}"

        try:
            with transaction.atomic():
                product = self._apply(product_id, quantity_to_add, user, reference_id)
        except OperationalError as e:
            logger.warning(f"Restock of product {product_id} aborted by the database: {e}")
            raise TransactionConflictError("Restock") from e
        except (ConversionError, RecipeError, InventoryError, ValueError) as e:
            logger.warning(f"Restock of product {product_id} rolled back: {e}")
            raise

        logger.info(
            f"Restocked {quantity_to_add} {product.stock_unit} of {product.name} "
            f"(now {product.stock_level}) ref={reference_id}"
        )
        return product

    def _apply(self, product_id, quantity_to_add: Decimal, user, reference_id: str) -> Product:
        info = self.recipe_store.get_product(product_id)
        if not info.is_stock_tracked:
            raise NotStockTrackedError(info)

        components = [
            c for c in self.recipe_store.get_recipe(product_id) if isinstance(c, IngredientComponent)
        ]
        ingredients = InventoryLedger.lock_ingredients(c.ingredient_id for c in components)

        consumption: Dict[int, Decimal] = {}
        for component in components:
            ingredient = ingredients[component.ingredient_id]
            factor = self.resolver.resolve(component.unit, ingredient.stock_unit, ingredient.pk)
            consumption[ingredient.pk] = (
                consumption.get(ingredient.pk, Decimal("0")) + component.quantity * quantity_to_add * factor
            )

        product = InventoryLedger.lock_products([product_id])[product_id]
        if not product.is_stock_tracked:
            raise NotStockTrackedError(product)

        InventoryLedger.adjust_product_stock(
            product,
            quantity_to_add,
            StockHistoryEntry.OperationType.RESTOCK_ADD,
            user=user,
            reference_id=reference_id,
            detailed_reason=f"Prepared {quantity_to_add} {product.stock_unit}",
        )
        for ingredient_id in sorted(consumption):
            InventoryLedger.adjust_ingredient_stock(
                ingredients[ingredient_id],
                -consumption[ingredient_id],
                StockHistoryEntry.OperationType.RESTOCK_CONSUMPTION,
                user=user,
                reference_id=reference_id,
                detailed_reason=f"Used to prepare {quantity_to_add} {product.stock_unit} of {product.name}",
            )

        return product
