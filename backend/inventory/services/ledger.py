"""
The inventory ledger: locked, audited stock mutations.

Every method here must run inside transaction.atomic(). Rows are locked with
SELECT ... FOR UPDATE in ascending primary-key order, ingredients before
products, so concurrent operations always queue on the same row first.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable

from core_backend.config import engine_settings
from inventory.exceptions import NotStockTrackedError
from inventory.models import Ingredient, StockHistoryEntry
from products.models import Product

logger = logging.getLogger(__name__)


def _field_limit(model, field_name) -> Decimal:
    """Smallest magnitude a DecimalField can no longer store, e.g. 10**10 for (14, 4)."""
    field = model._meta.get_field(field_name)
    return Decimal(10) ** (field.max_digits - field.decimal_places)


class InventoryLedger:
    """Stock levels of ingredients and stock-tracked products."""

    @staticmethod
    def quantize(quantity) -> Decimal:
        return Decimal(quantity).quantize(engine_settings.stock_quantum, rounding=ROUND_HALF_UP)

    @staticmethod
    def check_in_range(quantity: Decimal, model, name: str, unit: str) -> None:
        """
        Raises:
            ValueError: If quantity does not fit the stock or history columns.
        """
        limit = min(
            _field_limit(model, "stock_level"),
            _field_limit(StockHistoryEntry, "quantity_change"),
            _field_limit(StockHistoryEntry, "new_quantity"),
        )
        if not quantity.is_finite() or abs(quantity) >= limit:
            raise ValueError(f"Stock of {name} would be out of range: {quantity} {unit}.")

    @staticmethod
    def lock_ingredients(ingredient_ids: Iterable[int]) -> Dict[int, Ingredient]:
        """
        Lock and return the given ingredients keyed by id.

        Raises:
            ValueError: If any id does not exist.
        """
        ids = sorted(set(ingredient_ids))
        if not ids:
            return {}
        locked = {
            ingredient.pk: ingredient
            for ingredient in Ingredient.objects.select_for_update().filter(pk__in=ids).order_by("pk")
        }
        missing = [pk for pk in ids if pk not in locked]
        if missing:
            raise ValueError(f"Ingredient with ID {missing[0]} does not exist.")
        return locked

    @staticmethod
    def lock_products(product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Lock and return the given products keyed by id.

        Raises:
            ValueError: If any id does not exist.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        locked = {
            product.pk: product
            for product in Product.objects.select_for_update().filter(pk__in=ids).order_by("pk")
        }
        missing = [pk for pk in ids if pk not in locked]
        if missing:
            raise ValueError(f"Product with ID {missing[0]} does not exist.")
        return locked

    @staticmethod
    def adjust_ingredient_stock(
        ingredient: Ingredient,
        quantity_change,
        operation_type: str,
        user=None,
        reference_id: str = "",
        detailed_reason: str = "",
    ) -> StockHistoryEntry:
        """
        Apply a signed change (in the ingredient's stock unit) to a locked ingredient.

        Stock is allowed to go negative; that is logged, not refused.

        Raises:
            ValueError: If the change or the resulting level does not fit the stock columns.
        """
        quantity_change = Decimal(quantity_change)
        InventoryLedger.check_in_range(quantity_change, Ingredient, ingredient.name, ingredient.stock_unit)
        quantity_change = InventoryLedger.quantize(quantity_change)
        previous_quantity = ingredient.stock_level
        new_quantity = previous_quantity + quantity_change
        InventoryLedger.check_in_range(quantity_change, Ingredient, ingredient.name, ingredient.stock_unit)
        InventoryLedger.check_in_range(new_quantity, Ingredient, ingredient.name, ingredient.stock_unit)

        ingredient.stock_level = new_quantity
        ingredient.save(update_fields=["stock_level", "updated_at"])

        if new_quantity < 0:
            logger.warning(
                f"Ingredient {ingredient.name} (id={ingredient.pk}) is oversold: "
                f"{new_quantity} {ingredient.stock_unit} after {operation_type}"
            )

        return StockHistoryEntry.objects.create(
            ingredient=ingredient,
            user=user,
            operation_type=operation_type,
            quantity_change=quantity_change,
            previous_quantity=previous_quantity,
            new_quantity=new_quantity,
            unit=ingredient.stock_unit,
            detailed_reason=detailed_reason,
            reference_id=reference_id,
        )

    @staticmethod
    def adjust_product_stock(
        product: Product,
        quantity_change,
        operation_type: str,
        user=None,
        reference_id: str = "",
        detailed_reason: str = "",
    ) -> StockHistoryEntry:
        """
        Apply a signed change (in the product's stock unit) to a locked, stock-tracked product.

        Raises:
            NotStockTrackedError: If the product has no stock level.
            ValueError: If the change or the resulting level does not fit the stock columns.
        """
        if not product.is_stock_tracked:
            raise NotStockTrackedError(product)

        quantity_change = Decimal(quantity_change)
        InventoryLedger.check_in_range(quantity_change, Product, product.name, product.stock_unit)
        quantity_change = InventoryLedger.quantize(quantity_change)
        previous_quantity = product.stock_level
        new_quantity = previous_quantity + quantity_change
        InventoryLedger.check_in_range(quantity_change, Product, product.name, product.stock_unit)
        InventoryLedger.check_in_range(new_quantity, Product, product.name, product.stock_unit)

        product.stock_level = new_quantity
        product.save(update_fields=["stock_level", "updated_at"])

        if new_quantity < 0:
            logger.warning(
                f"Product {product.name} (id={product.pk}) is oversold: "
                f"{new_quantity} {product.stock_unit} after {operation_type}"
            )

        return StockHistoryEntry.objects.create(
            product=product,
            user=user,
            operation_type=operation_type,
            quantity_change=quantity_change,
            previous_quantity=previous_quantity,
            new_quantity=new_quantity,
            unit=product.stock_unit,
            detailed_reason=detailed_reason,
            reference_id=reference_id,
        )
