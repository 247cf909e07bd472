"""
Purchase logging: goods received from a supplier increase ingredient stock.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import OperationalError, transaction
from django.utils import timezone

from conversions.exceptions import ConversionError
from conversions.services import ConversionResolver
from inventory.exceptions import TransactionConflictError
from inventory.models import PurchaseLogEntry, StockHistoryEntry
from inventory.services.ledger import InventoryLedger

logger = logging.getLogger(__name__)


def _to_decimal(value, field_name):
    try:
        value = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid {field_name}: {value}")
    if not value.is_finite():
        raise ValueError(f"Invalid {field_name}: {value}")
    return value


class PurchaseService:
    """Service for recording ingredient purchases."""

    @staticmethod
    def log_purchase(
        ingredient_id,
        quantity,
        unit: str,
        total_cost,
        user=None,
        supplier: str = "",
        notes: str = "",
        created_at=None,
        resolver: Optional[ConversionResolver] = None,
    ) -> PurchaseLogEntry:
        """
        Record a purchase and add it to the ingredient's stock.

        The purchased quantity is converted from `unit` into the ingredient's
        stock unit (e.g. 2 kilogram of beans adds 2000 gram).

        Raises:
            ValueError: If a field is missing or invalid.
            NoConversionPathError: If `unit` cannot be converted to the stock unit.
            TransactionConflictError: If the database aborted the transaction.
        """
        quantity = _to_decimal(quantity, "quantity")
        total_cost = _to_decimal(total_cost, "total cost")
        unit = (unit or "").strip()

        if not ingredient_id:
            raise ValueError("Ingredient is required.")
        try:
            ingredient_id = int(ingredient_id)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid ingredient: {ingredient_id}")
        if quantity <= 0:
            raise ValueError("Purchased quantity must be positive.")
        if total_cost < 0:
            raise ValueError("Total cost cannot be negative.")
        if not unit:
            raise ValueError("Unit is required.")

        resolver = resolver or ConversionResolver()

        try:
            with transaction.atomic():
                ingredient = InventoryLedger.lock_ingredients([ingredient_id])[ingredient_id]
                factor = resolver.resolve(unit, ingredient.stock_unit, ingredient.pk)

                entry = PurchaseLogEntry.objects.create(
                    ingredient=ingredient,
                    quantity_purchased=quantity,
                    unit=unit,
                    total_cost=total_cost,
                    supplier=supplier or "",
                    notes=notes or "",
                    user=user,
                    created_at=created_at or timezone.now(),
                )
                InventoryLedger.adjust_ingredient_stock(
                    ingredient,
                    quantity * factor,
                    StockHistoryEntry.OperationType.PURCHASE,
                    user=user,
                    reference_id=f"purchase_{entry.pk}",
                    detailed_reason=f"Purchased {quantity} {unit}" + (f" from {supplier}" if supplier else ""),
                )
        except OperationalError as e:
            logger.warning(f"Purchase of ingredient {ingredient_id} aborted by the database: {e}")
            raise TransactionConflictError("Purchase") from e
        except (ConversionError, ValueError) as e:
            logger.warning(f"Purchase of ingredient {ingredient_id} rolled back: {e}")
            raise

        logger.info(
            f"Logged purchase {entry.pk}: {quantity} {unit} of {ingredient.name} "
            f"(stock now {ingredient.stock_level} {ingredient.stock_unit})"
        )
        return entry
