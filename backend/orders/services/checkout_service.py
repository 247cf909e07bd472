"""
Checkout: turn a cart into an order and deduct what it used from stock.

Everything happens in one transaction. The order rows, every ingredient
deduction and every sub-product deduction are committed together or not
at all.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import OperationalError, transaction

from conversions.exceptions import ConversionError
from conversions.services import ConversionResolver
from inventory.exceptions import InventoryError, TransactionConflictError
from inventory.models import StockHistoryEntry
from inventory.services import InventoryLedger
from orders.cart import Cart, CartLine
from orders.models import Order, OrderItem
from products.exceptions import RecipeError
from products.models import Product
from products.services import BillOfMaterials, BOMExpander, RecipeStore

logger = logging.getLogger(__name__)

EMPTY_ORDER_MESSAGE = "Cannot check out an empty order."
INVALID_QUANTITY_MESSAGE = "Item quantities must be positive whole numbers."


class OrderProcessor:
    """
    Checks out carts.

    Stock is never checked for sufficiency: a sale always goes through and
    an ingredient may end up negative (oversold), which is logged.
    """

    def __init__(
        self,
        resolver: Optional[ConversionResolver] = None,
        recipe_store: Optional[RecipeStore] = None,
    ):
        self.resolver = resolver or ConversionResolver()
        self.recipe_store = recipe_store or RecipeStore()
        self.expander = BOMExpander(recipe_store=self.recipe_store)

    def checkout(self, items: Iterable, total=None, cashier=None) -> Order:
        """
        Create an order for `items` and deduct its bill of materials.

        Args:
            items: Mappings with product_id, quantity and optionally
                price_at_sale (defaults to the product's current price).
            total: Amount charged. Computed as subtotal + tax when omitted.
            cashier: The user ringing up the sale.

        Raises:
            ValueError: If the cart is empty, a quantity is not a positive
                integer, a product does not exist or the total is invalid.
            NoConversionPathError: If a recipe unit cannot be converted to its
                ingredient's stock unit.
            RecipeDepthExceededError: If a recipe nests too deeply.
            TransactionConflictError: If the database aborted the transaction.

        Nothing is written when any of these is raised.
        """
        lines = self._validate_items(items)
        if total is not None:
            total = self._validate_total(total)

        try:
            with transaction.atomic():
                order, bom = self._apply(lines, total, cashier)
        except OperationalError as e:
            logger.warning(f"Checkout aborted by the database: {e}")
            raise TransactionConflictError("Checkout") from e
        except (ConversionError, RecipeError, InventoryError, ValueError) as e:
            logger.warning(f"Checkout rolled back: {e}")
            raise

        logger.info(
            f"Checked out order {order.pk}: {len(lines)} lines, total {order.total}, "
            f"{len(bom.ingredient_ids)} ingredients and "
            f"{len(bom.sub_product_deductions)} preparations deducted"
        )
        return order

    @staticmethod
    def _validate_items(items) -> List[Tuple[int, int, Optional[Decimal]]]:
        lines = []
        for item in items or []:
            product_id = item.get("product_id")
            quantity = item.get("quantity")
            price = item.get("price_at_sale")

            if not product_id:
                raise ValueError("Product is required for every item.")
            try:
                product_id = int(product_id)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid product: {product_id}")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise ValueError(INVALID_QUANTITY_MESSAGE)
            if price is not None:
                try:
                    price = Decimal(str(price))
                except InvalidOperation:
                    raise ValueError(f"Invalid price: {price}")
                if not price.is_finite() or price < 0:
                    raise ValueError(f"Invalid price: {price}")

            lines.append((product_id, quantity, price))

        if not lines:
            raise ValueError(EMPTY_ORDER_MESSAGE)
        return lines

    @staticmethod
    def _validate_total(total) -> Decimal:
        try:
            total = Decimal(str(total))
        except InvalidOperation:
            raise ValueError(f"Invalid total: {total}")
        if not total.is_finite() or total < 0:
            raise ValueError(f"Invalid total: {total}")
        return total

    def _apply(self, lines, total, cashier) -> Tuple[Order, BillOfMaterials]:
        products = Product.objects.in_bulk({product_id for product_id, _, _ in lines})
        for product_id, _, _ in lines:
            if product_id not in products:
                raise ValueError(f"Product with ID {product_id} does not exist.")

        cart = Cart(lines=tuple(
            CartLine(
                product_id,
                products[product_id].name,
                price if price is not None else products[product_id].price,
                quantity,
            )
            for product_id, quantity, price in lines
        ))

        order = Order.objects.create(
            total=cart.total if total is None else total,
            cashier=cashier,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product=products[line.product_id],
                quantity=line.quantity,
                price_at_sale=line.price,
            )
            for line in cart.lines
        ])

        self.recipe_store.load_products(products)
        bom = BillOfMaterials()
        for line in cart.lines:
            bom = bom.merge(self.expander.expand(line.product_id, Decimal(line.quantity)))

        self._deduct_ingredients(order, bom, cashier)
        self._deduct_sub_products(order, bom, cashier)
        return order, bom

    def _deduct_ingredients(self, order: Order, bom: BillOfMaterials, cashier) -> None:
        ingredients = InventoryLedger.lock_ingredients(bom.ingredient_ids)

        # Buckets are per declared unit; sum them per ingredient in its stock unit
        deductions: Dict[int, Decimal] = {}
        for (ingredient_id, unit), quantity in sorted(bom.ingredient_deductions.items()):
            ingredient = ingredients[ingredient_id]
            factor = self.resolver.resolve(unit, ingredient.stock_unit, ingredient_id)
            deductions[ingredient_id] = deductions.get(ingredient_id, Decimal("0")) + quantity * factor

        for ingredient_id in sorted(deductions):
            InventoryLedger.adjust_ingredient_stock(
                ingredients[ingredient_id],
                -deductions[ingredient_id],
                StockHistoryEntry.OperationType.ORDER_DEDUCTION,
                user=cashier,
                reference_id=order.reference_id,
                detailed_reason=f"Sold in order {order.pk}",
            )

    def _deduct_sub_products(self, order: Order, bom: BillOfMaterials, cashier) -> None:
        products = InventoryLedger.lock_products(bom.sub_product_deductions)
        for product_id in sorted(bom.sub_product_deductions):
            InventoryLedger.adjust_product_stock(
                products[product_id],
                -bom.sub_product_deductions[product_id],
                StockHistoryEntry.OperationType.ORDER_DEDUCTION,
                user=cashier,
                reference_id=order.reference_id,
                detailed_reason=f"Sold in order {order.pk}",
            )
