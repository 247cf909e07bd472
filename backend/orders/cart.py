"""
The register's in-progress order.

A Cart is an immutable value: every change returns a new Cart, so a view
can keep the previous state around (undo, optimistic UI) without copying.
Totals are derived from the lines on demand.
"""
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from core_backend.config import engine_settings

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CartLine:
    product_id: int
    name: str
    price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Cart:
    lines: Tuple[CartLine, ...] = ()
    tax_rate: Optional[Decimal] = None

    def _with_lines(self, lines) -> "Cart":
        return replace(self, lines=tuple(lines))

    def get_line(self, product_id: int) -> Optional[CartLine]:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def add_item(self, product, quantity: int = 1) -> "Cart":
        """
        Add a product (anything with id, name and price). Adding a product
        that is already in the cart increases its quantity.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be a positive integer.")

        if self.get_line(product.id) is None:
            line = CartLine(product.id, product.name, Decimal(product.price), quantity)
            return self._with_lines(self.lines + (line,))

        return self._with_lines(
            replace(line, quantity=line.quantity + quantity) if line.product_id == product.id else line
            for line in self.lines
        )

    def remove_item(self, product_id: int) -> "Cart":
        return self._with_lines(line for line in self.lines if line.product_id != product_id)

    def update_quantity(self, product_id: int, quantity: int) -> "Cart":
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            return self.remove_item(product_id)
        return self._with_lines(
            replace(line, quantity=quantity) if line.product_id == product_id else line
            for line in self.lines
        )

    def clear(self) -> "Cart":
        return self._with_lines(())

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @property
    def tax(self) -> Decimal:
        rate = self.tax_rate if self.tax_rate is not None else engine_settings.tax_rate
        return (self.subtotal * rate).quantize(CENT, rounding=ROUND_HALF_UP)

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax

    def to_checkout_items(self) -> List[dict]:
        return [
            {"product_id": line.product_id, "quantity": line.quantity, "price_at_sale": line.price}
            for line in self.lines
        ]
