from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Ingredient(models.Model):
    """
    A raw ingredient whose stock is tracked in its own stock unit.
    e.g., 'Coffee Beans' counted in 'gram', 'Milk' counted in 'ml'.

    stock_level is signed: checkout and restock never refuse to deduct, so a
    negative level is a legal state that records overselling.
    """

    name = models.CharField(
        max_length=200, unique=True, help_text=_("Unique name of the ingredient.")
    )
    stock_level = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=0,
        help_text=_("Quantity on hand, expressed in stock_unit. May be negative."),
    )
    stock_unit = models.CharField(
        max_length=50,
        help_text=_("Unit the stock level is counted in, e.g., 'gram', 'ml', 'pcs'."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Ingredient")
        verbose_name_plural = _("Ingredients")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.stock_level} {self.stock_unit})"

    def save(self, *args, **kwargs):
        self.name = self.name.strip()
        self.stock_unit = self.stock_unit.strip()
        super().save(*args, **kwargs)


class StockHistoryEntry(models.Model):
    """
    Audit trail of every stock adjustment applied by the ledger.
    Each entry points at exactly one Ingredient or one stock-tracked Product.
    """

    class OperationType(models.TextChoices):
        ORDER_DEDUCTION = "ORDER_DEDUCTION", _("Order Deduction")
        RESTOCK_ADD = "RESTOCK_ADD", _("Preparation Restocked")
        RESTOCK_CONSUMPTION = "RESTOCK_CONSUMPTION", _("Consumed by Restock")
        PURCHASE = "PURCHASE", _("Purchase Received")

    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="stock_history",
        help_text=_("Ingredient whose stock changed"),
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="stock_history",
        help_text=_("Stock-tracked product whose stock changed"),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_operations",
        help_text=_("User who performed the operation"),
    )
    operation_type = models.CharField(
        max_length=30,
        choices=OperationType.choices,
        help_text=_("Type of stock operation performed"),
    )
    quantity_change = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text=_("Change in quantity (positive for additions, negative for subtractions)"),
    )
    previous_quantity = models.DecimalField(
        max_digits=14, decimal_places=4, help_text=_("Quantity before the operation")
    )
    new_quantity = models.DecimalField(
        max_digits=14, decimal_places=4, help_text=_("Quantity after the operation")
    )
    unit = models.CharField(
        max_length=50, help_text=_("Stock unit the quantities are expressed in")
    )
    detailed_reason = models.TextField(
        blank=True, help_text=_("Explanation of the stock operation")
    )
    reference_id = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        help_text=_("Reference ID linking entries of one operation (e.g., 'order_12')"),
    )
    timestamp = models.DateTimeField(
        auto_now_add=True, help_text=_("When the operation was performed")
    )

    class Meta:
        verbose_name = _("Stock History Entry")
        verbose_name_plural = _("Stock History Entries")
        ordering = ["-timestamp", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(ingredient__isnull=False, product__isnull=True)
                    | Q(ingredient__isnull=True, product__isnull=False)
                ),
                name="stock_history_exactly_one_target",
            ),
        ]
        indexes = [
            models.Index(fields=["ingredient", "timestamp"], name="stock_hist_ingr_time_idx"),
            models.Index(fields=["product", "timestamp"], name="stock_hist_prod_time_idx"),
            models.Index(fields=["operation_type"], name="stock_hist_operation_idx"),
        ]

    def __str__(self):
        target = self.ingredient.name if self.ingredient_id else self.product.name
        return f"{self.operation_type}: {target} ({self.quantity_change:+} {self.unit})"


class PurchaseLogEntry(models.Model):
    """
    A purchase of an ingredient from a supplier.
    Logging a purchase adds the converted quantity to the ingredient stock.
    """

    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.PROTECT,
        related_name="purchases",
    )
    quantity_purchased = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text=_("Quantity bought, in the unit below"),
    )
    unit = models.CharField(
        max_length=50, help_text=_("Unit of the purchased quantity, e.g., 'kilogram'")
    )
    total_cost = models.DecimalField(max_digits=12, decimal_places=2)
    supplier = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchases_logged",
    )
    created_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Purchase Log Entry")
        verbose_name_plural = _("Purchase Log Entries")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_purchased__gt=0),
                name="purchase_quantity_positive",
            ),
            models.CheckConstraint(
                condition=Q(total_cost__gte=0),
                name="purchase_cost_not_negative",
            ),
        ]

    def __str__(self):
        return f"{self.quantity_purchased} {self.unit} of {self.ingredient.name} @ {self.total_cost}"
