from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    name = models.CharField(
        max_length=100, unique=True, help_text=_("Name of the product category.")
    )
    description = models.TextField(
        blank=True, help_text=_("Description of the category.")
    )
    order = models.IntegerField(
        default=0,
        help_text=_("Display order for this category. Lower numbers appear first."),
    )

    class Meta:
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")
        ordering = ["order", "name"]

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    Something the register sells or the kitchen prepares.

    A product with a stock_level is stock-tracked: it is counted in
    stock_unit and deducted directly instead of through its recipe
    (e.g., a batch of cold brew concentrate prepared ahead of time).
    """
    name = models.CharField(max_length=200, help_text=_("Name of the product."))
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("The selling price of the product."),
    )
    categories = models.ManyToManyField(
        Category,
        related_name="products",
        blank=True,
    )
    is_for_sale = models.BooleanField(
        default=True,
        help_text=_("Whether this product is offered at the register. Preparations usually are not."),
    )
    stock_level = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_("Prepared quantity on hand, in stock_unit. Leave blank for products that are not stock-tracked."),
    )
    stock_unit = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text=_("Unit the stock level is counted in. Required when stock_level is set."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(stock_level__isnull=True, stock_unit__isnull=True)
                    | Q(stock_level__isnull=False, stock_unit__isnull=False)
                ),
                name="product_stock_unit_iff_tracked",
            ),
        ]
        indexes = [
            models.Index(fields=["is_for_sale"], name="product_is_for_sale_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def is_stock_tracked(self):
        return self.stock_level is not None


class RecipeItem(models.Model):
    """
    One line of a product's recipe.

    Exactly one of ingredient or sub_product is set. Sub-product quantities
    are read in the sub-product's own stock unit.
    """
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="recipe_items",
        help_text=_("The product this recipe line belongs to."),
    )
    ingredient = models.ForeignKey(
        "inventory.Ingredient",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="recipe_items",
        help_text=_("The raw ingredient used."),
    )
    sub_product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="used_in_recipe_items",
        help_text=_("The product used as a component."),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        help_text=_("Quantity needed to make one unit of the product."),
    )
    unit = models.CharField(
        max_length=50,
        help_text=_("Unit of measure, e.g., 'gram', 'teaspoon', 'ml', 'pcs'."),
    )
    position = models.PositiveIntegerField(
        default=0,
        help_text=_("Order of the line within the recipe."),
    )

    class Meta:
        verbose_name = _("Recipe Item")
        verbose_name_plural = _("Recipe Items")
        ordering = ["product", "position", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(ingredient__isnull=False, sub_product__isnull=True)
                    | Q(ingredient__isnull=True, sub_product__isnull=False)
                ),
                name="recipe_item_exactly_one_component",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="recipe_item_quantity_positive",
            ),
        ]

    def __str__(self):
        component = self.ingredient if self.ingredient_id else self.sub_product
        name = getattr(component, "name", "?")
        return f"{self.quantity} {self.unit} of {name} in {self.product.name}"

    def clean(self):
        super().clean()
        if bool(self.ingredient_id) == bool(self.sub_product_id):
            raise ValidationError(_("Set exactly one of ingredient or sub-product."))
        if self.sub_product_id is not None and self.sub_product_id == self.product_id:
            raise ValidationError(_("A product cannot be used in its own recipe."))
