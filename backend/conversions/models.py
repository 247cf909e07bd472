from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class ConversionRule(models.Model):
    """
    Conversion factor between two measurement units.

    Rules can be:
    - Generic (ingredient=NULL): Standard conversions like kilogram→gram
    - Ingredient-specific (ingredient set): For things like "1 teaspoon of sugar = 4.2 gram"

    Formula: qty_in_to_unit = qty_in_from_unit * factor

    Example: 1 kilogram = 1000 gram → from_unit=kilogram, to_unit=gram, factor=1000

    Only the forward direction is stored; the resolver synthesizes the inverse
    and chains rules into multi-hop paths.
    """
    from_unit = models.CharField(
        max_length=50,
        help_text=_("The source unit, e.g., 'teaspoon'")
    )
    to_unit = models.CharField(
        max_length=50,
        help_text=_("The target unit, e.g., 'gram'")
    )
    factor = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        help_text=_("Multiply the from_unit quantity by this to get to_unit quantity")
    )
    ingredient = models.ForeignKey(
        'inventory.Ingredient',
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name='conversion_rules',
        help_text=_("If set, this rule is specific to this ingredient. "
                    "If null, it's a generic rule.")
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Conversion Rule")
        verbose_name_plural = _("Conversion Rules")
        ordering = ['from_unit', 'to_unit', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['from_unit', 'to_unit', 'ingredient'],
                condition=Q(ingredient__isnull=False),
                name='unique_conversion_rule_per_ingredient'
            ),
            # NULLs are distinct in unique indexes, so generic rules need their own constraint
            models.UniqueConstraint(
                fields=['from_unit', 'to_unit'],
                condition=Q(ingredient__isnull=True),
                name='unique_generic_conversion_rule'
            ),
            models.CheckConstraint(
                condition=Q(factor__gt=0),
                name='conversion_rule_factor_positive'
            ),
        ]
        indexes = [
            models.Index(fields=['ingredient'], name='conv_rule_ingredient_idx'),
        ]

    def __str__(self):
        scope = f" [{self.ingredient.name}]" if self.ingredient_id else ""
        return f"1 {self.from_unit} = {self.factor} {self.to_unit}{scope}"

    @property
    def is_generic(self):
        return self.ingredient_id is None

    def save(self, *args, **kwargs):
        self.from_unit = self.from_unit.strip()
        self.to_unit = self.to_unit.strip()
        super().save(*args, **kwargs)
