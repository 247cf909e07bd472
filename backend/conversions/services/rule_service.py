"""
Conversion rule management and default seeding.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction

from conversions.exceptions import InvalidConversionRuleError
from conversions.models import ConversionRule

logger = logging.getLogger(__name__)


# Default generic rules
# Format: (from_unit, to_unit, factor)
# Formula: qty_in_to = qty_in_from * factor
DEFAULT_GENERIC_RULES = [
    ("kilogram", "gram", Decimal("1000")),
    ("liter", "ml", Decimal("1000")),
]

DUPLICATE_RULE_MESSAGE = "This specific conversion rule already exists."


class ConversionRuleService:
    """Validates and writes conversion rules."""

    @staticmethod
    def validate_rule(from_unit, to_unit, factor):
        """
        Check a rule's fields and return them normalized.

        Returns:
            tuple: (from_unit, to_unit, factor) with units stripped and factor as Decimal.

        Raises:
            InvalidConversionRuleError: If a unit is missing, both units are the
                same (case-insensitive) or the factor is not positive.
        """
        from_unit = (from_unit or "").strip()
        to_unit = (to_unit or "").strip()

        if not from_unit or not to_unit:
            raise InvalidConversionRuleError("From unit and to unit are required.")
        if from_unit.lower() == to_unit.lower():
            raise InvalidConversionRuleError("Cannot convert a unit to itself.")

        try:
            factor = Decimal(str(factor))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidConversionRuleError("Factor must be a number.")
        if not factor.is_finite() or factor <= 0:
            raise InvalidConversionRuleError("Factor must be a positive number.")

        return from_unit, to_unit, factor

    @staticmethod
    def rule_exists(from_unit, to_unit, ingredient=None, exclude_pk=None):
        queryset = ConversionRule.objects.filter(
            from_unit=from_unit, to_unit=to_unit, ingredient=ingredient
        )
        if exclude_pk is not None:
            queryset = queryset.exclude(pk=exclude_pk)
        return queryset.exists()

    @staticmethod
    def create_rule(from_unit, to_unit, factor, ingredient=None):
        """
        Create a validated conversion rule.

        Raises:
            InvalidConversionRuleError: On invalid fields or a duplicate rule.
        """
        from_unit, to_unit, factor = ConversionRuleService.validate_rule(from_unit, to_unit, factor)

        if ConversionRuleService.rule_exists(from_unit, to_unit, ingredient):
            raise InvalidConversionRuleError(DUPLICATE_RULE_MESSAGE)

        try:
            with transaction.atomic():
                rule = ConversionRule.objects.create(
                    from_unit=from_unit,
                    to_unit=to_unit,
                    factor=factor,
                    ingredient=ingredient,
                )
        except IntegrityError:
            raise InvalidConversionRuleError(DUPLICATE_RULE_MESSAGE)

        logger.info(f"Created conversion rule {rule}")
        return rule


def seed_default_rules():
    """
    Seed the default generic conversion rules.

    Existing rules for the same unit pair are left untouched.

    Returns:
        list: List of created ConversionRule instances.
    """
    rules = []

    for from_unit, to_unit, factor in DEFAULT_GENERIC_RULES:
        rule, created = ConversionRule.objects.get_or_create(
            from_unit=from_unit,
            to_unit=to_unit,
            ingredient=None,
            defaults={"factor": factor},
        )
        if created:
            rules.append(rule)

    return rules
