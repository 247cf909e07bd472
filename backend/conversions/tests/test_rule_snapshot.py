"""
Tests for the cached rule snapshot and resolution against stored rules.
"""
import pytest
from decimal import Decimal

from django.core.cache import cache

from conversions.exceptions import NoConversionPathError
from conversions.models import ConversionRule
from conversions.services import ConversionResolver, load_rule_snapshot
from conversions.services.conversion_service import RULE_SNAPSHOT_CACHE_KEY


@pytest.mark.django_db
class TestRuleSnapshot:
    """Tests for load_rule_snapshot and its invalidation."""

    def test_snapshot_is_cached(self, generic_rules):
        """Test the first load populates the cache."""
        assert cache.get(RULE_SNAPSHOT_CACHE_KEY) is None

        snapshot = load_rule_snapshot()

        assert [r.id for r in snapshot] == [r.id for r in generic_rules]
        assert cache.get(RULE_SNAPSHOT_CACHE_KEY) == snapshot

    def test_saving_rule_invalidates_snapshot(self, generic_rules):
        """Test creating a rule drops the cached snapshot."""
        load_rule_snapshot()

        ConversionRule.objects.create(from_unit="pound", to_unit="gram", factor=Decimal("453.592"))

        assert cache.get(RULE_SNAPSHOT_CACHE_KEY) is None
        assert len(load_rule_snapshot()) == 3

    def test_updating_rule_invalidates_snapshot(self, generic_rules):
        """Test a changed factor is picked up by the next resolver."""
        assert ConversionResolver().resolve("kilogram", "gram") == Decimal("1000")

        rule = generic_rules[0]
        rule.factor = Decimal("999")
        rule.save()

        assert ConversionResolver().resolve("kilogram", "gram") == Decimal("999")

    def test_deleting_rule_invalidates_snapshot(self, generic_rules):
        """Test a deleted rule stops resolving."""
        assert ConversionResolver().can_convert("liter", "ml")

        generic_rules[1].delete()

        assert not ConversionResolver().can_convert("liter", "ml")

    def test_deleting_ingredient_removes_its_rules(self, sugar, sugar_rules):
        """Test cascade deletes also invalidate the snapshot."""
        sugar_id = sugar.id
        assert ConversionResolver().can_convert("teaspoon", "gram", sugar_id)

        sugar.delete()

        assert not ConversionResolver().can_convert("teaspoon", "gram", sugar_id)

    def test_resolver_keeps_its_snapshot(self, generic_rules):
        """Test one resolver sees a consistent rule set for its lifetime."""
        resolver = ConversionResolver()
        assert resolver.resolve("kilogram", "gram") == Decimal("1000")

        generic_rules[0].delete()

        assert resolver.resolve("kilogram", "gram") == Decimal("1000")


@pytest.mark.django_db
class TestSugarScenario:
    """Sugar measured in teaspoons and tablespoons, stocked in grams."""

    def test_teaspoon_of_sugar(self, sugar, sugar_rules, generic_rules):
        resolver = ConversionResolver()

        assert resolver.resolve("teaspoon", "gram", sugar.id) == Decimal("4.2")

    def test_teaspoon_without_ingredient_has_no_path(self, sugar, sugar_rules, generic_rules):
        resolver = ConversionResolver()

        with pytest.raises(NoConversionPathError):
            resolver.resolve("teaspoon", "gram")

    def test_teaspoon_of_coffee_has_no_path(self, sugar_rules, coffee_beans):
        resolver = ConversionResolver()

        with pytest.raises(NoConversionPathError) as exc_info:
            resolver.resolve("teaspoon", "gram", coffee_beans.id)

        assert exc_info.value.ingredient_id == coffee_beans.id

    def test_tablespoon_to_teaspoon_through_gram(self, sugar, sugar_rules):
        """Test tablespoon -> gram -> teaspoon for sugar."""
        resolver = ConversionResolver()

        assert resolver.convert(Decimal("1"), "tablespoon", "teaspoon", sugar.id) == Decimal("2.9762")

    def test_kilogram_of_sugar_in_teaspoons(self, sugar, sugar_rules, generic_rules):
        """Test a generic rule chained with a specific one."""
        resolver = ConversionResolver()

        assert resolver.convert(Decimal("1"), "kilogram", "teaspoon", sugar.id) == Decimal("238.0952")
