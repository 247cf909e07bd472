"""
Tests for the seed_inventory management command.
"""
import pytest
from decimal import Decimal
from io import StringIO

from django.core.management import call_command

from conversions.models import ConversionRule
from conversions.services import ConversionResolver
from inventory.models import Ingredient
from products.models import Product


@pytest.mark.django_db
class TestSeedInventoryCommand:

    def test_seeds_demo_data(self):
        out = StringIO()
        call_command("seed_inventory", stdout=out)

        assert Ingredient.objects.count() == 4
        assert ConversionRule.objects.count() == 4
        assert Product.objects.get(name="Iced Latte").recipe_items.count() == 2
        assert "Done" in out.getvalue()

        sugar = Ingredient.objects.get(name="Sugar")
        assert ConversionResolver().resolve("tablespoon", "gram", sugar.id) == Decimal("12.5")

    def test_seeding_twice_is_idempotent(self):
        call_command("seed_inventory", stdout=StringIO())
        call_command("seed_inventory", stdout=StringIO())

        assert Ingredient.objects.count() == 4
        assert Product.objects.count() == 4
        assert ConversionRule.objects.count() == 4

    def test_reset(self, coffee_beans):
        coffee_beans.stock_level = Decimal("1")
        coffee_beans.save()

        call_command("seed_inventory", "--reset", stdout=StringIO())

        assert Ingredient.objects.get(name="Coffee Beans").stock_level == Decimal("1000")
