"""
Tests for RestockProcessor.
"""
import pytest
from decimal import Decimal
from unittest.mock import patch

from django.db import OperationalError

from conversions.exceptions import NoConversionPathError
from inventory.exceptions import NotStockTrackedError, TransactionConflictError
from inventory.models import StockHistoryEntry
from inventory.services import RestockProcessor
from products.models import Product, RecipeItem


@pytest.fixture
def simple_syrup(sugar, sugar_rules):
    """1 liter of syrup takes 10 tablespoons of sugar."""
    product = Product.objects.create(
        name="Simple Syrup",
        price=Decimal("0"),
        is_for_sale=False,
        stock_level=Decimal("0"),
        stock_unit="liter",
    )
    RecipeItem.objects.create(product=product, ingredient=sugar, quantity=Decimal("10"), unit="tablespoon")
    return product


@pytest.mark.django_db
class TestRestockProcessor:
    """Tests for preparation restocking."""

    def test_restock_round_trip(self, cold_brew_concentrate, coffee_beans, staff_user):
        """Test adding 1.5 liter consumes 1.5 x 80 gram of beans."""
        product = RestockProcessor().restock(cold_brew_concentrate.id, Decimal("1.5"), user=staff_user)

        coffee_beans.refresh_from_db()
        assert product.stock_level == Decimal("3.5")
        assert coffee_beans.stock_level == Decimal("880")

        add = StockHistoryEntry.objects.get(operation_type=StockHistoryEntry.OperationType.RESTOCK_ADD)
        used = StockHistoryEntry.objects.get(operation_type=StockHistoryEntry.OperationType.RESTOCK_CONSUMPTION)
        assert add.product == cold_brew_concentrate
        assert add.quantity_change == Decimal("1.5")
        assert used.ingredient == coffee_beans
        assert used.quantity_change == Decimal("-120")
        assert add.reference_id == used.reference_id
        assert add.user == staff_user

    def test_restock_converts_recipe_units(self, simple_syrup, sugar):
        RestockProcessor().restock(simple_syrup.id, 2)

        sugar.refresh_from_db()
        simple_syrup.refresh_from_db()
        assert simple_syrup.stock_level == Decimal("2")
        assert sugar.stock_level == Decimal("4750")

    def test_same_ingredient_in_two_units(self, simple_syrup, sugar):
        RecipeItem.objects.create(product=simple_syrup, ingredient=sugar, quantity=Decimal("5"), unit="gram", position=1)

        RestockProcessor().restock(simple_syrup.id, Decimal("1"))

        sugar.refresh_from_db()
        assert sugar.stock_level == Decimal("4870")
        assert StockHistoryEntry.objects.filter(ingredient=sugar).count() == 1

    def test_restock_is_one_level_only(self, cold_brew_concentrate, coffee_beans):
        """Test sub-product components of a preparation are not consumed."""
        base = Product.objects.create(
            name="Brew Base", price=Decimal("0"), is_for_sale=False,
            stock_level=Decimal("10"), stock_unit="liter",
        )
        RecipeItem.objects.create(
            product=cold_brew_concentrate, sub_product=base, quantity=Decimal("1"), unit="liter", position=1
        )

        RestockProcessor().restock(cold_brew_concentrate.id, Decimal("1"))

        base.refresh_from_db()
        coffee_beans.refresh_from_db()
        assert base.stock_level == Decimal("10")
        assert coffee_beans.stock_level == Decimal("920")

    def test_restock_untracked_product(self, espresso, coffee_beans):
        with pytest.raises(NotStockTrackedError):
            RestockProcessor().restock(espresso.id, Decimal("1"))

        coffee_beans.refresh_from_db()
        assert coffee_beans.stock_level == Decimal("1000")

    @pytest.mark.parametrize("quantity", [Decimal("0"), Decimal("-2"), "abc", None])
    def test_restock_requires_positive_quantity(self, cold_brew_concentrate, quantity):
        with pytest.raises(ValueError, match="Valid product ID and a positive quantity are required to restock."):
            RestockProcessor().restock(cold_brew_concentrate.id, quantity)

    def test_restock_requires_product_id(self):
        with pytest.raises(ValueError, match="required to restock"):
            RestockProcessor().restock(None, Decimal("1"))

    def test_restock_accepts_numeric_string_id(self, cold_brew_concentrate, coffee_beans):
        product = RestockProcessor().restock(str(cold_brew_concentrate.id), "1")

        assert product.stock_level == Decimal("3")
        coffee_beans.refresh_from_db()
        assert coffee_beans.stock_level == Decimal("920")

    def test_restock_rejects_non_numeric_id(self, cold_brew_concentrate):
        with pytest.raises(ValueError, match="Valid product ID"):
            RestockProcessor().restock("concentrate", "1")

    def test_restock_unknown_product(self):
        with pytest.raises(ValueError, match="does not exist"):
            RestockProcessor().restock(999999, Decimal("1"))

    def test_conversion_failure_applies_nothing(self, cold_brew_concentrate, coffee_beans, sugar):
        """Test a unit without a path rolls back the whole restock."""
        RecipeItem.objects.create(
            product=cold_brew_concentrate, ingredient=sugar, quantity=Decimal("1"), unit="cup", position=1
        )

        with pytest.raises(NoConversionPathError):
            RestockProcessor().restock(cold_brew_concentrate.id, Decimal("1"))

        cold_brew_concentrate.refresh_from_db()
        coffee_beans.refresh_from_db()
        sugar.refresh_from_db()
        assert cold_brew_concentrate.stock_level == Decimal("2")
        assert coffee_beans.stock_level == Decimal("1000")
        assert sugar.stock_level == Decimal("5000")
        assert not StockHistoryEntry.objects.exists()

    def test_database_conflict(self, cold_brew_concentrate, coffee_beans):
        with patch(
            "inventory.services.restock_service.InventoryLedger.lock_products",
            side_effect=OperationalError("database is locked"),
        ):
            with pytest.raises(TransactionConflictError):
                RestockProcessor().restock(cold_brew_concentrate.id, Decimal("1"))

        coffee_beans.refresh_from_db()
        assert coffee_beans.stock_level == Decimal("1000")
