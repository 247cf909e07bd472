"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache_after_test():
    """
    Clear cache after each test to prevent cache pollution.

    The conversion rule snapshot lives in the cache, so a stale snapshot
    from one test must never leak into the next.
    """
    cache.clear()
    yield  # Run the test
    cache.clear()


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def staff_user(db):
    """Create a staff user (can manage rules, ingredients and restocks)."""
    return get_user_model().objects.create_user(
        username="manager",
        email="manager@test.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def cashier_user(db):
    """Create a regular user (can only check out)."""
    return get_user_model().objects.create_user(
        username="cashier",
        email="cashier@test.com",
        password="testpass123",
    )


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/products/')
            assert response.status_code == 403
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def staff_client(staff_user):
    """Provide an API client authenticated as a staff user."""
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def cashier_client(cashier_user):
    """Provide an API client authenticated as a non-staff user."""
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=cashier_user)
    return client


# ============================================================================
# INVENTORY FIXTURES
# ============================================================================

@pytest.fixture
def coffee_beans(db):
    from inventory.models import Ingredient
    return Ingredient.objects.create(name="Coffee Beans", stock_level=Decimal("1000"), stock_unit="gram")


@pytest.fixture
def sugar(db):
    from inventory.models import Ingredient
    return Ingredient.objects.create(name="Sugar", stock_level=Decimal("5000"), stock_unit="gram")


@pytest.fixture
def milk(db):
    from inventory.models import Ingredient
    return Ingredient.objects.create(name="Milk", stock_level=Decimal("10000"), stock_unit="ml")


@pytest.fixture
def croissant_dough(db):
    from inventory.models import Ingredient
    return Ingredient.objects.create(name="Croissant Dough", stock_level=Decimal("50"), stock_unit="pcs")


@pytest.fixture
def generic_rules(db):
    """kilogram -> gram and liter -> ml for every ingredient."""
    from conversions.models import ConversionRule
    return [
        ConversionRule.objects.create(from_unit="kilogram", to_unit="gram", factor=Decimal("1000")),
        ConversionRule.objects.create(from_unit="liter", to_unit="ml", factor=Decimal("1000")),
    ]


@pytest.fixture
def sugar_rules(sugar):
    """teaspoon and tablespoon of sugar in grams."""
    from conversions.models import ConversionRule
    return [
        ConversionRule.objects.create(from_unit="teaspoon", to_unit="gram", factor=Decimal("4.2"), ingredient=sugar),
        ConversionRule.objects.create(from_unit="tablespoon", to_unit="gram", factor=Decimal("12.5"), ingredient=sugar),
    ]


# ============================================================================
# PRODUCT FIXTURES
# ============================================================================

@pytest.fixture
def espresso(coffee_beans):
    """Espresso: 7 gram of coffee beans."""
    from products.models import Product, RecipeItem
    product = Product.objects.create(name="Espresso", price=Decimal("2.50"))
    RecipeItem.objects.create(product=product, ingredient=coffee_beans, quantity=Decimal("7"), unit="gram")
    return product


@pytest.fixture
def cappuccino(coffee_beans, milk):
    """Cappuccino: 7 gram of coffee beans and 100 ml of milk."""
    from products.models import Product, RecipeItem
    product = Product.objects.create(name="Cappuccino", price=Decimal("3.50"))
    RecipeItem.objects.create(product=product, ingredient=coffee_beans, quantity=Decimal("7"), unit="gram", position=0)
    RecipeItem.objects.create(product=product, ingredient=milk, quantity=Decimal("100"), unit="ml", position=1)
    return product


@pytest.fixture
def sweet_latte(coffee_beans, milk, sugar):
    """A latte measured in kitchen units: kilogram, liter and teaspoon."""
    from products.models import Product, RecipeItem
    product = Product.objects.create(name="Sweet Latte", price=Decimal("4.00"))
    RecipeItem.objects.create(product=product, ingredient=coffee_beans, quantity=Decimal("0.014"), unit="kilogram", position=0)
    RecipeItem.objects.create(product=product, ingredient=milk, quantity=Decimal("0.15"), unit="liter", position=1)
    RecipeItem.objects.create(product=product, ingredient=sugar, quantity=Decimal("2"), unit="teaspoon", position=2)
    return product


@pytest.fixture
def croissant(croissant_dough):
    """Croissant: 1 pcs of croissant dough."""
    from products.models import Product, RecipeItem
    product = Product.objects.create(name="Croissant", price=Decimal("2.75"))
    RecipeItem.objects.create(product=product, ingredient=croissant_dough, quantity=Decimal("1"), unit="pcs")
    return product


@pytest.fixture
def cold_brew_concentrate(coffee_beans):
    """A stock-tracked preparation: 1 liter of concentrate uses 80 gram of beans."""
    from products.models import Product, RecipeItem
    product = Product.objects.create(
        name="Cold Brew Concentrate",
        price=Decimal("0"),
        is_for_sale=False,
        stock_level=Decimal("2"),
        stock_unit="liter",
    )
    RecipeItem.objects.create(product=product, ingredient=coffee_beans, quantity=Decimal("80"), unit="gram")
    return product


@pytest.fixture
def cold_brew(cold_brew_concentrate, milk):
    """Cold brew served from the tracked concentrate plus milk."""
    from products.models import Product, RecipeItem
    product = Product.objects.create(name="Cold Brew", price=Decimal("4.25"))
    RecipeItem.objects.create(
        product=product, sub_product=cold_brew_concentrate, quantity=Decimal("0.25"), unit="liter", position=0
    )
    RecipeItem.objects.create(product=product, ingredient=milk, quantity=Decimal("50"), unit="ml", position=1)
    return product
