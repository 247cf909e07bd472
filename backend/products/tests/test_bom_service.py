"""
Tests for BOMExpander and BillOfMaterials.
"""
import pytest
from decimal import Decimal

from products.exceptions import RecipeDepthExceededError
from products.models import Product, RecipeItem
from products.services import BillOfMaterials, BOMExpander, RecipeStore


def make_product(name, **kwargs):
    return Product.objects.create(name=name, price=Decimal("1.00"), **kwargs)


@pytest.mark.django_db
class TestBOMExpander:
    """Tests for recursive recipe flattening."""

    def test_flat_recipe(self, cappuccino, coffee_beans, milk):
        bom = BOMExpander().expand(cappuccino.id, Decimal("2"))

        assert bom.ingredient_deductions == {
            (coffee_beans.id, "gram"): Decimal("14"),
            (milk.id, "ml"): Decimal("200"),
        }
        assert bom.sub_product_deductions == {}

    def test_nested_virtual_sub_product(self, coffee_beans):
        """Test 5 x (2 g + 1 x (3 g)) = 25 g of the same ingredient."""
        inner = make_product("Inner Blend", is_for_sale=False)
        RecipeItem.objects.create(product=inner, ingredient=coffee_beans, quantity=Decimal("3"), unit="gram")
        outer = make_product("Outer Drink")
        RecipeItem.objects.create(product=outer, ingredient=coffee_beans, quantity=Decimal("2"), unit="gram", position=0)
        RecipeItem.objects.create(product=outer, sub_product=inner, quantity=Decimal("1"), unit="pcs", position=1)

        bom = BOMExpander().expand(outer.id, Decimal("5"))

        assert bom.ingredient_deductions == {(coffee_beans.id, "gram"): Decimal("25")}
        assert bom.sub_product_deductions == {}

    def test_multipliers_compound_through_levels(self, milk):
        double = make_product("Double Shot", is_for_sale=False)
        foam = make_product("Foam", is_for_sale=False)
        RecipeItem.objects.create(product=foam, ingredient=milk, quantity=Decimal("30"), unit="ml")
        RecipeItem.objects.create(product=double, sub_product=foam, quantity=Decimal("2"), unit="pcs")
        drink = make_product("Flat White")
        RecipeItem.objects.create(product=drink, sub_product=double, quantity=Decimal("1.5"), unit="pcs")

        bom = BOMExpander().expand(drink.id, Decimal("2"))

        assert bom.ingredient_deductions == {(milk.id, "ml"): Decimal("180")}

    def test_tracked_sub_product_is_a_leaf(self, cold_brew, cold_brew_concentrate, milk, coffee_beans):
        """Test a stock-tracked sub-product is deducted whole, not expanded."""
        bom = BOMExpander().expand(cold_brew.id, Decimal("4"))

        assert bom.sub_product_deductions == {cold_brew_concentrate.id: Decimal("1.00")}
        assert bom.ingredient_deductions == {(milk.id, "ml"): Decimal("200")}
        assert (coffee_beans.id, "gram") not in bom.ingredient_deductions

    def test_tracked_root_is_deducted_from_own_stock(self, cold_brew_concentrate):
        bom = BOMExpander().expand(cold_brew_concentrate.id, Decimal("3"))

        assert bom.sub_product_deductions == {cold_brew_concentrate.id: Decimal("3")}
        assert bom.ingredient_deductions == {}

    def test_units_kept_in_separate_buckets(self, sugar):
        product = make_product("Sweet Tea")
        RecipeItem.objects.create(product=product, ingredient=sugar, quantity=Decimal("2"), unit="teaspoon", position=0)
        RecipeItem.objects.create(product=product, ingredient=sugar, quantity=Decimal("5"), unit="gram", position=1)

        bom = BOMExpander().expand(product.id, Decimal("1"))

        assert bom.ingredient_deductions == {
            (sugar.id, "teaspoon"): Decimal("2"),
            (sugar.id, "gram"): Decimal("5"),
        }

    def test_product_without_recipe(self):
        water = make_product("Tap Water")

        bom = BOMExpander().expand(water.id, Decimal("1"))

        assert bom.is_empty

    def test_unknown_product(self):
        with pytest.raises(ValueError, match="does not exist"):
            BOMExpander().expand(987654, Decimal("1"))

    @pytest.mark.parametrize("quantity", [Decimal("0"), Decimal("-1")])
    def test_non_positive_quantity(self, espresso, quantity):
        with pytest.raises(ValueError):
            BOMExpander().expand(espresso.id, quantity)

    def test_cycle_hits_depth_cap(self, coffee_beans):
        """Test a product that contains itself transitively is rejected."""
        a = make_product("Loop A", is_for_sale=False)
        b = make_product("Loop B", is_for_sale=False)
        RecipeItem.objects.create(product=a, sub_product=b, quantity=Decimal("1"), unit="pcs")
        RecipeItem.objects.create(product=b, sub_product=a, quantity=Decimal("1"), unit="pcs")
        RecipeItem.objects.create(product=b, ingredient=coffee_beans, quantity=Decimal("1"), unit="gram", position=1)

        with pytest.raises(RecipeDepthExceededError) as exc_info:
            BOMExpander().expand(a.id, Decimal("1"))

        assert exc_info.value.max_depth == 10
        assert exc_info.value.product_id in (a.id, b.id)

    def test_ten_nested_levels_allowed(self, coffee_beans):
        products = [make_product(f"Level {i}", is_for_sale=False) for i in range(12)]
        for parent, child in zip(products, products[1:]):
            RecipeItem.objects.create(product=parent, sub_product=child, quantity=Decimal("1"), unit="pcs")
        for level in products:
            RecipeItem.objects.create(product=level, ingredient=coffee_beans, quantity=Decimal("1"), unit="gram", position=1)

        # products[10] sits ten levels below products[0]
        bom = BOMExpander().expand(products[1].id, Decimal("1"))
        assert bom.ingredient_deductions == {(coffee_beans.id, "gram"): Decimal("11")}

        with pytest.raises(RecipeDepthExceededError) as exc_info:
            BOMExpander().expand(products[0].id, Decimal("1"))
        assert exc_info.value.product_id == products[11].id

    def test_custom_depth(self, coffee_beans):
        top = make_product("Top")
        middle = make_product("Middle")
        RecipeItem.objects.create(product=top, sub_product=middle, quantity=Decimal("1"), unit="pcs")
        RecipeItem.objects.create(product=middle, ingredient=coffee_beans, quantity=Decimal("1"), unit="gram")

        assert not BOMExpander(max_depth=1).expand(top.id, Decimal("1")).is_empty
        with pytest.raises(RecipeDepthExceededError):
            BOMExpander(max_depth=0).expand(top.id, Decimal("1"))

    def test_shared_recipe_store(self, espresso, django_assert_num_queries):
        """Test a shared store reads each recipe once."""
        store = RecipeStore()
        expander = BOMExpander(recipe_store=store)
        expander.expand(espresso.id, Decimal("1"))

        with django_assert_num_queries(0):
            expander.expand(espresso.id, Decimal("3"))


class TestBillOfMaterials:
    """Tests for plan arithmetic."""

    def test_merge_sums_buckets(self):
        first = BillOfMaterials(
            ingredient_deductions={(1, "gram"): Decimal("7")},
            sub_product_deductions={9: Decimal("0.25")},
        )
        second = BillOfMaterials(
            ingredient_deductions={(1, "gram"): Decimal("14"), (2, "ml"): Decimal("150")},
            sub_product_deductions={9: Decimal("0.5")},
        )

        merged = first.merge(second)

        assert merged.ingredient_deductions == {(1, "gram"): Decimal("21"), (2, "ml"): Decimal("150")}
        assert merged.sub_product_deductions == {9: Decimal("0.75")}

    def test_merge_does_not_mutate(self):
        first = BillOfMaterials(ingredient_deductions={(1, "gram"): Decimal("7")})
        first.merge(BillOfMaterials(ingredient_deductions={(1, "gram"): Decimal("7")}))

        assert first.ingredient_deductions == {(1, "gram"): Decimal("7")}

    def test_merge_keeps_units_apart(self):
        merged = BillOfMaterials(ingredient_deductions={(1, "gram"): Decimal("5")}).merge(
            BillOfMaterials(ingredient_deductions={(1, "teaspoon"): Decimal("2")})
        )

        assert merged.ingredient_ids == [1]
        assert len(merged.ingredient_deductions) == 2

    def test_empty(self):
        assert BillOfMaterials().is_empty
