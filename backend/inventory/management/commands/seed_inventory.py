"""
Django management command to load demo ingredients, conversion rules and recipes.
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from conversions.models import ConversionRule
from conversions.services import seed_default_rules
from inventory.models import Ingredient, PurchaseLogEntry, StockHistoryEntry
from orders.models import Order
from products.models import Category, Product, RecipeItem


DEMO_INGREDIENTS = [
    # (name, stock_level, stock_unit)
    ("Coffee Beans", Decimal("1000"), "gram"),
    ("Sugar", Decimal("5000"), "gram"),
    ("Milk", Decimal("10000"), "ml"),
    ("Croissant Dough", Decimal("50"), "pcs"),
]

# Ingredient-specific rules: (ingredient, from_unit, to_unit, factor)
DEMO_INGREDIENT_RULES = [
    ("Sugar", "teaspoon", "gram", Decimal("4.2")),
    ("Sugar", "tablespoon", "gram", Decimal("12.5")),
]

DEMO_PRODUCTS = [
    # (name, price, categories, recipe [(ingredient, quantity, unit)])
    ("Espresso", Decimal("25000"), ["Coffee", "Hot Drinks"], [
        ("Coffee Beans", Decimal("7"), "gram"),
    ]),
    ("Cappuccino", Decimal("30000"), ["Coffee", "Hot Drinks"], [
        ("Coffee Beans", Decimal("7"), "gram"),
        ("Milk", Decimal("100"), "ml"),
    ]),
    ("Iced Latte", Decimal("35000"), ["Coffee", "Cold Drinks"], [
        ("Coffee Beans", Decimal("14"), "gram"),
        ("Milk", Decimal("150"), "ml"),
    ]),
    ("Croissant", Decimal("20000"), ["Pastries", "Food"], [
        ("Croissant Dough", Decimal("1"), "pcs"),
    ]),
]


class Command(BaseCommand):
    help = 'Load demo ingredients, conversion rules and recipes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete all orders, inventory, rules and products before loading the demo data',
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Seeding demo inventory data...'))

        with transaction.atomic():
            if options['reset']:
                self.stdout.write('Resetting existing data...')
                Order.objects.all().delete()
                StockHistoryEntry.objects.all().delete()
                PurchaseLogEntry.objects.all().delete()
                RecipeItem.objects.all().delete()
                ConversionRule.objects.all().delete()
                Product.objects.all().delete()
                Category.objects.all().delete()
                Ingredient.objects.all().delete()

            ingredients = {}
            for name, stock_level, stock_unit in DEMO_INGREDIENTS:
                ingredient, created = Ingredient.objects.get_or_create(
                    name=name,
                    defaults={'stock_level': stock_level, 'stock_unit': stock_unit},
                )
                ingredients[name] = ingredient
                if created:
                    self.stdout.write(f'  ✓ Ingredient {name}: {stock_level} {stock_unit}')

            created_rules = seed_default_rules()
            for ingredient_name, from_unit, to_unit, factor in DEMO_INGREDIENT_RULES:
                rule, created = ConversionRule.objects.get_or_create(
                    from_unit=from_unit,
                    to_unit=to_unit,
                    ingredient=ingredients[ingredient_name],
                    defaults={'factor': factor},
                )
                if created:
                    created_rules.append(rule)
            for rule in created_rules:
                self.stdout.write(f'  ✓ Rule {rule}')

            for name, price, category_names, recipe in DEMO_PRODUCTS:
                product, created = Product.objects.get_or_create(name=name, defaults={'price': price})
                if not created:
                    continue
                for category_name in category_names:
                    category, _ = Category.objects.get_or_create(name=category_name)
                    product.categories.add(category)
                for position, (ingredient_name, quantity, unit) in enumerate(recipe):
                    RecipeItem.objects.create(
                        product=product,
                        ingredient=ingredients[ingredient_name],
                        quantity=quantity,
                        unit=unit,
                        position=position,
                    )
                self.stdout.write(f'  ✓ Product {name} with {len(recipe)} recipe items')

        self.stdout.write(
            self.style.SUCCESS(
                f'Done: {Ingredient.objects.count()} ingredients, '
                f'{ConversionRule.objects.count()} rules, {Product.objects.count()} products.'
            )
        )
