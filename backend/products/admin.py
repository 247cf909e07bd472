from django.contrib import admin

from products.models import Category, Product, RecipeItem


class RecipeItemInline(admin.TabularInline):
    model = RecipeItem
    fk_name = "product"
    extra = 1
    autocomplete_fields = ("ingredient", "sub_product")
    ordering = ("position",)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "order")
    search_fields = ("name",)
    ordering = ("order", "name")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "is_for_sale", "stock_level", "stock_unit")
    list_filter = ("is_for_sale", "categories")
    search_fields = ("name",)
    filter_horizontal = ("categories",)
    inlines = [RecipeItemInline]
