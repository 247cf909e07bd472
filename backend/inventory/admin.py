from django.contrib import admin

from inventory.models import Ingredient, PurchaseLogEntry, StockHistoryEntry


@admin.register(Ingredient)
class IngredientAdmin(admin.ModelAdmin):
    list_display = ("name", "stock_level", "stock_unit", "updated_at")
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(StockHistoryEntry)
class StockHistoryEntryAdmin(admin.ModelAdmin):
    list_display = (
        "timestamp",
        "operation_type",
        "ingredient",
        "product",
        "quantity_change",
        "new_quantity",
        "unit",
        "reference_id",
        "user",
    )
    list_filter = ("operation_type",)
    search_fields = ("ingredient__name", "product__name", "reference_id")
    readonly_fields = [field.name for field in StockHistoryEntry._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(PurchaseLogEntry)
class PurchaseLogEntryAdmin(admin.ModelAdmin):
    list_display = ("created_at", "ingredient", "quantity_purchased", "unit", "total_cost", "supplier", "user")
    list_filter = ("supplier",)
    search_fields = ("ingredient__name", "supplier", "notes")
    autocomplete_fields = ("ingredient",)
