from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "price_at_sale", "get_line_item_total")
    fields = ("product", "quantity", "price_at_sale", "get_line_item_total")
    can_delete = False

    def get_line_item_total(self, obj):
        return f"{obj.total_price:,.2f}"

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are written by checkout only; the admin is read-only.
    """

    list_display = ("id", "created_at", "total", "cashier")
    list_filter = ("created_at",)
    search_fields = ("id", "cashier__username")
    readonly_fields = ("created_at", "total", "cashier")
    inlines = [OrderItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
