from django.contrib import admin

from conversions.models import ConversionRule


@admin.register(ConversionRule)
class ConversionRuleAdmin(admin.ModelAdmin):
    list_display = ['from_unit', 'to_unit', 'factor', 'ingredient']
    list_filter = ['ingredient']
    search_fields = ['from_unit', 'to_unit', 'ingredient__name']
    autocomplete_fields = ['ingredient']
    ordering = ['from_unit', 'to_unit']
