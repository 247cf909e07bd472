import django_filters
from django.db.models import Q

from conversions.models import ConversionRule


class ConversionRuleFilter(django_filters.FilterSet):
    """
    ?ingredient=<id> narrows the list to the rules that apply to that
    ingredient: its own rules plus every generic rule.
    """

    ingredient = django_filters.NumberFilter(method='filter_ingredient')

    class Meta:
        model = ConversionRule
        fields = ['ingredient']

    def filter_ingredient(self, queryset, name, value):
        return queryset.filter(Q(ingredient_id=int(value)) | Q(ingredient__isnull=True))
