"""
ConversionRule serializers.
"""
from rest_framework import serializers

from conversions.exceptions import InvalidConversionRuleError
from conversions.models import ConversionRule
from conversions.services.rule_service import ConversionRuleService, DUPLICATE_RULE_MESSAGE


class ConversionRuleSerializer(serializers.ModelSerializer):
    """Serializer for ConversionRule create/read/update."""
    ingredient_name = serializers.CharField(source='ingredient.name', read_only=True, allow_null=True)

    class Meta:
        model = ConversionRule
        fields = [
            'id',
            'ingredient', 'ingredient_name',
            'from_unit', 'to_unit',
            'factor',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']
        # Uniqueness is checked in validate() so generic and specific rules share one message
        validators = []

    def validate(self, data):
        instance = self.instance
        from_unit = data.get('from_unit', instance.from_unit if instance else None)
        to_unit = data.get('to_unit', instance.to_unit if instance else None)
        factor = data.get('factor', instance.factor if instance else None)
        ingredient = data.get('ingredient', instance.ingredient if instance else None)

        try:
            from_unit, to_unit, factor = ConversionRuleService.validate_rule(from_unit, to_unit, factor)
        except InvalidConversionRuleError as e:
            raise serializers.ValidationError(str(e))

        if ConversionRuleService.rule_exists(
            from_unit, to_unit, ingredient, exclude_pk=instance.pk if instance else None
        ):
            raise serializers.ValidationError(DUPLICATE_RULE_MESSAGE)

        data['from_unit'] = from_unit
        data['to_unit'] = to_unit
        data['factor'] = factor
        return data


class ResolveConversionQuerySerializer(serializers.Serializer):
    """Query parameters of the resolve endpoint."""
    from_unit = serializers.CharField(max_length=50)
    to_unit = serializers.CharField(max_length=50)
    ingredient = serializers.IntegerField(required=False, allow_null=True, min_value=1)
