"""
ConversionRule views.
"""
from rest_framework import status, viewsets
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from conversions.exceptions import ConversionError
from conversions.filters import ConversionRuleFilter
from conversions.models import ConversionRule
from conversions.serializers import ConversionRuleSerializer, ResolveConversionQuerySerializer
from conversions.services import ConversionResolver


class ConversionRuleViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing ConversionRules.

    list: Get all rules, optionally narrowed with ?ingredient=<id>
        (that ingredient's rules plus the generic ones).
    retrieve: Get a specific rule.
    create/update/destroy: Staff only. Saving invalidates the rule cache.
    """
    serializer_class = ConversionRuleSerializer
    filterset_class = ConversionRuleFilter

    def get_queryset(self):
        return ConversionRule.objects.select_related('ingredient')

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]


class ResolveConversionView(APIView):
    """
    Resolve the factor between two units.

    GET /api/conversions/resolve/?from_unit=tablespoon&to_unit=gram&ingredient=3
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = ResolveConversionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        ingredient_id = params.get('ingredient')

        try:
            factor = ConversionResolver().resolve(params['from_unit'], params['to_unit'], ingredient_id)
        except ConversionError as e:
            return Response(
                {"status": "error", "message": str(e)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response({
            "from_unit": params['from_unit'].strip(),
            "to_unit": params['to_unit'].strip(),
            "ingredient": ingredient_id,
            "factor": str(factor),
        })
