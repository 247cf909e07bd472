from django.db.models import ProtectedError
from rest_framework import generics, status, viewsets
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from conversions.exceptions import ConversionError
from inventory.exceptions import InventoryError, TransactionConflictError
from inventory.models import Ingredient, PurchaseLogEntry, StockHistoryEntry
from inventory.serializers import (
    IngredientSerializer,
    LogPurchaseSerializer,
    PurchaseLogEntrySerializer,
    RestockSerializer,
    StockHistoryEntrySerializer,
)
from products.serializers import ProductSerializer


class IngredientViewSet(viewsets.ModelViewSet):
    """
    Raw ingredients and their stock levels.
    Anyone signed in can read; only staff can create, edit or delete.
    """

    queryset = Ingredient.objects.all()
    serializer_class = IngredientSerializer
    filter_backends = [SearchFilter]
    search_fields = ["name"]

    def get_permissions(self):
        if self.action in ["create", "update", "partial_update", "destroy"]:
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return Response(
                {"status": "error", "message": "Ingredient is used in recipes or purchases and cannot be deleted."},
                status=status.HTTP_400_BAD_REQUEST,
            )


class StockHistoryListView(generics.ListAPIView):
    """
    Audit trail of stock changes.
    Filter with ?ingredient=, ?product=, ?operation_type=, ?reference_id=, ?user=.
    """

    permission_classes = [IsAdminUser]
    serializer_class = StockHistoryEntrySerializer
    filterset_fields = ["ingredient", "product", "operation_type", "reference_id", "user"]

    def get_queryset(self):
        return StockHistoryEntry.objects.select_related("ingredient", "product", "user")


class RestockView(APIView):
    """
    Record that a batch of a stock-tracked product was prepared.
    Adds to the product's stock and consumes its recipe's ingredients.
    """

    permission_classes = [IsAdminUser]

    def post(self, request, *args, **kwargs):
        serializer = RestockSerializer(data=request.data)
        if serializer.is_valid():
            try:
                product = serializer.save(user=request.user)
                return Response(
                    {
                        "status": "success",
                        "message": "Stock restocked successfully.",
                        "product": ProductSerializer(product).data,
                    },
                    status=status.HTTP_200_OK,
                )
            except TransactionConflictError as e:
                return Response(
                    {"status": "error", "message": str(e)},
                    status=status.HTTP_409_CONFLICT,
                )
            except (ValueError, ConversionError, InventoryError) as e:
                return Response(
                    {"status": "error", "message": str(e)},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class PurchaseLogView(generics.ListAPIView):
    """
    GET: purchase history, newest first.
    POST: log a purchase and add it to the ingredient's stock.
    """

    permission_classes = [IsAdminUser]
    serializer_class = PurchaseLogEntrySerializer
    filterset_fields = ["ingredient", "supplier"]

    def get_queryset(self):
        return PurchaseLogEntry.objects.select_related("ingredient", "user")

    def post(self, request, *args, **kwargs):
        serializer = LogPurchaseSerializer(data=request.data)
        if serializer.is_valid():
            try:
                entry = serializer.save(user=request.user)
                return Response(
                    PurchaseLogEntrySerializer(entry).data,
                    status=status.HTTP_201_CREATED,
                )
            except TransactionConflictError as e:
                return Response(
                    {"status": "error", "message": str(e)},
                    status=status.HTTP_409_CONFLICT,
                )
            except (ValueError, ConversionError) as e:
                return Response(
                    {"status": "error", "message": str(e)},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
