from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from conversions.exceptions import ConversionError
from inventory.exceptions import InventoryError, TransactionConflictError
from orders.models import Order
from orders.serializers import CheckoutSerializer, OrderSerializer
from products.exceptions import RecipeError


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Completed orders, newest first. Orders are created through checkout only.
    """
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["cashier"]

    def get_queryset(self):
        return Order.objects.select_related("cashier").prefetch_related("items__product")


class CheckoutView(APIView):
    """
    Check out a cart: create the order and deduct every ingredient and
    preparation it used, in one transaction.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = CheckoutSerializer(data=request.data)
        if serializer.is_valid():
            try:
                order = serializer.save(cashier=request.user)
                return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
            except TransactionConflictError as e:
                return Response(
                    {"status": "error", "message": str(e)},
                    status=status.HTTP_409_CONFLICT,
                )
            except (ValueError, ConversionError, RecipeError, InventoryError) as e:
                return Response(
                    {"status": "error", "message": str(e)},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
