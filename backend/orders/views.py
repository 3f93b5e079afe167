from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from billing.serializers import InvoiceSerializer
from billing.services import BillingService
from orders.models import Order, OrderItem
from orders.serializers import (
    AddItemSerializer,
    CheckoutSerializer,
    OrderActionSerializer,
    OrderCreateSerializer,
    OrderDetailSerializer,
    OrderItemSerializer,
    OrderSerializer,
    StatusSerializer,
)
from orders.services import OrderItemService, OrderService

logger = logging.getLogger(__name__)


def action_response(result) -> Response:
    """Render an OrderActionResult (and checkout results) for the client."""
    payload = {
        "order": OrderSerializer(result.order).data,
        "invoice": InvoiceSerializer(result.invoice).data if result.invoice else None,
        "should_print": result.should_print,
    }
    completed_steps = getattr(result, "completed_steps", None)
    if completed_steps is not None:
        payload["completed_steps"] = list(completed_steps)
    return Response(payload)


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Order lifecycle endpoints. Every write goes through the order and billing
    services; this viewset only validates request shape and renders results.
    """

    queryset = Order.objects.select_related("table", "table__floor").all()
    serializer_class = OrderSerializer
    filterset_fields = ["status", "order_type", "table"]

    def get_serializer_class(self):
        if self.action == "retrieve":
            return OrderDetailSerializer
        return OrderSerializer

    def create(self, request: Request) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = OrderService.create_order(
            order_type=data["order_type"],
            table=data.get("table_id"),
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            customer_address=data["customer_address"],
            payment_mode=data["payment_mode"],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def active(self, request: Request) -> Response:
        orders = OrderService.get_active_orders()
        return Response(OrderSerializer(orders, many=True).data)

    @action(detail=False, methods=["get"])
    def completed(self, request: Request) -> Response:
        orders = OrderService.get_completed_orders()
        return Response(OrderSerializer(orders, many=True).data)

    @action(detail=True, methods=["get", "post"])
    def items(self, request: Request, pk=None) -> Response:
        if request.method == "GET":
            order = OrderService.get_order(pk)
            return Response(OrderItemSerializer(order.items.all(), many=True).data)

        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        item = OrderItemService.add_item(
            pk,
            menu_item=data.get("menu_item_id"),
            name=data.get("name"),
            price=data.get("price"),
            quantity=data["quantity"],
            notes=data["notes"],
            is_veg=data.get("is_veg"),
        )
        return Response(OrderItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.update_order_status(pk, serializer.validated_data["status"])
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def kot(self, request: Request, pk=None) -> Response:
        serializer = OrderActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = OrderService.send_to_kitchen(pk, serializer.validated_data["print"])
        return action_response(result)

    @action(detail=True, methods=["post"])
    def save(self, request: Request, pk=None) -> Response:
        serializer = OrderActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = BillingService.save_order(pk, serializer.validated_data["print"])
        return action_response(result)

    @action(detail=True, methods=["post"])
    def bill(self, request: Request, pk=None) -> Response:
        serializer = OrderActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = BillingService.bill_order(pk, serializer.validated_data["print"])
        return action_response(result)

    @action(detail=True, methods=["post"])
    def checkout(self, request: Request, pk=None) -> Response:
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = BillingService.checkout(
            pk,
            payment_mode=data["payment_mode"] or None,
            split_payments=data.get("split_payments"),
            print_requested=data["print"],
        )
        return action_response(result)

    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk=None) -> Response:
        order = OrderService.complete_order(pk)
        return Response(OrderSerializer(order).data)


class OrderItemViewSet(viewsets.GenericViewSet):
    """
    Item-level endpoints: status updates from the kitchen and removals.
    """

    queryset = OrderItem.objects.all()
    serializer_class = OrderItemSerializer

    def destroy(self, request: Request, pk=None) -> Response:
        order = OrderItemService.delete_item(pk)
        return Response({"success": True, "order_id": str(order.id), "total": str(order.total)})

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        serializer = StatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = OrderItemService.update_item_status(pk, serializer.validated_data["status"])
        return Response(OrderItemSerializer(item).data)
