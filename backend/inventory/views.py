from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from inventory.models import InventoryItem, PurchaseOrder, StockHistoryEntry, Wastage
from inventory.serializers import (
    InventoryItemSerializer,
    PurchaseOrderSerializer,
    StockHistoryEntrySerializer,
    WastageSerializer,
)
from inventory.services import InventoryService


class InventoryItemViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = InventoryItem.objects.all()
    serializer_class = InventoryItemSerializer
    filterset_fields = ["category", "supplier"]

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        items = InventoryService.get_low_stock_items()
        return Response(InventoryItemSerializer(items, many=True).data)

    @action(detail=True, methods=["get"])
    def history(self, request: Request, pk=None) -> Response:
        entries = StockHistoryEntry.objects.filter(inventory_item_id=pk)
        return Response(StockHistoryEntrySerializer(entries, many=True).data)


class WastageViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Wastage.objects.select_related("inventory_item").all()
    serializer_class = WastageSerializer

    def create(self, request: Request) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        wastage = InventoryService.record_wastage(
            data["inventory_item"].id,
            data["quantity"],
            unit=data["unit"],
            reason=data["reason"],
            reported_by=data.get("reported_by"),
            notes=data.get("notes"),
        )
        return Response(WastageSerializer(wastage).data, status=status.HTTP_201_CREATED)


class PurchaseOrderViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = PurchaseOrder.objects.prefetch_related("items").all()
    serializer_class = PurchaseOrderSerializer
    filterset_fields = ["status", "supplier"]

    @action(detail=True, methods=["post"])
    def receive(self, request: Request, pk=None) -> Response:
        purchase_order = InventoryService.receive_purchase_order(pk)
        return Response(PurchaseOrderSerializer(purchase_order).data)
