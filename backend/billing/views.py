from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from billing.models import Invoice
from billing.serializers import InvoiceSerializer
from core_backend.exceptions import NotFound


class InvoiceViewSet(viewsets.ReadOnlyModelViewSet):
    """Invoices are only written by the billing service; clients read them here."""

    queryset = Invoice.objects.all()
    serializer_class = InvoiceSerializer
    filterset_fields = ["status", "order"]

    @action(detail=False, methods=["get"], url_path=r"number/(?P<number>[^/]+)")
    def by_number(self, request: Request, number=None) -> Response:
        invoice = Invoice.objects.filter(invoice_number=number).first()
        if invoice is None:
            raise NotFound("Invoice", number)
        return Response(InvoiceSerializer(invoice).data)
