from rest_framework import viewsets

from .models import Table
from .serializers import TableSerializer


class TableViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only table listing. Clients re-fetch here after a `table_updated`
    broadcast; table status itself is only written by the order services.
    """

    queryset = Table.objects.select_related("floor").all()
    serializer_class = TableSerializer
    filterset_fields = ["status", "floor"]
