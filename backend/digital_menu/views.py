from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.request import Request
from rest_framework.response import Response

from digital_menu.serializers import (
    DigitalMenuCustomerOrdersSerializer,
    DigitalMenuCustomerSerializer,
    SyncStartSerializer,
)
from digital_menu.services import DigitalMenuGateway, digital_menu_sync


@api_view(["POST"])
def sync_start(request: Request) -> Response:
    serializer = SyncStartSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    started = digital_menu_sync.start(serializer.validated_data.get("interval_ms"))
    message = "Digital menu sync started" if started else "Digital menu sync is already running"
    return Response(
        {
            "message": message,
            "interval_ms": digital_menu_sync.interval_ms,
            **digital_menu_sync.get_sync_status(),
        }
    )


@api_view(["POST"])
def sync_stop(request: Request) -> Response:
    stopped = digital_menu_sync.stop()
    message = "Digital menu sync stopped" if stopped else "Digital menu sync was not running"
    return Response({"message": message, **digital_menu_sync.get_sync_status()})


@api_view(["POST"])
def sync_now(request: Request) -> Response:
    changed = digital_menu_sync.sync_orders()
    return Response({"changed": changed, **digital_menu_sync.get_sync_status()}, status=status.HTTP_200_OK)


@api_view(["GET"])
def sync_status(request: Request) -> Response:
    return Response(digital_menu_sync.get_sync_status())


@api_view(["GET"])
def order_documents(request: Request) -> Response:
    documents = DigitalMenuGateway().list_order_documents()
    return Response(DigitalMenuCustomerOrdersSerializer(documents, many=True).data)


@api_view(["GET"])
def logged_in_customers(request: Request) -> Response:
    customers = DigitalMenuGateway().list_logged_in_customers()
    return Response(DigitalMenuCustomerSerializer(customers, many=True).data)
