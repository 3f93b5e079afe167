from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import TableViewSet

app_name = "floor_plan"

router = DefaultRouter()
router.register(r"tables", TableViewSet, basename="table")

urlpatterns = [
    path("", include(router.urls)),
]
