from django.urls import path

from digital_menu import views

app_name = "digital_menu"

urlpatterns = [
    path("sync-start/", views.sync_start, name="sync-start"),
    path("sync-stop/", views.sync_stop, name="sync-stop"),
    path("sync-now/", views.sync_now, name="sync-now"),
    path("status/", views.sync_status, name="status"),
    path("orders/", views.order_documents, name="orders"),
    path("customers/", views.logged_in_customers, name="customers"),
]
