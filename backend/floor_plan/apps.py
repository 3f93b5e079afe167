from django.apps import AppConfig


class FloorPlanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "floor_plan"
    verbose_name = "Floor Plan"
