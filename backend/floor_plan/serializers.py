from rest_framework import serializers

from .models import Floor, Table


class FloorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Floor
        fields = ["id", "name", "display_order"]


class TableSerializer(serializers.ModelSerializer):
    floor_name = serializers.CharField(source="floor.name", read_only=True, default=None)

    class Meta:
        model = Table
        fields = [
            "id",
            "number",
            "seats",
            "status",
            "floor",
            "floor_name",
            "current_order",
        ]
