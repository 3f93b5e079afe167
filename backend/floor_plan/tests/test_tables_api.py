"""
API tests for the read-only floor plan endpoints.
"""
import pytest

from floor_plan.models import Table


@pytest.mark.django_db
class TestTablesAPI:

    def test_list_tables_with_floor_and_order(self, api_client, dine_in_order, first_floor):
        Table.objects.create(number="12", floor=first_floor)

        response = api_client.get("/api/tables/")

        assert response.status_code == 200
        by_number = {table["number"]: table for table in response.data}
        assert by_number["5"]["status"] == "occupied"
        assert by_number["5"]["floor_name"] == "Ground Floor"
        assert by_number["5"]["current_order"] == dine_in_order.id
        assert by_number["12"]["status"] == "free"
        assert by_number["12"]["current_order"] is None

    def test_filter_by_status(self, api_client, dine_in_order, first_floor):
        Table.objects.create(number="12", floor=first_floor)

        response = api_client.get("/api/tables/", {"status": "free"})

        assert [table["number"] for table in response.data] == ["12"]

    def test_table_without_floor(self, api_client):
        table = Table.objects.create(number="Bar-1")

        response = api_client.get(f"/api/tables/{table.id}/")

        assert response.data["floor"] is None
        assert response.data["floor_name"] is None

    def test_tables_are_read_only(self, api_client, table):
        response = api_client.patch(f"/api/tables/{table.id}/", {"status": "reserved"}, format="json")

        assert response.status_code == 405


@pytest.mark.django_db
class TestTableModel:

    def test_attach_and_release(self, table):
        from orders.models import Order

        order = Order.objects.create(table=table)
        table.attach_order(order)
        assert table.status == Table.TableStatus.OCCUPIED

        table.release()
        table.refresh_from_db()
        assert table.status == Table.TableStatus.FREE
        assert table.current_order is None
