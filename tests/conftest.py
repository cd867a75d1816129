import pytest
from fastapi.testclient import TestClient

from function_app import app
from product_api.routes.product_route import get_products_table
from tests.fakes import FakeTableClient


@pytest.fixture
def table_client():
    return FakeTableClient()


@pytest.fixture
def client(table_client):
    app.dependency_overrides[get_products_table] = lambda: table_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def widget_payload():
    return {
        "PartitionKey": "p1",
        "RowKey": "r1",
        "Name": "Widget",
        "ProductDescription": "A widget",
        "Price": 9.99,
        "Category": "Tools",
        "ImageUrlPath": "/img/w.png",
    }
