import json

import pytest

from product_api.exceptions import InvalidProductError, MalformedProductError
from product_api.models.product import Product, parse_product


def test_parse_product_reads_pascal_case_fields(widget_payload):
    product = parse_product(json.dumps(widget_payload))

    assert product.partition_key == "p1"
    assert product.row_key == "r1"
    assert product.name == "Widget"
    assert product.product_description == "A widget"
    assert product.price == 9.99
    assert product.category == "Tools"
    assert product.image_url_path == "/img/w.png"


def test_parse_product_accepts_utf8_bytes():
    product = parse_product('{"PartitionKey": "p", "RowKey": "r", "Name": "Café"}'.encode("utf-8"))
    assert product.name == "Café"


@pytest.mark.parametrize("body", ["", "   ", "null", b"", b" null "])
def test_parse_product_rejects_missing_product(body):
    with pytest.raises(InvalidProductError, match="Invalid product data."):
        parse_product(body)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"RowKey": "r1", "Name": "Widget"},
        {"PartitionKey": "p1", "Name": "Widget"},
        {"PartitionKey": None, "RowKey": "r1"},
    ],
)
def test_parse_product_requires_storage_keys(payload):
    with pytest.raises(InvalidProductError):
        parse_product(json.dumps(payload))


@pytest.mark.parametrize(
    "body",
    [
        '{"PartitionKey": "p1", "RowKey": "r1"',
        "not json",
        "[]",
        "42",
        '"a string"',
        '{"PartitionKey": "p1", "RowKey": "r1", "Price": "cheap"}',
        b"\xff\xfe{}",
    ],
)
def test_parse_product_flags_malformed_input(body):
    with pytest.raises(MalformedProductError):
        parse_product(body)


def test_parse_product_ignores_unknown_fields():
    product = parse_product('{"PartitionKey": "p", "RowKey": "r", "Colour": "red"}')
    assert "Colour" not in product.to_entity()


def test_to_entity_drops_service_fields_and_nulls():
    product = Product.model_validate(
        {
            "PartitionKey": "p1",
            "RowKey": "r1",
            "Timestamp": "2024-05-01T10:00:00+00:00",
            "ETag": 'W/"datetime\'2024\'"',
            "Name": "Widget",
            "Price": 1.5,
        }
    )

    assert product.to_entity() == {
        "PartitionKey": "p1",
        "RowKey": "r1",
        "Name": "Widget",
        "Price": 1.5,
    }


def test_success_message_uses_name():
    assert Product(PartitionKey="p", RowKey="r", Name="Widget").success_message() == (
        "Product Widget added successfully."
    )
    assert Product(PartitionKey="p", RowKey="r").success_message() == (
        "Product  added successfully."
    )


def test_parse_product_converts_numeric_text_fields():
    product = parse_product('{"PartitionKey": 1, "RowKey": 2.5, "Name": 123}')

    assert product.partition_key == "1"
    assert product.row_key == "2.5"
    assert product.name == "123"
    assert product.success_message() == "Product 123 added successfully."


def test_missing_price_is_stored_as_zero():
    product = parse_product('{"PartitionKey": "p1", "RowKey": "r1", "Name": "Widget"}')

    assert product.price == 0.0
    assert product.to_entity() == {
        "PartitionKey": "p1",
        "RowKey": "r1",
        "Name": "Widget",
        "Price": 0.0,
    }


def test_null_price_is_malformed():
    with pytest.raises(MalformedProductError):
        parse_product('{"PartitionKey": "p1", "RowKey": "r1", "Price": null}')
