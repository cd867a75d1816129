import json
from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from product_api.exceptions import InvalidProductError, MalformedProductError

INVALID_PRODUCT_MESSAGE = "Invalid product data."

# Assigned by the table service on write, never sent back to it
SERVICE_FIELDS = {"timestamp", "etag"}


class Product(BaseModel):
    """
    A product record as stored in the Products table.

    Field names follow the table entity's PascalCase property names on the
    wire; Python code uses the snake_case attributes.
    """

    partition_key: Optional[str] = Field(default=None, alias="PartitionKey")
    row_key: Optional[str] = Field(default=None, alias="RowKey")
    timestamp: Optional[datetime] = Field(default=None, alias="Timestamp")
    etag: Optional[str] = Field(default=None, alias="ETag")

    name: Optional[str] = Field(default=None, alias="Name")
    product_description: Optional[str] = Field(default=None, alias="ProductDescription")
    price: float = Field(default=0.0, alias="Price")  # non-nullable, 0.0 when omitted
    category: Optional[str] = Field(default=None, alias="Category")
    image_url_path: Optional[str] = Field(default=None, alias="ImageUrlPath")

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    def to_entity(self) -> Dict[str, Any]:
        """
        Table entity for this product: keys, Price and every non-null text field.
        """
        return self.model_dump(by_alias=True, exclude_none=True, exclude=SERVICE_FIELDS)

    def success_message(self) -> str:
        return f"Product {self.name or ''} added successfully."


def parse_product(body: Union[str, bytes]) -> Product:
    """
    Deserialize a request body into a Product.

    Raises:
        InvalidProductError: body is empty, the JSON literal null, or the
            product lacks PartitionKey or RowKey
        MalformedProductError: body is not UTF-8 JSON, not a JSON object,
            or a field has the wrong type
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedProductError(
                "Request body is not valid UTF-8.", original_exception=e
            ) from e

    if not body.strip():
        raise InvalidProductError(INVALID_PRODUCT_MESSAGE)

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedProductError(
            f"Request body is not valid JSON: {e.msg}", original_exception=e
        ) from e

    if data is None:
        raise InvalidProductError(INVALID_PRODUCT_MESSAGE)
    if not isinstance(data, dict):
        raise MalformedProductError(
            f"Product payload must be a JSON object, got {type(data).__name__}."
        )

    try:
        product = Product.model_validate(data)
    except ValidationError as e:
        raise MalformedProductError(
            f"Product payload has invalid fields: {e.error_count()} error(s)",
            original_exception=e,
        ) from e

    if product.partition_key is None or product.row_key is None:
        raise InvalidProductError(INVALID_PRODUCT_MESSAGE)

    return product
