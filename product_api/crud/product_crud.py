from typing import Any, Dict

from azure.core.exceptions import HttpResponseError, ResourceExistsError
from azure.data.tables.aio import TableClient

from product_api.models.product import Product
from product_api.exceptions import ProductAlreadyExistsError, DatabaseError
from product_api.logging_config import get_child_logger, tracer

# Create a child logger for this module
logger = get_child_logger("crud.product")


async def add_product(table_client: TableClient, product: Product) -> Dict[str, Any]:
    """
    Insert a product as a new entity in the products table.

    Args:
        table_client: Table client for the products table
        product: Product to insert; PartitionKey and RowKey must be set

    Returns:
        Response metadata from the service (etag, date, ...)

    Raises:
        ProductAlreadyExistsError: If an entity with the same keys exists
        DatabaseError: If the storage operation fails
    """
    with tracer.start_as_current_span("add_product") as span:
        entity = product.to_entity()

        span.set_attribute("product.partition_key", product.partition_key)
        span.set_attribute("product.row_key", product.row_key)

        logger.info(
            "Adding product",
            extra={
                "partition_key": product.partition_key,
                "row_key": product.row_key,
                "product_name": product.name,
            },
        )

        try:
            metadata = await table_client.create_entity(entity=entity)
            logger.info(
                "Product added successfully",
                extra={
                    "partition_key": product.partition_key,
                    "row_key": product.row_key,
                    "etag": metadata.get("etag"),
                },
            )
            return metadata
        except ResourceExistsError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "resource_exists")

            logger.warning(
                "Product already exists",
                extra={"partition_key": product.partition_key, "row_key": product.row_key},
            )
            raise ProductAlreadyExistsError(
                f"Product with PartitionKey '{product.partition_key}' "
                f"and RowKey '{product.row_key}' already exists",
                original_exception=e,
            ) from e
        except HttpResponseError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "table_http_error")
            span.set_attribute("error.status_code", e.status_code or 0)

            logger.error(
                "Table storage error while adding product",
                extra={
                    "status_code": e.status_code,
                    "error_message": e.message,
                    "partition_key": product.partition_key,
                    "row_key": product.row_key,
                },
                exc_info=True,
            )
            raise DatabaseError(
                f"Table storage error while adding product: Status Code {e.status_code}, Message: {e.message}",
                original_exception=e,
            ) from e
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)

            logger.error(
                "Unexpected error while adding product",
                extra={
                    "error_type": type(e).__name__,
                    "partition_key": product.partition_key,
                    "row_key": product.row_key,
                },
                exc_info=True,
            )
            raise DatabaseError(
                "An unexpected error occurred during database operation.",
                original_exception=e,
            ) from e
