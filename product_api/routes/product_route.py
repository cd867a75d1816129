from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from azure.data.tables.aio import TableClient

from product_api.db import get_table_client
from product_api.ingest import ingest_product
from product_api.logging_config import tracer, get_child_logger

# Create a child logger for this module
logger = get_child_logger("routes.product")

FUNCTION_NAME = "AddProductFunction"

router = APIRouter(prefix="/api", tags=["products"])


async def get_products_table() -> TableClient:
    return await get_table_client()


@router.post(f"/{FUNCTION_NAME}", response_class=PlainTextResponse)
async def add_product_function(
    request: Request,
    table_client: TableClient = Depends(get_products_table),
) -> PlainTextResponse:
    with tracer.start_as_current_span("api_add_product") as span:
        logger.info(f"{FUNCTION_NAME} processed a request for a product")

        body = await request.body()
        result = await ingest_product(table_client, body)

        span.set_attribute("ingest.outcome", result.outcome.value)
        span.set_attribute("http.status_code", result.status_code)

        return PlainTextResponse(content=result.message, status_code=result.status_code)
