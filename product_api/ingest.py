from enum import Enum
from typing import Union

from azure.data.tables.aio import TableClient
from pydantic import BaseModel, ConfigDict

from product_api.crud.product_crud import add_product
from product_api.exceptions import (
    DatabaseError,
    InvalidProductError,
    MalformedProductError,
)
from product_api.logging_config import get_child_logger, tracer
from product_api.models.product import INVALID_PRODUCT_MESSAGE, parse_product

logger = get_child_logger("ingest")

MALFORMED_PRODUCT_MESSAGE = "Malformed product data."
STORAGE_FAILURE_MESSAGE = "A database error occurred."


class IngestOutcome(str, Enum):
    """
    Terminal outcomes of handling one ingest request.
    SUCCESS: the product was stored
    INVALID_PAYLOAD: no product in the body, or its storage keys are missing
    MALFORMED_INPUT: the body could not be deserialized
    STORAGE_FAILURE: the insert failed (duplicate key, service errors)
    """

    SUCCESS = "success"
    INVALID_PAYLOAD = "invalid_payload"
    MALFORMED_INPUT = "malformed_input"
    STORAGE_FAILURE = "storage_failure"


OUTCOME_STATUS_CODES = {
    IngestOutcome.SUCCESS: 200,
    IngestOutcome.INVALID_PAYLOAD: 400,
    IngestOutcome.MALFORMED_INPUT: 500,
    IngestOutcome.STORAGE_FAILURE: 500,
}


class IngestResult(BaseModel):
    outcome: IngestOutcome
    message: str

    model_config = ConfigDict(frozen=True)

    @property
    def status_code(self) -> int:
        return OUTCOME_STATUS_CODES[self.outcome]


async def ingest_product(table_client: TableClient, body: Union[str, bytes]) -> IngestResult:
    """
    Parse a request body and insert the product it describes.

    Every failure of the parse and insert steps is turned into an
    IngestResult; only programming errors escape.
    """
    with tracer.start_as_current_span("ingest_product") as span:
        try:
            product = parse_product(body)
        except InvalidProductError:
            span.set_attribute("ingest.outcome", IngestOutcome.INVALID_PAYLOAD.value)
            logger.info("Rejected request without product data")
            return IngestResult(
                outcome=IngestOutcome.INVALID_PAYLOAD, message=INVALID_PRODUCT_MESSAGE
            )
        except MalformedProductError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "malformed_input")
            span.set_attribute("ingest.outcome", IngestOutcome.MALFORMED_INPUT.value)
            logger.error(
                "Malformed product payload",
                extra={"error": str(e)},
                exc_info=e.original_exception,
            )
            return IngestResult(
                outcome=IngestOutcome.MALFORMED_INPUT, message=MALFORMED_PRODUCT_MESSAGE
            )

        try:
            await add_product(table_client, product)
        except DatabaseError as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("ingest.outcome", IngestOutcome.STORAGE_FAILURE.value)
            logger.error("Storage failure while ingesting product", extra={"error": str(e)})
            return IngestResult(
                outcome=IngestOutcome.STORAGE_FAILURE, message=STORAGE_FAILURE_MESSAGE
            )

        span.set_attribute("ingest.outcome", IngestOutcome.SUCCESS.value)
        return IngestResult(outcome=IngestOutcome.SUCCESS, message=product.success_message())
