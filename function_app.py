from contextlib import asynccontextmanager

import azure.functions as func
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from azure.core import exceptions as azure_exceptions

from product_api.db import close_table_client
from product_api.logging_config import logger, tracer
from product_api.ingest import STORAGE_FAILURE_MESSAGE
from product_api.routes.product_route import FUNCTION_NAME, router as product_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await close_table_client()


app = FastAPI(
    title="Product Ingest API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.exception_handler(azure_exceptions.HttpResponseError)
async def handle_table_http_error(
    request: Request, exc: azure_exceptions.HttpResponseError
):
    # Raised while acquiring the table client, before any ingest outcome exists
    with tracer.start_as_current_span("handle_table_error") as span:
        span.set_attribute("error", True)
        span.set_attribute("error.type", "table_http_error")
        span.set_attribute("error.status_code", exc.status_code or 0)

        logger.error(
            "Table storage HTTP error",
            extra={
                "status_code": exc.status_code,
                "error_message": str(exc),
                "path": request.url.path,
            },
        )
        return PlainTextResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=STORAGE_FAILURE_MESSAGE,
        )


app.include_router(product_router)

function_app = func.FunctionApp()


async def handle_request(req: func.HttpRequest) -> func.HttpResponse:
    """Run one host request through the FastAPI app; uncaught errors become a 500."""
    with tracer.start_as_current_span("process_request") as span:
        span.set_attribute("http.method", req.method)
        span.set_attribute("http.url", str(req.url))

        logger.info(
            f"Processing {req.method} request",
            extra={"method": req.method, "path": str(req.url)},
        )

        try:
            response = await func.AsgiMiddleware(app).handle_async(req)
            span.set_attribute("http.status_code", response.status_code)
            return response
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("error.message", str(e))

            logger.error(
                f"Error processing request: {str(e)}",
                extra={"error_type": type(e).__name__}
            )
            return func.HttpResponse(
                body=str(e),
                status_code=500
            )


@function_app.function_name(name=FUNCTION_NAME)
@function_app.route(
    route=FUNCTION_NAME, methods=["POST"], auth_level=func.AuthLevel.FUNCTION
)
async def main(req: func.HttpRequest) -> func.HttpResponse:
    """Azure Functions entry-point routed through FastAPI."""
    return await handle_request(req)
