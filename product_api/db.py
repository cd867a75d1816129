import asyncio
import os
from typing import Optional, Tuple

from azure.data.tables.aio import TableClient, TableServiceClient
from azure.identity.aio import DefaultAzureCredential

from product_api.logging_config import get_child_logger

logger = get_child_logger("db")

CONNECTION_STRING_SETTING = "AzureWebJobsStorage"
ENDPOINT_SETTING = "TABLES_ENDPOINT"
TABLE_NAME_SETTING = "PRODUCTS_TABLE_NAME"
DEFAULT_TABLE_NAME = "Products"

_service_client: Optional[TableServiceClient] = None
_credential: Optional[DefaultAzureCredential] = None
_table_client: Optional[TableClient] = None
_lock = asyncio.Lock()


def _create_service_client() -> Tuple[TableServiceClient, Optional[DefaultAzureCredential]]:
    connection_string = os.environ.get(CONNECTION_STRING_SETTING)
    if connection_string:
        logger.info("Creating TableServiceClient from connection string")
        return TableServiceClient.from_connection_string(conn_str=connection_string), None

    endpoint = os.environ.get(ENDPOINT_SETTING)
    if endpoint:
        # Managed identity for Azure deployments without a connection string
        logger.info("Creating TableServiceClient with DefaultAzureCredential")
        credential = DefaultAzureCredential()
        return TableServiceClient(endpoint=endpoint, credential=credential), credential

    raise ValueError(
        f"Either {CONNECTION_STRING_SETTING} or {ENDPOINT_SETTING} "
        "environment variable must be set"
    )


async def get_table_client() -> TableClient:
    """
    Get the process-wide client for the products table.

    The table is created if it does not exist the first time the client is
    acquired; later calls return the same client without touching the service.
    A failed creation closes the clients it opened and leaves nothing cached,
    so the next call starts over.
    """
    global _service_client, _credential, _table_client
    if _table_client is not None:
        return _table_client

    async with _lock:
        if _table_client is None:
            table_name = os.environ.get(TABLE_NAME_SETTING, DEFAULT_TABLE_NAME)
            service_client, credential = _create_service_client()
            try:
                table_client = await service_client.create_table_if_not_exists(
                    table_name=table_name
                )
            except Exception:
                logger.error(
                    "Could not create table client",
                    extra={"table_name": table_name},
                    exc_info=True,
                )
                await service_client.close()
                if credential is not None:
                    await credential.close()
                raise

            _service_client, _credential, _table_client = (
                service_client,
                credential,
                table_client,
            )
            logger.info("Table client ready", extra={"table_name": table_name})
    return _table_client


async def close_table_client() -> None:
    global _service_client, _credential, _table_client
    if _table_client is not None:
        await _table_client.close()
    if _service_client is not None:
        await _service_client.close()
    if _credential is not None:
        await _credential.close()
    _service_client = None
    _credential = None
    _table_client = None
