import logging
import os
import opentelemetry.trace
from azure.monitor.opentelemetry import configure_azure_monitor

LOGGER_NAME = "product_api"
LOG_LEVEL_SETTING = "PRODUCT_API_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def enable_azure_monitor() -> bool:
    """
    Send product_api logs and traces to Application Insights.

    Only done under the Functions host, where FUNCTIONS_WORKER_RUNTIME is set
    and the Application Insights connection string is provided by the app
    settings. Returns whether the exporter was configured.
    """
    if not os.environ.get("FUNCTIONS_WORKER_RUNTIME"):
        return False
    try:
        configure_azure_monitor(logger_name=LOGGER_NAME)
    except Exception as e:
        logging.getLogger(LOGGER_NAME).error(f"Error configuring Azure Monitor: {str(e)}")
        return False
    return True


def configure_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Set the level from PRODUCT_API_LOG_LEVEL and attach one console handler."""
    configured = logging.getLogger(name)
    configured.setLevel(os.environ.get(LOG_LEVEL_SETTING, "INFO").upper())

    if not configured.handlers:
        # The Functions host log stream captures stderr
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        configured.addHandler(console_handler)
    return configured


logger = configure_logger()
enable_azure_monitor()

tracer = opentelemetry.trace.get_tracer(LOGGER_NAME)


def get_child_logger(name):
    """Get a child logger with the given name."""
    return logger.getChild(name)
