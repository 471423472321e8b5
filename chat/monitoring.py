"""
Sentry monitoring for the outbound LLM call.
Wraps the call in a span, leaves breadcrumbs and logs slow calls locally.
"""

import functools
import logging
import time
from typing import Callable, Dict, Optional

import sentry_sdk

logger = logging.getLogger(__name__)

# Performance thresholds (in seconds)
SLOW_CALL_THRESHOLD = 10.0
CRITICAL_CALL_THRESHOLD = 30.0

MODULE = "chat"


def add_breadcrumb(message: str, level: str = "info", data: Optional[Dict] = None):
    sentry_sdk.add_breadcrumb(category=f"{MODULE}.llm", message=message, level=level, data=data or {})


def log_call_duration(operation: str, execution_time: float) -> str:
    """Log the duration at a level picked from the thresholds and return that level."""
    if execution_time > CRITICAL_CALL_THRESHOLD:
        logger.error("CRITICAL: %s took %.3fs", operation, execution_time)
        return "error"
    if execution_time > SLOW_CALL_THRESHOLD:
        logger.warning("SLOW: %s took %.3fs", operation, execution_time)
        return "warning"
    logger.info("%s completed in %.3fs", operation, execution_time)
    return "info"


def track_llm_call(operation_name: str):
    """
    Decorator for functions that talk to the LLM provider.

    Usage:
        @track_llm_call("langflow.run")
        def post(self, payload):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            add_breadcrumb(f"Starting {operation_name}", data={"function": func.__name__})

            with sentry_sdk.start_span(op=f"{MODULE}.llm", name=operation_name) as span:
                span.set_tag("operation", operation_name)
                start_time = time.time()
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    execution_time = time.time() - start_time
                    span.set_data("execution_time", execution_time)
                    span.set_data("error_type", type(e).__name__)
                    add_breadcrumb(f"Error in {operation_name}: {e}", level="error")
                    logger.warning(
                        "%s failed after %.3fs [error=%s: %s]",
                        operation_name, execution_time, type(e).__name__, e,
                    )
                    raise

                execution_time = time.time() - start_time
                span.set_data("execution_time", execution_time)
                log_call_duration(operation_name, execution_time)
                add_breadcrumb(f"Completed {operation_name} in {execution_time:.3f}s")
                return result
        return wrapper
    return decorator
