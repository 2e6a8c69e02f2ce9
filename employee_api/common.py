"""Common utilities for the Lambda handler and the CLI."""

import json
from logging import INFO, Formatter, Logger, StreamHandler, getLogger
from typing import Any, Union

from employee_api.constants import RESPONSE_HEADERS


def setup_logger(name: str | None = None, level: Union[int, str] = INFO) -> Logger:
    """
    Set up a logger with consistent formatting for Lambda functions.

    Args:
        name: Optional logger name. If None, uses root logger.
        level: Logging level name or number

    Returns:
        Configured logger instance
    """
    logger = getLogger(name)
    logger.setLevel(level)

    if len(logger.handlers) == 0:
        handler = StreamHandler()
        handler.setFormatter(
            Formatter(
                "[%(levelname)s] %(asctime)s.%(msecs)dZ %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    return logger


def json_response(status_code: int, payload: Any) -> dict[str, Any]:
    """Build an API Gateway proxy response with a JSON body."""
    return {
        "statusCode": status_code,
        "headers": dict(RESPONSE_HEADERS),
        "body": json.dumps(payload),
    }


def message_response(status_code: int, message: str) -> dict[str, Any]:
    """Response whose body is ``{"message": ...}``."""
    return json_response(status_code, {"message": message})


def error_response(status_code: int, error: str) -> dict[str, Any]:
    """Response whose body is ``{"error": ...}``."""
    return json_response(status_code, {"error": error})
