"""Lambda entry point for the employee API."""

import logging
from functools import lru_cache
from typing import Any, Dict

from employee_api.common import error_response, setup_logger
from employee_api.config import get_config
from employee_api.router import EmployeeRouter
from employee_api.service import create_employee_service

logger = setup_logger("employee_api")


@lru_cache(maxsize=1)
def get_router() -> EmployeeRouter:
    """Build the router once per process; warm invocations reuse it."""
    config = get_config()
    logging.getLogger("employee_api").setLevel(config.log_level.upper())
    return EmployeeRouter(create_employee_service(config=config))


def handler(event: Dict[str, Any], _context: Any) -> Dict[str, Any]:
    """
    Lambda handler for the ``/{proxy+}`` API Gateway integration.
    """
    logger.debug("Incoming event: %s", event)
    try:
        router = get_router()
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Failed to initialize the employee API")
        return error_response(500, f"Internal error: {e}")
    return router.dispatch(event)
