#!/usr/bin/env python3
"""
Local entry point for the employee API.

Usage:
    # Check that the database can be reached with the current .env
    python -m employee_api check-connection

    # Run a request through the Lambda handler
    python -m employee_api invoke GET employees/42
    python -m employee_api invoke POST employees --body '{"name": "Ana", ...}'
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from employee_api.common import setup_logger
from employee_api.database import ConnectionManager
from employee_api.exceptions import DatabaseConnectionError

logger = setup_logger("employee_api")


def build_event(
    method: str, path: str, body: Optional[str] = None
) -> Dict[str, Any]:
    """Build a minimal API Gateway proxy event."""
    proxy = path.lstrip("/")
    return {
        "httpMethod": method.upper(),
        "path": f"/{proxy}",
        "pathParameters": {"proxy": proxy},
        "body": body,
    }


def check_connection() -> int:
    """Open and close the shared database connection."""
    logger.info("Testing database connection...")
    manager = ConnectionManager()
    try:
        manager.acquire()
        logger.info("Database connection succeeded.")
        return 0
    except DatabaseConnectionError as e:
        logger.error("Database connection failed: %s", e)
        return 1
    finally:
        manager.shutdown()


def invoke(method: str, path: str, body: Optional[str]) -> int:
    """Run one request through the Lambda handler and print the response."""
    from employee_api.handler import handler

    response = handler(build_event(method, path, body), None)
    print(json.dumps(response, indent=2))
    return 0 if response["statusCode"] < 500 else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="employee_api",
        description="Run the employee API locally",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "check-connection",
        help="Connect to the database using the configured secret",
    )

    invoke_parser = subparsers.add_parser(
        "invoke",
        help="Send one request through the Lambda handler",
    )
    invoke_parser.add_argument("method", help="HTTP method, e.g. GET")
    invoke_parser.add_argument("path", help="Proxy path, e.g. employees/42")
    invoke_parser.add_argument(
        "--body",
        default=None,
        help="JSON request body",
    )

    args = parser.parse_args(argv)

    if args.command == "check-connection":
        return check_connection()
    return invoke(args.method, args.path, args.body)


if __name__ == "__main__":
    sys.exit(main())
