"""
Request routing for the employee API.

API Gateway proxies every ``/{proxy+}`` request to one Lambda. The router
matches the proxy path against an ordered route table; the first route whose
pattern matches wins, even when it has no handler for the request method.

Route shapes, in precedence order:
1. ``employees/{id}``        GET, PUT, DELETE
2. ``employees``             GET, POST
3. ``employees/salary/top``  GET
"""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from employee_api.common import error_response, json_response, message_response
from employee_api.exceptions import (
    EmployeeNotFoundError,
    EmployeeValidationError,
    InvalidRequestBodyError,
    MalformedIdError,
    RouteNotFoundError,
)
from employee_api.service import EmployeeService
from employee_api.types import Employee

logger = logging.getLogger(__name__)

EMPLOYEE_ID_PATTERN = re.compile(r"[0-9]+")

ROUTE_NOT_FOUND_MESSAGE = "Route or method not found."
MALFORMED_ID_MESSAGE = "Malformed URL or missing employee id."


@dataclass
class ProxyRequest:
    """The parts of an API Gateway proxy event the router needs."""

    path: str
    method: str
    body: Optional[str] = None
    path_params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> ProxyRequest:
        """
        Extract path, method and body from a proxy event.

        The path is taken from ``pathParameters.proxy`` and falls back to
        ``path`` without its leading slash.
        """
        path_parameters = event.get("pathParameters") or {}
        proxy_path = path_parameters.get("proxy")
        if proxy_path is None:
            proxy_path = (event.get("path") or "").lstrip("/")

        body = event.get("body")
        if body is not None and event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")

        return cls(
            path=proxy_path,
            method=(event.get("httpMethod") or "").upper(),
            body=body,
        )


Handler = Callable[[ProxyRequest], dict[str, Any]]


@dataclass(frozen=True)
class Operation:
    """A handler plus the phrase used in its error messages."""

    handler: Handler
    action: str


@dataclass(frozen=True)
class Route:
    """One route shape and the operations it supports per HTTP method."""

    name: str
    pattern: re.Pattern[str]
    operations: Mapping[str, Operation]

    def match(self, path: str) -> Optional[re.Match[str]]:
        return self.pattern.fullmatch(path)


class EmployeeRouter:
    """
    Dispatches proxy events to the employee operations.

    Every outcome, including failures, becomes a response envelope with a
    status code, a JSON body and a JSON content type.

    Example:
        ```python
        router = EmployeeRouter(create_employee_service())
        response = router.dispatch(
            {"httpMethod": "GET", "pathParameters": {"proxy": "employees/42"}}
        )
        ```
    """

    def __init__(self, service: EmployeeService):
        self.service = service
        self.routes: tuple[Route, ...] = (
            Route(
                name="employee",
                pattern=re.compile(r"employees/(?P<id>[^/]*)"),
                operations={
                    "GET": Operation(
                        self._get_employee, "fetching employee by id"
                    ),
                    "PUT": Operation(
                        self._update_employee, "updating employee"
                    ),
                    "DELETE": Operation(
                        self._delete_employee, "deleting employee"
                    ),
                },
            ),
            Route(
                name="employees",
                pattern=re.compile(r"employees"),
                operations={
                    "GET": Operation(
                        self._list_employees, "fetching employees"
                    ),
                    "POST": Operation(
                        self._create_employee, "creating employee"
                    ),
                },
            ),
            Route(
                name="top_salaries",
                pattern=re.compile(r"employees/salary/top"),
                operations={
                    "GET": Operation(
                        self._top_salaries,
                        "fetching employees with the highest salaries",
                    ),
                },
            ),
        )

    def resolve(self, request: ProxyRequest) -> Operation:
        """
        Find the operation for a request.

        Populates ``request.path_params`` from the matched pattern.

        Raises:
            RouteNotFoundError: If no route matches, or the first matching
                route has no operation for the method
        """
        for route in self.routes:
            match = route.match(request.path)
            if match is None:
                continue

            operation = route.operations.get(request.method)
            if operation is None:
                break

            request.path_params = {
                key: value
                for key, value in match.groupdict().items()
                if value is not None
            }
            return operation

        raise RouteNotFoundError(
            f"No route for {request.method} {request.path!r}"
        )

    def dispatch(self, event: Mapping[str, Any]) -> dict[str, Any]:
        """Route one proxy event and return the response envelope."""
        try:
            request = ProxyRequest.from_event(event)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected error reading the request")
            return error_response(500, f"Internal error: {e}")

        logger.info(
            "[Init] Request received - path: %s - method: %s",
            request.path,
            request.method,
        )
        response = self._dispatch(request)
        logger.info("[End] Responding with status %s", response["statusCode"])
        return response

    def _dispatch(self, request: ProxyRequest) -> dict[str, Any]:
        try:
            operation = self.resolve(request)
        except RouteNotFoundError as e:
            logger.warning("%s", e)
            return error_response(404, ROUTE_NOT_FOUND_MESSAGE)

        try:
            return operation.handler(request)
        except MalformedIdError as e:
            logger.warning("Malformed employee id in path %r", request.path)
            return error_response(400, str(e))
        except EmployeeValidationError as e:
            logger.warning("Rejected request while %s: %s", operation.action, e)
            return error_response(400, str(e))
        except EmployeeNotFoundError as e:
            logger.info("%s", e)
            return error_response(200, str(e))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.exception("Error %s", operation.action)
            return error_response(500, f"Error {operation.action}: {e}")

    # Path and body helpers

    @staticmethod
    def _employee_id(request: ProxyRequest) -> int:
        raw_id = request.path_params.get("id", "")
        if not EMPLOYEE_ID_PATTERN.fullmatch(raw_id):
            raise MalformedIdError(MALFORMED_ID_MESSAGE)
        return int(raw_id)

    @staticmethod
    def _employee_body(request: ProxyRequest) -> Employee:
        if request.body is None or not request.body.strip():
            raise InvalidRequestBodyError("Request body is required.")
        try:
            return Employee.model_validate_json(request.body)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "body"
            raise InvalidRequestBodyError(
                f"Invalid employee payload at {location}: {first['msg']}"
            ) from e

    # Operations

    def _list_employees(self, request: ProxyRequest) -> dict[str, Any]:
        employees = self.service.list_employees()
        return json_response(200, [e.to_json_dict() for e in employees])

    def _create_employee(self, request: ProxyRequest) -> dict[str, Any]:
        employee = self._employee_body(request)
        employee_id = self.service.create_employee(employee)
        return json_response(
            201,
            {"message": "Employee created successfully.", "id": employee_id},
        )

    def _get_employee(self, request: ProxyRequest) -> dict[str, Any]:
        employee_id = self._employee_id(request)
        employee = self.service.get_employee(employee_id)
        return json_response(200, employee.to_json_dict())

    def _update_employee(self, request: ProxyRequest) -> dict[str, Any]:
        employee_id = self._employee_id(request)
        employee = self._employee_body(request)
        employee = employee.model_copy(update={"id": employee_id})
        self.service.update_employee(employee)
        return message_response(200, "Employee updated.")

    def _delete_employee(self, request: ProxyRequest) -> dict[str, Any]:
        employee_id = self._employee_id(request)
        self.service.delete_employee(employee_id)
        return message_response(200, "Employee deleted.")

    def _top_salaries(self, request: ProxyRequest) -> dict[str, Any]:
        employees = self.service.get_top_salaries()
        return json_response(200, [e.to_json_dict() for e in employees])
