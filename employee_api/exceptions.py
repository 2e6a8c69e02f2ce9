"""Custom exceptions for the employee API."""

from typing import Optional


class EmployeeApiError(Exception):
    """Base exception for all employee_api errors."""


# Input validation
class EmployeeValidationError(EmployeeApiError, ValueError):
    """Raised when an employee record or request input is invalid."""


class InvalidEmployeeIdError(EmployeeValidationError):
    """Raised when an employee id is not a positive integer."""


class InvalidRequestBodyError(EmployeeValidationError):
    """Raised when a request body cannot be parsed into an employee."""


# Persistence
class StoreError(EmployeeApiError):
    """
    Raised when a round trip to the employee store fails.

    The underlying driver exception is kept on ``cause`` and chained as
    ``__cause__`` by the raising code.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DatabaseConnectionError(StoreError):
    """Raised when the shared database connection cannot be established."""


class EmployeeNotFoundError(EmployeeApiError):
    """Raised when no employee exists for the requested id."""

    def __init__(self, employee_id: int):
        super().__init__(f"No employee found with id: {employee_id}")
        self.employee_id = employee_id


# Routing
class RouteError(EmployeeApiError):
    """Base exception for requests that cannot be routed."""


class MalformedIdError(RouteError):
    """Raised when the id segment of an ``employees/{id}`` path is not numeric."""


class RouteNotFoundError(RouteError):
    """Raised when no route shape or method matches the request."""
