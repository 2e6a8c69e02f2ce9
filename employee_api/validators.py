"""
Validators for employee records.

These run before every create and update, and never touch the store:
1. Every text field must be present and non-blank
2. Salary must be a finite, strictly positive number
3. Ids taken from routes must be positive integers
"""

import logging
import math
from typing import Any, Optional

from employee_api.exceptions import (
    EmployeeValidationError,
    InvalidEmployeeIdError,
)
from employee_api.types import Employee

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_employee(employee: Employee) -> None:
    """
    Check the structural invariants of an employee before persistence.

    Checks run in a fixed order and the first failure is reported; a record
    failing any check is rejected as a whole.

    Args:
        employee: The record to validate

    Raises:
        EmployeeValidationError: If any text field is blank or salary is not
            a finite number above 0
    """
    if _is_blank(employee.name):
        raise EmployeeValidationError("Employee name must not be empty.")
    if _is_blank(employee.position):
        raise EmployeeValidationError("Employee position must not be empty.")
    if (
        employee.salary is None
        or not math.isfinite(employee.salary)
        or employee.salary <= 0
    ):
        raise EmployeeValidationError("Salary must be greater than 0.")
    if _is_blank(employee.hire_date):
        raise EmployeeValidationError("Hire date must not be empty.")
    if _is_blank(employee.department):
        raise EmployeeValidationError("Department must not be empty.")


def validate_employee_id(employee_id: Any) -> None:
    """
    Ensure an employee id is a positive integer.

    Raises:
        InvalidEmployeeIdError: If the id is not an int or is <= 0
    """
    if (
        isinstance(employee_id, bool)
        or not isinstance(employee_id, int)
        or employee_id <= 0
    ):
        logger.debug("Rejected employee id: %r", employee_id)
        raise InvalidEmployeeIdError(
            "Employee id must be a positive number."
        )
