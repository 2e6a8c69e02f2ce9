"""
Employee API - serverless CRUD for employee records.

This package implements an AWS Lambda behind an API Gateway proxy route.
Employee rows live in MySQL (reached through stored procedures) and a
read-only report ranks the salaries found in JSON files in S3.

Example:
    ```python
    from employee_api import EmployeeRouter, create_employee_service

    router = EmployeeRouter(create_employee_service())
    response = router.dispatch(
        {"httpMethod": "GET", "pathParameters": {"proxy": "employees"}}
    )
    ```
"""

from employee_api.aggregation import TopSalaryAggregator
from employee_api.config import EmployeeApiConfig, get_config, running_on_lambda
from employee_api.database import ConnectionManager
from employee_api.exceptions import (
    DatabaseConnectionError,
    EmployeeApiError,
    EmployeeNotFoundError,
    EmployeeValidationError,
    InvalidEmployeeIdError,
    InvalidRequestBodyError,
    MalformedIdError,
    RouteError,
    RouteNotFoundError,
    StoreError,
)
from employee_api.repository import EmployeeRepository
from employee_api.router import EmployeeRouter
from employee_api.service import EmployeeService, create_employee_service
from employee_api.storage import EmployeeFileReader
from employee_api.types import Employee
from employee_api.validators import validate_employee, validate_employee_id

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "EmployeeRouter",
    "EmployeeService",
    "create_employee_service",
    # Components
    "ConnectionManager",
    "EmployeeRepository",
    "EmployeeFileReader",
    "TopSalaryAggregator",
    # Config
    "EmployeeApiConfig",
    "get_config",
    "running_on_lambda",
    # Model & validation
    "Employee",
    "validate_employee",
    "validate_employee_id",
    # Errors
    "EmployeeApiError",
    "EmployeeValidationError",
    "InvalidEmployeeIdError",
    "InvalidRequestBodyError",
    "StoreError",
    "DatabaseConnectionError",
    "EmployeeNotFoundError",
    "RouteError",
    "MalformedIdError",
    "RouteNotFoundError",
]
