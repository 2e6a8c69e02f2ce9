"""
Service layer for employee operations.

This module provides the operations the router dispatches to: it runs the
validators, then delegates to the store gateway or the salary aggregator.
"""

import logging
from typing import Optional

from employee_api.aggregation import TopSalaryAggregator
from employee_api.config import EmployeeApiConfig, get_config
from employee_api.database import ConnectionManager
from employee_api.repository import EmployeeRepository
from employee_api.storage import EmployeeFileReader
from employee_api.types import Employee
from employee_api.validators import validate_employee, validate_employee_id

logger = logging.getLogger(__name__)


class EmployeeService:
    """
    Service layer for employee CRUD and the top-salary report.

    Writes are validated before they reach the store; reads and deletes only
    check the id.
    """

    def __init__(
        self,
        repository: EmployeeRepository,
        aggregator: TopSalaryAggregator,
    ):
        """
        Initialize the EmployeeService.

        Args:
            repository: Gateway to the employee store
            aggregator: Top-salary report over the S3 files
        """
        self.repository = repository
        self.aggregator = aggregator

    def create_employee(self, employee: Employee) -> int:
        """
        Validate and insert a new employee.

        Returns:
            The id assigned by the store

        Raises:
            EmployeeValidationError: If the record is invalid
            StoreError: If the insert fails
        """
        validate_employee(employee)
        logger.info("Creating employee: %s", employee.name)
        return self.repository.create_employee(employee)

    def list_employees(self) -> list[Employee]:
        """Return every stored employee."""
        logger.info("Listing employees")
        return self.repository.list_employees()

    def get_employee(self, employee_id: int) -> Employee:
        """
        Get an employee by id.

        Raises:
            InvalidEmployeeIdError: If the id is not positive
            EmployeeNotFoundError: If no employee has the id
        """
        validate_employee_id(employee_id)
        logger.info("Getting employee with id: %s", employee_id)
        return self.repository.get_employee(employee_id)

    def update_employee(self, employee: Employee) -> None:
        """Validate and overwrite an existing employee."""
        validate_employee_id(employee.id)
        validate_employee(employee)
        logger.info("Updating employee with id: %s", employee.id)
        self.repository.update_employee(employee)

    def delete_employee(self, employee_id: int) -> None:
        """Delete an employee by id."""
        validate_employee_id(employee_id)
        logger.info("Deleting employee with id: %s", employee_id)
        self.repository.delete_employee(employee_id)

    def get_top_salaries(self) -> list[Employee]:
        """Return the highest-paid employees found in the S3 files."""
        return self.aggregator.top_salaries()


def create_employee_service(
    config: Optional[EmployeeApiConfig] = None,
    connections: Optional[ConnectionManager] = None,
    reader: Optional[EmployeeFileReader] = None,
) -> EmployeeService:
    """
    Factory function to wire an EmployeeService from configuration.

    Args:
        config: Configuration object (optional, defaults to environment config)
        connections: Pre-configured connection manager (optional)
        reader: Pre-configured S3 file reader (optional)
    """
    config = config or get_config()
    connections = connections or ConnectionManager(config=config)
    reader = reader or EmployeeFileReader(
        bucket=config.s3_bucket, region=config.storage_region
    )
    return EmployeeService(
        repository=EmployeeRepository(connections),
        aggregator=TopSalaryAggregator(reader),
    )
