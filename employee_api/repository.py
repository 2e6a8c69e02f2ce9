"""
Employee store gateway.

Each operation is one stored-procedure call on the shared connection, run in
its own transaction. Driver failures are wrapped in ``StoreError``.
"""

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from employee_api.constants import (
    SP_CREATE_EMPLOYEE,
    SP_DELETE_EMPLOYEE,
    SP_GET_ALL_EMPLOYEES,
    SP_GET_EMPLOYEE_BY_ID,
    SP_UPDATE_EMPLOYEE,
)
from employee_api.database import ConnectionManager
from employee_api.exceptions import EmployeeNotFoundError, StoreError
from employee_api.types import Employee

logger = logging.getLogger(__name__)


def _write_params(employee: Employee) -> dict[str, Any]:
    return {
        "name": employee.name,
        "position": employee.position,
        "salary": employee.salary,
        "hire_date": employee.hire_date,
        "department": employee.department,
    }


class EmployeeRepository:
    """Data access for the employee table through its stored procedures."""

    def __init__(self, connections: ConnectionManager):
        self._connections = connections

    def _run(
        self, statement: str, params: dict[str, Any], action: str
    ) -> list[Any]:
        """
        Execute one statement and return its rows as mappings.

        Statements that return no rows yield an empty list.
        """
        try:
            with self._connections.connection() as conn:
                return self._execute(conn, statement, params)
        except SQLAlchemyError as e:
            logger.error("[DB] Error %s: %s", action, e)
            raise StoreError(
                f"Database error ({type(e).__name__}): {e}", cause=e
            ) from e

    @staticmethod
    def _execute(
        conn: Connection, statement: str, params: dict[str, Any]
    ) -> list[Any]:
        with conn.begin():
            result = conn.execute(text(statement), params)
            if not result.returns_rows:
                return []
            return list(result.mappings().all())

    def list_employees(self) -> list[Employee]:
        """Return every employee, in store-defined order."""
        logger.info("[DB] Fetching all employees")
        rows = self._run(SP_GET_ALL_EMPLOYEES, {}, "fetching employees")
        return [Employee.from_row(row) for row in rows]

    def get_employee(self, employee_id: int) -> Employee:
        """
        Return one employee by id.

        Raises:
            EmployeeNotFoundError: If no row exists for the id
            StoreError: If the round trip fails
        """
        logger.info("[DB] Fetching employee with id: %s", employee_id)
        rows = self._run(
            SP_GET_EMPLOYEE_BY_ID,
            {"id": employee_id},
            f"fetching employee with id {employee_id}",
        )
        if not rows:
            raise EmployeeNotFoundError(employee_id)
        return Employee.from_row(rows[0])

    def create_employee(self, employee: Employee) -> int:
        """
        Insert an employee and return the id assigned by the store.

        Any id on the given record is ignored.
        """
        logger.info("[DB] Inserting employee: %s", employee.name)
        rows = self._run(
            SP_CREATE_EMPLOYEE, _write_params(employee), "inserting employee"
        )
        if not rows:
            raise StoreError("Store did not return the new employee id")

        employee_id = int(rows[0]["id"])
        logger.info(
            "[DB] Employee %s inserted with id %s", employee.name, employee_id
        )
        return employee_id

    def update_employee(self, employee: Employee) -> None:
        """Overwrite the row identified by ``employee.id``."""
        logger.info("[DB] Updating employee with id: %s", employee.id)
        params = _write_params(employee)
        params["id"] = employee.id
        self._run(
            SP_UPDATE_EMPLOYEE,
            params,
            f"updating employee with id {employee.id}",
        )
        logger.info("[DB] Employee with id %s updated", employee.id)

    def delete_employee(self, employee_id: int) -> None:
        """Physically delete an employee; unknown ids are a no-op."""
        logger.info("[DB] Deleting employee with id: %s", employee_id)
        self._run(
            SP_DELETE_EMPLOYEE,
            {"id": employee_id},
            f"deleting employee with id {employee_id}",
        )
        logger.info("[DB] Employee with id %s deleted", employee_id)
