"""
Typed models for employee records.

Every field is Optional so that any JSON object parses; whether a record is
acceptable for persistence is decided by ``validators.validate_employee``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import field_validator


class Employee(BaseModel):
    """One employee record as stored in the database and in salary files."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    name: str | None = None
    position: str | None = None
    salary: float | None = Field(default=None, allow_inf_nan=False)
    hire_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("hireDate", "hire_date"),
        serialization_alias="hireDate",
    )
    department: str | None = None

    @field_validator("hire_date", mode="before")
    @classmethod
    def coerce_hire_date(cls, v: Any) -> Any:
        """Accept ``date`` values from the store as ISO-formatted text."""
        if isinstance(v, date):
            return v.isoformat()
        return v

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Employee:
        """Build an employee from a result row keyed by column name."""
        return cls(
            id=row["id"],
            name=row["name"],
            position=row["position"],
            salary=row["salary"],
            hire_date=row["hire_date"],
            department=row["department"],
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the wire field names (``hireDate``)."""
        return self.model_dump(by_alias=True, mode="json")


EmployeeList = TypeAdapter(list[Employee])


def salary_sort_key(employee: Employee) -> float:
    """Sort key putting records without a salary after every salaried one."""
    if employee.salary is None:
        return float("-inf")
    return employee.salary
