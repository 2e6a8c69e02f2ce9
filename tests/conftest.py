"""
Pytest fixtures for employee_api tests.

Uses moto to mock S3, Secrets Manager and RDS, and an in-memory fake of the
employee stored procedures for the store gateway.
"""

from contextlib import contextmanager
from itertools import count
from typing import Any, Generator, Iterator
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

from employee_api.config import EmployeeApiConfig, get_config
from employee_api.constants import (
    SP_CREATE_EMPLOYEE,
    SP_DELETE_EMPLOYEE,
    SP_GET_ALL_EMPLOYEES,
    SP_GET_EMPLOYEE_BY_ID,
    SP_UPDATE_EMPLOYEE,
)
from employee_api.database import ConnectionManager
from employee_api.repository import EmployeeRepository
from employee_api.router import EmployeeRouter
from employee_api.service import EmployeeService
from employee_api.types import Employee

TEST_BUCKET = "test-employee-files"
TEST_REGION = "us-east-1"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without AWS")
    config.addinivalue_line("markers", "integration: tests against moto")


@pytest.fixture(autouse=True)
def clear_config_cache() -> Generator[None, None, None]:
    """Make every test build its own configuration."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set up mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)


@pytest.fixture
def mock_s3(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mock S3 bucket for employee files."""
    with mock_aws():
        client = boto3.client("s3", region_name=TEST_REGION)
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def test_config() -> EmployeeApiConfig:
    """Create test configuration."""
    return EmployeeApiConfig(
        _env_file=None,
        secret_arn="arn:aws:secretsmanager:us-east-1:123456789012:secret:db",
        db_instance_identifier="employees",
        aws_region=TEST_REGION,
        s3_bucket=TEST_BUCKET,
    )


def make_employee(**overrides: Any) -> Employee:
    """Build a valid employee, overriding any field."""
    fields: dict[str, Any] = {
        "name": "Ada Lovelace",
        "position": "Engineer",
        "salary": 5200.0,
        "hire_date": "2021-03-15",
        "department": "R&D",
    }
    fields.update(overrides)
    return Employee(**fields)


@pytest.fixture
def valid_employee() -> Employee:
    """A record that passes validation."""
    return make_employee()


# === IN-MEMORY STORED PROCEDURES ===


class FakeResult:
    """The slice of a SQLAlchemy ``CursorResult`` the repository reads."""

    def __init__(self, rows: list[dict[str, Any]] | None):
        self.returns_rows = rows is not None
        self._rows = rows or []

    def mappings(self) -> "FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows)


class FakeProcedureConnection:
    """
    Connection stand-in that executes the employee stored procedures
    against a dict keyed by id.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.closed = False
        self.invalidated = False
        self.statements: list[str] = []
        self._ids = count(1)

    @contextmanager
    def begin(self) -> Iterator[None]:
        yield

    def close(self) -> None:
        self.closed = True

    def execute(self, statement: Any, params: dict[str, Any]) -> FakeResult:
        sql = statement.text
        self.statements.append(sql)

        if sql == SP_GET_ALL_EMPLOYEES:
            return FakeResult([dict(row) for row in self.rows.values()])
        if sql == SP_GET_EMPLOYEE_BY_ID:
            row = self.rows.get(params["id"])
            return FakeResult([dict(row)] if row else [])
        if sql == SP_CREATE_EMPLOYEE:
            new_id = next(self._ids)
            self.rows[new_id] = {"id": new_id, **params}
            return FakeResult([{"id": new_id}])
        if sql == SP_UPDATE_EMPLOYEE:
            if params["id"] in self.rows:
                self.rows[params["id"]] = dict(params)
            return FakeResult(None)
        if sql == SP_DELETE_EMPLOYEE:
            self.rows.pop(params["id"], None)
            return FakeResult(None)
        raise AssertionError(f"Unexpected statement: {sql}")


@pytest.fixture
def fake_connection() -> FakeProcedureConnection:
    """An empty in-memory employee store."""
    return FakeProcedureConnection()


@pytest.fixture
def connection_manager(
    test_config: EmployeeApiConfig,
    fake_connection: FakeProcedureConnection,
) -> ConnectionManager:
    """A ConnectionManager handing out the fake connection."""
    return ConnectionManager(
        config=test_config, connect=lambda: fake_connection
    )


@pytest.fixture
def repository(connection_manager: ConnectionManager) -> EmployeeRepository:
    """Store gateway over the in-memory stored procedures."""
    return EmployeeRepository(connection_manager)


@pytest.fixture
def mock_service() -> MagicMock:
    """Create a mock EmployeeService."""
    return MagicMock(spec=EmployeeService)


@pytest.fixture
def router(mock_service: MagicMock) -> EmployeeRouter:
    """Router dispatching to the mock service."""
    return EmployeeRouter(mock_service)


def proxy_event(
    method: str, proxy: str | None, body: str | None = None
) -> dict[str, Any]:
    """Build an API Gateway proxy event."""
    return {
        "httpMethod": method,
        "path": f"/{proxy}" if proxy is not None else "/",
        "pathParameters": {"proxy": proxy} if proxy is not None else None,
        "body": body,
    }
