"""
Shared database connection for the employee store.

The connection is bootstrapped from AWS: credentials come from a Secrets
Manager secret and the host/port from the RDS instance metadata. One
connection is shared by every caller in the process and recreated exactly
once when it is missing, closed or invalidated.
"""

import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from employee_api.config import EmployeeApiConfig, get_config
from employee_api.exceptions import DatabaseConnectionError

if TYPE_CHECKING:
    from mypy_boto3_rds import RDSClient
    from mypy_boto3_secretsmanager import SecretsManagerClient
else:
    RDSClient = Any  # type: ignore[misc,assignment]
    SecretsManagerClient = Any  # type: ignore[misc,assignment]

logger = logging.getLogger(__name__)

DRIVER_NAME = "mysql+pymysql"


@dataclass(frozen=True)
class DatabaseCredentials:
    """Login resolved from the database secret."""

    username: str
    password: str = field(repr=False)
    db_instance_identifier: str


def resolve_credentials(
    secrets_client: SecretsManagerClient,
    secret_arn: str,
    fallback_identifier: Optional[str] = None,
) -> DatabaseCredentials:
    """
    Read the database login from Secrets Manager.

    The secret is a JSON object with ``username`` and ``password`` and an
    optional ``dbInstanceIdentifier``; when that is missing or null the
    configured identifier is used instead.

    Raises:
        DatabaseConnectionError: If the secret is malformed or no instance
            identifier can be determined
    """
    logger.info("Fetching database secret: %s", secret_arn)
    response = secrets_client.get_secret_value(SecretId=secret_arn)

    try:
        secret = json.loads(response["SecretString"])
        username = secret["username"]
        password = secret["password"]
    except (KeyError, TypeError, ValueError) as e:
        raise DatabaseConnectionError(
            f"Database secret {secret_arn} is malformed", cause=e
        ) from e

    identifier = secret.get("dbInstanceIdentifier") or fallback_identifier
    if not identifier:
        raise DatabaseConnectionError(
            "No database instance identifier in secret or configuration"
        )

    logger.info("Database instance identifier: %s", identifier)
    return DatabaseCredentials(
        username=username,
        password=password,
        db_instance_identifier=identifier,
    )


def resolve_endpoint(rds_client: RDSClient, identifier: str) -> tuple[str, int]:
    """Look up the host and port of an RDS instance."""
    logger.info("Describing RDS instance: %s", identifier)
    response = rds_client.describe_db_instances(
        DBInstanceIdentifier=identifier
    )
    instances = response.get("DBInstances", [])
    if not instances or "Endpoint" not in instances[0]:
        raise DatabaseConnectionError(
            f"RDS instance {identifier} has no endpoint"
        )

    endpoint = instances[0]["Endpoint"]
    logger.info("RDS endpoint: %s:%s", endpoint["Address"], endpoint["Port"])
    return endpoint["Address"], int(endpoint["Port"])


def build_database_url(
    credentials: DatabaseCredentials, host: str, port: int
) -> URL:
    """Build the SQLAlchemy URL; the schema is named after the instance."""
    return URL.create(
        DRIVER_NAME,
        username=credentials.username,
        password=credentials.password,
        host=host,
        port=port,
        database=credentials.db_instance_identifier,
    )


class ConnectionManager:
    """
    Owner of the process-wide database connection.

    ``acquire()`` hands out the shared connection. When it is absent, closed
    or invalidated, callers serialize on a lock and the first one through
    recreates it; the others see the fresh connection on the re-check.

    Example:
        ```python
        manager = ConnectionManager()
        with manager.connection() as conn:
            conn.execute(text("SELECT 1"))
        manager.shutdown()
        ```
    """

    def __init__(
        self,
        config: Optional[EmployeeApiConfig] = None,
        connect: Optional[Callable[[], Connection]] = None,
        secrets_client: Optional[SecretsManagerClient] = None,
        rds_client: Optional[RDSClient] = None,
    ):
        """
        Initialize the connection manager.

        Args:
            config: Configuration settings
            connect: Optional factory returning an open connection; replaces
                the Secrets Manager / RDS bootstrap
            secrets_client: Optional pre-configured Secrets Manager client
            rds_client: Optional pre-configured RDS client
        """
        self._config = config or get_config()
        self._connect = connect or self._bootstrap
        self._secrets_client = secrets_client
        self._rds_client = rds_client
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._lock = threading.Lock()

    @staticmethod
    def _is_usable(connection: Optional[Connection]) -> bool:
        return (
            connection is not None
            and not connection.closed
            and not connection.invalidated
        )

    @property
    def is_connected(self) -> bool:
        """Whether a usable shared connection currently exists."""
        return self._is_usable(self._connection)

    def acquire(self) -> Connection:
        """
        Return the shared connection, creating it if needed.

        Raises:
            DatabaseConnectionError: If the connection cannot be established
        """
        connection = self._connection
        if self._is_usable(connection):
            return connection  # type: ignore[return-value]

        with self._lock:
            if not self._is_usable(self._connection):  # Double-check pattern
                self._connection = self._open()
            return self._connection  # type: ignore[return-value]

    def release(self, connection: Connection) -> None:
        """
        Hand a connection back after use.

        The shared connection stays open for the next caller unless a
        disconnect invalidated it, in which case it is dropped so the next
        ``acquire()`` recreates it.
        """
        if not connection.invalidated:
            return

        with self._lock:
            if self._connection is connection:
                logger.warning("Dropping invalidated database connection")
                self._connection = None
                self._close_quietly(connection)

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Context manager pairing ``acquire()`` with ``release()``."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    def shutdown(self) -> None:
        """Close the shared connection and dispose the engine."""
        with self._lock:
            if self._connection is not None:
                logger.info("Closing database connection")
                self._close_quietly(self._connection)
                self._connection = None
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None

    def _open(self) -> Connection:
        logger.info("Opening database connection")
        try:
            connection = self._connect()
        except DatabaseConnectionError:
            raise
        except (ClientError, BotoCoreError, SQLAlchemyError) as e:
            logger.error("Failed to open database connection: %s", e)
            raise DatabaseConnectionError(
                f"Failed to open database connection: {e}", cause=e
            ) from e
        logger.info("Database connection established")
        return connection

    def _bootstrap(self) -> Connection:
        if not self._config.secret_arn:
            raise DatabaseConnectionError(
                "SECRET_ARN is not configured; cannot resolve credentials"
            )

        client_kwargs = self._config.boto3_client_kwargs()
        secrets_client = self._secrets_client or boto3.client(
            "secretsmanager", **client_kwargs
        )
        rds_client = self._rds_client or boto3.client("rds", **client_kwargs)

        credentials = resolve_credentials(
            secrets_client,
            self._config.secret_arn,
            fallback_identifier=self._config.db_instance_identifier,
        )
        host, port = resolve_endpoint(
            rds_client, credentials.db_instance_identifier
        )

        if self._engine is not None:
            self._engine.dispose()
        self._engine = create_engine(
            build_database_url(credentials, host, port),
            pool_size=1,
            max_overflow=0,
            pool_pre_ping=True,
            connect_args={"connect_timeout": self._config.db_connect_timeout},
        )
        return self._engine.connect()

    @staticmethod
    def _close_quietly(connection: Connection) -> None:
        try:
            connection.close()
        except SQLAlchemyError as e:
            logger.error("Error closing database connection: %s", e)
