"""
Configuration for the employee API.

Uses pydantic-settings for environment variable management. A deployed Lambda
reads its settings from the environment only; a local run also reads a
``.env`` file from the working directory.
"""

import os
from functools import lru_cache
from typing import Any, Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from employee_api.constants import LAMBDA_FUNCTION_ENV


def running_on_lambda() -> bool:
    """Return True when executing inside the AWS Lambda runtime."""
    return os.environ.get(LAMBDA_FUNCTION_ENV) is not None


class EmployeeApiConfig(BaseSettings):
    """Configuration for the employee store, the salary bucket and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Database bootstrap
    secret_arn: Optional[str] = Field(
        default=None,
        description="Secrets Manager ARN holding the database credentials",
    )
    db_instance_identifier: Optional[str] = Field(
        default=None,
        description="RDS instance identifier used when the secret has none",
    )
    db_connect_timeout: int = Field(
        default=10,
        description="Database connect timeout in seconds",
        ge=1,
        le=60,
    )

    # AWS access
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("MY_AWS_REGION", "AWS_REGION"),
        description="Region for Secrets Manager and RDS",
    )
    aws_access_key_id: Optional[SecretStr] = Field(
        default=None,
        validation_alias="MY_AWS_ACCESS_KEY_ID",
    )
    aws_secret_access_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias="MY_AWS_SECRET_ACCESS_KEY",
    )

    # Salary files
    s3_bucket: str = Field(
        default="",
        description="Bucket scanned for employee JSON files",
    )
    s3_region: Optional[str] = Field(
        default=None,
        description="Bucket region (defaults to aws_region)",
    )

    log_level: str = Field(default="INFO")

    @property
    def storage_region(self) -> str:
        """Region of the salary bucket."""
        return self.s3_region or self.aws_region

    def boto3_client_kwargs(self) -> dict[str, Any]:
        """
        Keyword arguments for ``boto3.client`` calls.

        Static keys are only passed when both halves are configured; otherwise
        boto3 falls back to its default credential chain.
        """
        kwargs: dict[str, Any] = {"region_name": self.aws_region}
        if self.aws_access_key_id and self.aws_secret_access_key:
            kwargs["aws_access_key_id"] = (
                self.aws_access_key_id.get_secret_value()
            )
            kwargs["aws_secret_access_key"] = (
                self.aws_secret_access_key.get_secret_value()
            )
        return kwargs


@lru_cache
def get_config() -> EmployeeApiConfig:
    """Get cached configuration instance."""
    if running_on_lambda():
        return EmployeeApiConfig(_env_file=None)
    return EmployeeApiConfig()
