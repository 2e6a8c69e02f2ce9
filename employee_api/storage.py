"""
S3 access for employee salary files.

Both operations are best effort: a failed listing yields no keys and a file
that cannot be read or parsed yields no employees, so one bad object never
fails a whole report.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from employee_api.constants import JSON_SUFFIX
from employee_api.types import Employee, EmployeeList

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
else:
    S3Client = Any  # type: ignore[misc,assignment]

logger = logging.getLogger(__name__)


class EmployeeFileReader:
    """Lists and reads JSON arrays of employees stored in one bucket."""

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        s3_client: Optional[S3Client] = None,
    ):
        """
        Initialize the reader.

        Args:
            bucket: Bucket holding the employee files
            region: Optional AWS region
            s3_client: Optional boto3 S3 client (creates one if not provided)
        """
        self.bucket = bucket
        if s3_client is not None:
            self._client = s3_client
        elif region:
            self._client = boto3.client("s3", region_name=region)
        else:
            self._client = boto3.client("s3")

    def list_json_files(self, suffix: str = JSON_SUFFIX) -> list[str]:
        """
        List every key in the bucket ending with ``suffix``.

        Returns:
            Matching keys, or an empty list if the listing fails
        """
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket):
                for obj in page.get("Contents", []):
                    key = obj["Key"]
                    if key.endswith(suffix):
                        keys.append(key)
                        logger.info("File detected: %s", key)
        except (ClientError, BotoCoreError) as e:
            logger.error("Error listing files in bucket %s: %s", self.bucket, e)
            return []

        return keys

    def read_employees(self, key: str) -> list[Employee]:
        """
        Read one file and parse it as a JSON array of employees.

        Returns:
            The parsed employees, or an empty list on any read or parse error
        """
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
            content = response["Body"].read().decode("utf-8")
            employees = EmployeeList.validate_json(content)
        except (ClientError, BotoCoreError) as e:
            logger.error("Error reading file %s from S3: %s", key, e)
            return []
        except (ValidationError, ValueError) as e:
            logger.error("Error parsing file %s: %s", key, e)
            return []

        logger.info("File %s read. Employees: %d", key, len(employees))
        return employees
