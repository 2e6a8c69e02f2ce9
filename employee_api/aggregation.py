"""
Top-salary report over the employee files in S3.

Every discovered file is read on a bounded thread pool, the partial lists are
merged once all reads finish, and the highest salaries are kept.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from employee_api.constants import FETCH_WORKERS, JSON_SUFFIX, TOP_SALARIES_LIMIT
from employee_api.storage import EmployeeFileReader
from employee_api.types import Employee, salary_sort_key

logger = logging.getLogger(__name__)


@dataclass
class AggregationStats:
    """Counters from the most recent aggregation run."""

    files_total: int = 0
    files_failed: int = 0
    records_merged: int = 0


class TopSalaryAggregator:
    """
    Computes the employees with the highest salaries across all files.

    The pool size bounds concurrent S3 reads regardless of how many files the
    bucket holds; extra files queue behind the busy workers.
    """

    def __init__(
        self,
        reader: EmployeeFileReader,
        max_workers: int = FETCH_WORKERS,
        limit: int = TOP_SALARIES_LIMIT,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._reader = reader
        self._max_workers = max_workers
        self._limit = limit
        self.last_stats = AggregationStats()

    def top_salaries(self) -> list[Employee]:
        """
        Return up to ``limit`` employees sorted by salary, highest first.

        A file whose read raises contributes nothing; if every file fails, or
        none exist, the result is empty.
        """
        logger.info("[Init] Loading employees from S3 files")
        keys = self._reader.list_json_files(JSON_SUFFIX)
        stats = AggregationStats(files_total=len(keys))

        all_employees: list[Employee] = []
        if keys:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                futures = {
                    executor.submit(self._reader.read_employees, key): key
                    for key in keys
                }

                for future in as_completed(futures):
                    key = futures[future]
                    try:
                        all_employees.extend(future.result())
                    except Exception as e:  # pylint: disable=broad-exception-caught
                        stats.files_failed += 1
                        logger.error("Error processing file %s: %s", key, e)

        stats.records_merged = len(all_employees)
        self.last_stats = stats
        logger.info(
            "Merged %d employees from %d files (%d failed)",
            stats.records_merged,
            stats.files_total,
            stats.files_failed,
        )

        all_employees.sort(key=salary_sort_key, reverse=True)
        return all_employees[: self._limit]
