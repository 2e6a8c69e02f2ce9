"""Tests for the top-salary report."""

import random
import threading
import time
from unittest.mock import MagicMock

import pytest

from employee_api.aggregation import TopSalaryAggregator
from employee_api.storage import EmployeeFileReader
from employee_api.types import Employee
from tests.conftest import TEST_BUCKET


class StubReader:
    """File reader serving fixed employee lists per key."""

    def __init__(self, files: dict, delay: float = 0.0):
        self.files = files
        self.delay = delay
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def list_json_files(self, suffix: str = ".json") -> list[str]:
        return [key for key in self.files if key.endswith(suffix)]

    def read_employees(self, key: str) -> list[Employee]:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            content = self.files[key]
            if isinstance(content, Exception):
                raise content
            return list(content)
        finally:
            with self._lock:
                self.active -= 1


def staff(*salaries) -> list[Employee]:
    return [Employee(name=f"e{salary}", salary=salary) for salary in salaries]


@pytest.mark.unit
class TestTopSalaryAggregator:
    """Test merging, ranking and failure isolation."""

    def test_no_files(self) -> None:
        """Test an empty bucket yields an empty report."""
        aggregator = TopSalaryAggregator(StubReader({}))

        assert aggregator.top_salaries() == []
        assert aggregator.last_stats.files_total == 0

    def test_sorted_descending_when_few_records(self) -> None:
        """Test fewer than ten records are all returned, highest first."""
        reader = StubReader(
            {"a.json": staff(300, 100), "b.json": staff(500), "c.json": []}
        )

        result = TopSalaryAggregator(reader).top_salaries()

        assert [e.salary for e in result] == [500, 300, 100]

    def test_truncated_to_ten(self) -> None:
        """Test only the ten highest salaries are kept."""
        reader = StubReader(
            {
                "a.json": staff(*range(1, 8)),
                "b.json": staff(*range(8, 15)),
            }
        )

        result = TopSalaryAggregator(reader).top_salaries()

        assert [e.salary for e in result] == list(range(14, 4, -1))

    def test_custom_limit(self) -> None:
        """Test the report size is configurable."""
        reader = StubReader({"a.json": staff(1, 2, 3)})
        result = TopSalaryAggregator(reader, limit=2).top_salaries()
        assert [e.salary for e in result] == [3, 2]

    def test_order_of_files_does_not_matter(self) -> None:
        """Test the report is independent of file and record order."""
        salaries = [float(s) for s in range(100, 2500, 100)]
        shuffled = salaries[:]
        random.Random(7).shuffle(shuffled)
        files_a = {
            "x.json": staff(*salaries[:8]),
            "y.json": staff(*salaries[8:]),
        }
        files_b = {
            "p.json": staff(*shuffled[:5]),
            "q.json": staff(*shuffled[5:17]),
            "r.json": staff(*shuffled[17:]),
        }

        first = TopSalaryAggregator(StubReader(files_a)).top_salaries()
        second = TopSalaryAggregator(StubReader(files_b)).top_salaries()

        assert [e.salary for e in first] == [e.salary for e in second]
        assert first[0].salary == 2400.0

    def test_missing_salaries_rank_last(self) -> None:
        """Test records without a salary never outrank salaried ones."""
        reader = StubReader(
            {"a.json": [Employee(name="unpaid")] + staff(10, 20)}
        )

        result = TopSalaryAggregator(reader).top_salaries()

        assert [e.name for e in result] == ["e20", "e10", "unpaid"]

    def test_failing_file_is_skipped(self) -> None:
        """Test one failing read does not lose the other files."""
        reader = StubReader(
            {
                "a.json": staff(100),
                "broken.json": RuntimeError("boom"),
                "c.json": staff(300),
            }
        )
        aggregator = TopSalaryAggregator(reader)

        result = aggregator.top_salaries()

        assert [e.salary for e in result] == [300, 100]
        assert aggregator.last_stats.files_total == 3
        assert aggregator.last_stats.files_failed == 1
        assert aggregator.last_stats.records_merged == 2

    def test_all_files_failing(self) -> None:
        """Test the report is empty when every read fails."""
        reader = StubReader(
            {"a.json": RuntimeError("a"), "b.json": OSError("b")}
        )
        aggregator = TopSalaryAggregator(reader)

        assert aggregator.top_salaries() == []
        assert aggregator.last_stats.files_failed == 2

    def test_reads_are_bounded(self) -> None:
        """Test no more than three files are read at the same time."""
        files = {f"f{i}.json": staff(i + 1) for i in range(12)}
        reader = StubReader(files, delay=0.02)

        result = TopSalaryAggregator(reader).top_salaries()

        assert reader.peak <= 3
        assert len(result) == 10

    def test_reads_every_listed_file(self) -> None:
        """Test each discovered key is read exactly once."""
        reader = MagicMock(spec=EmployeeFileReader)
        reader.list_json_files.return_value = ["a.json", "b.json"]
        reader.read_employees.return_value = staff(1)

        result = TopSalaryAggregator(reader).top_salaries()

        assert len(result) == 2
        assert sorted(
            call.args[0] for call in reader.read_employees.call_args_list
        ) == ["a.json", "b.json"]

    @pytest.mark.parametrize("max_workers", [0, -1])
    def test_invalid_worker_count(self, max_workers: int) -> None:
        """Test the pool must have at least one worker."""
        with pytest.raises(ValueError):
            TopSalaryAggregator(StubReader({}), max_workers=max_workers)


@pytest.mark.integration
class TestAggregationOverS3:
    """Test the report against files read from a mocked bucket."""

    def test_non_finite_salary_file_contributes_nothing(self, mock_s3) -> None:
        """Test a file holding a NaN salary is skipped and ranking stays sorted."""
        mock_s3.put_object(
            Bucket=TEST_BUCKET,
            Key="poisoned.json",
            Body=b'[{"name": "a", "salary": NaN}, {"name": "b", "salary": 7}]',
        )
        mock_s3.put_object(
            Bucket=TEST_BUCKET,
            Key="team.json",
            Body=b'[{"name": "c", "salary": 5}, {"name": "d", "salary": 9}]',
        )
        reader = EmployeeFileReader(TEST_BUCKET, s3_client=mock_s3)

        result = TopSalaryAggregator(reader).top_salaries()

        assert [e.salary for e in result] == [9.0, 5.0]
