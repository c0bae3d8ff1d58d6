# ========================
# employee_analytics/pipeline/transformation.py
# ========================

"""
Query Engine Module

Runs the fixed set of analytical queries over partitioned employee data.
Every query is pure: it reads the partitions and returns a new QueryResult.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import MissingReferenceError
from .models import EMPLOYEE_COLUMNS, Department, Employee, Project, QueryResult
from .partitioning import PartitionedEmployeeSet, PartitionKey

logger = logging.getLogger(__name__)

RANK_COLUMNS = ('emp_id', 'name', 'department', 'salary', 'salary_rank')


def _group_sort_key(value: Optional[str]) -> Tuple[bool, str]:
    """Order group keys lexically with None last."""
    return (value is None, value or '')


def _salary_sort_key(employee: Employee) -> Tuple[bool, Decimal, int]:
    """Salary descending, nulls last, emp_id as tie-breaker for stable output."""
    salary = employee.salary
    return (salary is None, -salary if salary is not None else Decimal(0), employee.emp_id)


class QueryEngine:
    """
    Analytical queries over a PartitionedEmployeeSet.

    Department-scoped queries (averages, ranking, top-N) work partition by
    partition; the rest scan the flattened employee list.
    """

    def __init__(self,
                 partitioned: PartitionedEmployeeSet,
                 departments: Iterable[Department] = (),
                 strict_join: bool = False):
        """
        Initialize the query engine.

        Args:
            partitioned (PartitionedEmployeeSet): Employees grouped by department
            departments: Department records used by the location join
            strict_join (bool): Raise MissingReferenceError on unmatched
                employees instead of dropping them
        """
        self.partitioned = partitioned
        self.departments = tuple(departments)
        self.strict_join = strict_join
        logger.info(
            f"QueryEngine initialized with {partitioned.total_records()} employees, "
            f"{len(self.departments)} departments, strict_join={strict_join}"
        )

    def _employees(self) -> List[Employee]:
        return self.partitioned.flatten()

    def _employee_result(self, name: str, employees: Iterable[Employee]) -> QueryResult:
        rows = tuple(employee.as_row() for employee in employees)
        logger.debug(f"Query '{name}' returned {len(rows)} rows")
        return QueryResult(name=name, columns=EMPLOYEE_COLUMNS, rows=rows)

    def joined_after(self, year: int) -> QueryResult:
        """Employees whose join_date falls in a year later than `year`."""
        selected = [
            employee for employee in self._employees()
            if employee.join_date is not None and employee.join_date.year > year
        ]
        return self._employee_result(f"employees_joined_after_{year}", selected)

    def _department_averages(self) -> Dict[PartitionKey, Decimal]:
        averages = {}
        for department, employees in self.partitioned.items():
            salaries = [e.salary for e in employees if e.salary is not None]
            if salaries:
                averages[department] = sum(salaries, Decimal(0)) / len(salaries)
        return averages

    def average_salary_by_department(self) -> QueryResult:
        """Mean salary per department; departments without salaries are left out."""
        averages = self._department_averages()
        rows = tuple(
            (department, averages[department])
            for department in sorted(averages, key=_group_sort_key)
        )
        logger.debug(f"Computed average salary for {len(rows)} departments")
        return QueryResult(
            name="avg_salary_by_department",
            columns=('department', 'avg_salary'),
            rows=rows,
        )

    def employees_in_project(self, project: Union[Project, str]) -> QueryResult:
        """
        Employees assigned to one project.

        Raises:
            ValueError: If `project` is not a known project name
        """
        project = Project(project)
        selected = [e for e in self._employees() if e.project is project]
        return self._employee_result(f"employees_in_{project.value.lower()}", selected)

    def count_by_job_role(self) -> QueryResult:
        counts = defaultdict(int)
        for employee in self._employees():
            counts[employee.job_role] += 1
        rows = tuple((role, counts[role]) for role in sorted(counts, key=_group_sort_key))
        return QueryResult(name="count_by_job_role", columns=('job_role', 'employee_count'), rows=rows)

    def above_department_average(self) -> QueryResult:
        """
        Employees earning strictly more than their department's average.

        First pass computes the per-department averages, second pass keeps
        the employees above them. A lone employee equals the average and is
        never selected.
        """
        averages = self._department_averages()
        rows = []
        for department, employees in self.partitioned.items():
            average = averages.get(department)
            if average is None:
                continue
            for employee in employees:
                if employee.salary is not None and employee.salary > average:
                    rows.append((employee.emp_id, employee.name, department, employee.salary, average))
        return QueryResult(
            name="above_department_average",
            columns=('emp_id', 'name', 'department', 'salary', 'department_avg'),
            rows=tuple(rows),
        )

    def department_with_most_employees(self) -> QueryResult:
        """
        The single department with the highest headcount.

        Ties go to the lexically smallest department name.
        """
        sizes = self.partitioned.partition_sizes()
        if not sizes:
            return QueryResult(
                name="department_with_most_employees",
                columns=('department', 'employee_count'),
            )
        top = min(sizes, key=lambda d: (-sizes[d], _group_sort_key(d)))
        return QueryResult(
            name="department_with_most_employees",
            columns=('department', 'employee_count'),
            rows=((top, sizes[top]),),
        )

    def complete_records(self) -> QueryResult:
        """Employees with every field present."""
        return self._employee_result(
            "complete_records", (e for e in self._employees() if e.is_complete())
        )

    def with_department_location(self) -> QueryResult:
        """
        Inner join of employees and departments on the department name.

        Raises:
            MissingReferenceError: In strict mode, for the first employee
                whose department has no record
        """
        locations = {d.department_name: d.location for d in self.departments}
        rows = []
        unmatched = 0
        for employee in self._employees():
            if employee.department not in locations:
                if self.strict_join:
                    raise MissingReferenceError(employee.emp_id, employee.department)
                unmatched += 1
                logger.debug(
                    f"Employee {employee.emp_id} has no department record for "
                    f"{employee.department!r}; excluded from join"
                )
                continue
            rows.append(employee.as_row() + (locations[employee.department],))
        if unmatched:
            logger.info(f"Inner join excluded {unmatched} employees without a department record")
        return QueryResult(
            name="employees_with_location",
            columns=EMPLOYEE_COLUMNS + ('location',),
            rows=tuple(rows),
        )

    def salary_rank_by_department(self) -> QueryResult:
        """
        RANK() OVER (PARTITION BY department ORDER BY salary DESC).

        Equal salaries share a rank and the next distinct salary skips
        ahead, giving 1, 1, 3 for two tied leaders.
        """
        rows = []
        for department, employees in self.partitioned.items():
            rows.extend(self._rank_partition(department, employees))
        return QueryResult(name="salary_rank_by_department", columns=RANK_COLUMNS, rows=tuple(rows))

    @staticmethod
    def _rank_partition(department: PartitionKey,
                        employees: Iterable[Employee]) -> List[Tuple]:
        ranked = []
        rank = 0
        previous_salary = object()
        for position, employee in enumerate(sorted(employees, key=_salary_sort_key), start=1):
            if employee.salary != previous_salary:
                rank = position
                previous_salary = employee.salary
            ranked.append((employee.emp_id, employee.name, department, employee.salary, rank))
        return ranked

    def top_earners_by_department(self, n: int = 3) -> QueryResult:
        """
        Ranked employees with rank <= n, at most n rows per department.

        Raises:
            ValueError: If n is smaller than 1
        """
        if n < 1:
            raise ValueError(f"n must be at least 1, got {n}")
        rows = []
        for department, employees in self.partitioned.items():
            ranked = self._rank_partition(department, employees)
            rows.extend([row for row in ranked if row[-1] <= n][:n])
        return QueryResult(name=f"top_{n}_earners_by_department", columns=RANK_COLUMNS, rows=tuple(rows))

    def run_all(self, year: int, project: Union[Project, str], top_n: int = 3) -> List[QueryResult]:
        """
        Run every query in a fixed order.

        Args:
            year (int): Threshold for the join date filter
            project: Project for the project filter
            top_n (int): Rank limit for the top earners query

        Returns:
            list[QueryResult]: One result per query
        """
        logger.info("Running all analytical queries...")
        results = [
            self.joined_after(year),
            self.average_salary_by_department(),
            self.employees_in_project(project),
            self.count_by_job_role(),
            self.above_department_average(),
            self.department_with_most_employees(),
            self.complete_records(),
            self.with_department_location(),
            self.salary_rank_by_department(),
            self.top_earners_by_department(top_n),
        ]
        for result in results:
            logger.info(f"  {result.name}: {len(result)} rows")
        return results
