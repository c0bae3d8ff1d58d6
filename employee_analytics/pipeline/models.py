# ========================
# employee_analytics/pipeline/models.py
# ========================

"""
Record Types

Typed records produced by ingestion and the result container produced by
every query.
"""

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class Project(str, Enum):
    ALPHA = "Alpha"
    BETA = "Beta"
    GAMMA = "Gamma"
    DELTA = "Delta"
    OMEGA = "Omega"


EMPLOYEE_COLUMNS = (
    'emp_id', 'name', 'age', 'job_role', 'salary', 'project', 'join_date', 'department'
)
DEPARTMENT_COLUMNS = ('dept_id', 'department_name', 'location')


@dataclass(frozen=True)
class Employee:
    emp_id: int
    name: Optional[str] = None
    age: Optional[int] = None
    job_role: Optional[str] = None
    salary: Optional[Decimal] = None
    project: Optional[Project] = None
    join_date: Optional[date] = None
    department: Optional[str] = None

    def as_row(self) -> Tuple[Any, ...]:
        """Return field values in source column order."""
        return tuple(getattr(self, name) for name in EMPLOYEE_COLUMNS)

    def is_complete(self) -> bool:
        return all(getattr(self, f.name) is not None for f in fields(self))


@dataclass(frozen=True)
class Department:
    dept_id: int
    department_name: str
    location: Optional[str] = None

    def as_row(self) -> Tuple[Any, ...]:
        return (self.dept_id, self.department_name, self.location)


@dataclass(frozen=True)
class QueryResult:
    """
    Ordered rows with a declared column schema.

    Attributes:
        name (str): Result set name, also used as the export file stem
        columns (tuple): Column names, one per row position
        rows (tuple): Row tuples in result order
    """
    name: str
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[Any, ...], ...] = ()

    def __post_init__(self):
        for row in self.rows:
            if len(row) != len(self.columns):
                raise ValueError(
                    f"Row width {len(row)} does not match {len(self.columns)} columns in '{self.name}'"
                )

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        return iter(self.rows)

    def column(self, name: str) -> List[Any]:
        """Return all values of one column."""
        index = self.columns.index(name)
        return [row[index] for row in self.rows]

    def to_records(self) -> List[Dict[str, Any]]:
        """Convert rows to a list of column-name keyed dictionaries."""
        return [dict(zip(self.columns, row)) for row in self.rows]
