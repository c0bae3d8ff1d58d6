# ========================
# employee_analytics/pipeline/cleaning.py
# ========================

"""
Record Parsing Module

Coerces raw delimited rows into typed Employee and Department records.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import MalformedRecordError
from .models import DEPARTMENT_COLUMNS, EMPLOYEE_COLUMNS, Department, Employee, Project

logger = logging.getLogger(__name__)

# Hive writes NULL as \N in text tables
NULL_MARKERS = ('', '\\N')


class RecordParser:
    """
    Applies the fixed employee and department schemas to raw rows.

    Strict by default: the first malformed row raises MalformedRecordError.
    With skip_malformed=True the row is logged, counted and dropped instead.
    """

    DATE_FORMATS = [
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d-%b-%Y",
        "%m/%d/%Y",
    ]

    PROJECT_MAP = {project.value.lower(): project for project in Project}

    def __init__(self, skip_malformed: bool = False):
        """
        Initialize the record parser.

        Args:
            skip_malformed (bool): Drop malformed rows instead of raising
        """
        self.skip_malformed = skip_malformed
        self.records_processed = 0
        self.records_dropped = 0
        self._seen_emp_ids = set()
        self._seen_dept_ids = set()
        self._seen_dept_names = set()
        logger.info(f"RecordParser initialized (skip_malformed={skip_malformed})")

    def parse_employees(self, rows: Iterable[Tuple[int, Sequence[str]]],
                        source: Optional[str] = None) -> List[Employee]:
        """
        Parse numbered raw rows into Employee records.

        Args:
            rows: (line_number, fields) pairs as produced by CSVReader
            source (str): Source name used in error messages

        Returns:
            list[Employee]: Parsed records in input order
        """
        return self._parse_rows(rows, source, self.parse_employee)

    def parse_departments(self, rows: Iterable[Tuple[int, Sequence[str]]],
                          source: Optional[str] = None) -> List[Department]:
        """Parse numbered raw rows into Department records."""
        return self._parse_rows(rows, source, self.parse_department)

    def _parse_rows(self, rows, source, parse_one: Callable) -> list:
        records = []
        for line_number, fields in rows:
            self.records_processed += 1
            try:
                records.append(parse_one(fields, source=source, line_number=line_number))
            except MalformedRecordError as e:
                if not self.skip_malformed:
                    logger.error(f"Malformed record: {e}")
                    raise
                self.records_dropped += 1
                logger.warning(f"Skipping malformed record: {e}")
        return records

    def parse_employee(self, fields: Sequence[str], source: Optional[str] = None,
                       line_number: Optional[int] = None) -> Employee:
        """
        Coerce one row in employee column order.

        Raises:
            MalformedRecordError: On wrong field count, bad typed value or
                duplicate emp_id
        """
        values = self._as_dict(fields, EMPLOYEE_COLUMNS, source, line_number)

        def coerce(column: str, converter: Callable[[str], Any]) -> Any:
            return self._coerce(values, column, converter, source, line_number)

        emp_id = coerce('emp_id', int)
        if emp_id is None:
            raise MalformedRecordError("emp_id is required", source, line_number)
        if emp_id in self._seen_emp_ids:
            raise MalformedRecordError(f"duplicate emp_id {emp_id}", source, line_number)

        employee = Employee(
            emp_id=emp_id,
            name=self._clean_string(values['name']),
            age=coerce('age', int),
            job_role=self._clean_string(values['job_role']),
            salary=coerce('salary', self._to_decimal),
            project=coerce('project', self._to_project),
            join_date=coerce('join_date', self._to_date),
            department=self._clean_string(values['department']),
        )
        self._seen_emp_ids.add(emp_id)
        return employee

    def parse_department(self, fields: Sequence[str], source: Optional[str] = None,
                         line_number: Optional[int] = None) -> Department:
        """Coerce one row in department column order."""
        values = self._as_dict(fields, DEPARTMENT_COLUMNS, source, line_number)

        dept_id = self._coerce(values, 'dept_id', int, source, line_number)
        name = self._clean_string(values['department_name'])
        if dept_id is None or name is None:
            raise MalformedRecordError("dept_id and department_name are required", source, line_number)
        if dept_id in self._seen_dept_ids:
            raise MalformedRecordError(f"duplicate dept_id {dept_id}", source, line_number)
        if name in self._seen_dept_names:
            raise MalformedRecordError(f"duplicate department_name {name!r}", source, line_number)

        department = Department(
            dept_id=dept_id,
            department_name=name,
            location=self._clean_string(values['location']),
        )
        self._seen_dept_ids.add(dept_id)
        self._seen_dept_names.add(name)
        return department

    def _as_dict(self, fields: Sequence[str], columns: Sequence[str],
                 source: Optional[str], line_number: Optional[int]) -> Dict[str, str]:
        if len(fields) != len(columns):
            raise MalformedRecordError(
                f"expected {len(columns)} fields, got {len(fields)}", source, line_number
            )
        return dict(zip(columns, fields))

    def _coerce(self, values: Dict[str, str], column: str, converter: Callable[[str], Any],
                source: Optional[str], line_number: Optional[int]) -> Any:
        raw = self._clean_string(values[column])
        if raw is None:
            return None
        try:
            return converter(raw)
        except (ValueError, InvalidOperation) as e:
            raise MalformedRecordError(
                f"invalid {column} {raw!r}: {e}", source, line_number
            ) from e

    @staticmethod
    def _clean_string(value: Any) -> Optional[str]:
        """Strip whitespace; empty cells and NULL markers become None."""
        if value is None:
            return None
        value = str(value).strip()
        if value in NULL_MARKERS:
            return None
        return value

    @staticmethod
    def _to_decimal(value: str) -> Decimal:
        amount = Decimal(value)
        if not amount.is_finite():
            raise ValueError("salary must be a finite number")
        return amount

    def _to_project(self, value: str) -> Project:
        project = self.PROJECT_MAP.get(value.lower())
        if project is None:
            raise ValueError(f"expected one of {', '.join(p.value for p in Project)}")
        return project

    def _to_date(self, value: str) -> date:
        """Parse a date in any of the accepted formats."""
        for fmt in self.DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt).date()
            except ValueError:
                continue
        raise ValueError("unrecognised date format")

    def get_statistics(self) -> Dict[str, Any]:
        """Get parsing statistics."""
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'records_parsed': self.records_processed - self.records_dropped,
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }
