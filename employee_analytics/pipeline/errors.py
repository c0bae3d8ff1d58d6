# ========================
# employee_analytics/pipeline/errors.py
# ========================

"""
Pipeline Errors

Exceptions raised by the ingest, query and export stages.
"""

from typing import Optional


class PipelineError(Exception):
    """Base error for the employee analytics pipeline."""


class MalformedRecordError(PipelineError):
    """A source row does not match its schema or a typed field cannot be coerced."""

    def __init__(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self.source = source
        self.line_number = line_number
        location = ""
        if source is not None:
            location = f"{source}"
            if line_number is not None:
                location += f":{line_number}"
            location += ": "
        super().__init__(f"{location}{message}")


class MissingReferenceError(PipelineError):
    """An employee references a department with no department record."""

    def __init__(self, emp_id: int, department: Optional[str]):
        self.emp_id = emp_id
        self.department = department
        super().__init__(f"Employee {emp_id} references unknown department {department!r}")


class WriteError(PipelineError):
    """An export destination could not be written."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot write to {self.path}: {reason}")
