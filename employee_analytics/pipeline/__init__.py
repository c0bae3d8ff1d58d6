# ========================
# employee_analytics/pipeline/__init__.py
# ========================

"""
Data Pipeline Package

Core components of the employee analytics pipeline:
- ingestion: Chunked CSV reading
- cleaning: Typed record coercion
- partitioning: Department partitions
- transformation: Analytical queries
- storage: Result export
- orchestrator: Pipeline coordination
"""

from .cleaning import RecordParser
from .errors import MalformedRecordError, MissingReferenceError, PipelineError, WriteError
from .ingestion import CSVReader, load_departments, load_employees
from .models import Department, Employee, Project, QueryResult
from .orchestrator import EmployeeAnalyticsPipeline
from .partitioning import PartitionedEmployeeSet, partition_by_department
from .storage import ResultExporter
from .transformation import QueryEngine

__all__ = [
    'CSVReader',
    'RecordParser',
    'load_employees',
    'load_departments',
    'Employee',
    'Department',
    'Project',
    'QueryResult',
    'PartitionedEmployeeSet',
    'partition_by_department',
    'QueryEngine',
    'ResultExporter',
    'EmployeeAnalyticsPipeline',
    'PipelineError',
    'MalformedRecordError',
    'MissingReferenceError',
    'WriteError',
]
