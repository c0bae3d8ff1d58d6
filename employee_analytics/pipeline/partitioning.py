# ========================
# employee_analytics/pipeline/partitioning.py
# ========================

"""
Partitioning Module

Groups employees by department the way a dynamically partitioned Hive
table would: every observed department value becomes a partition.
"""

import logging
from collections import OrderedDict
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .models import Employee

logger = logging.getLogger(__name__)

PartitionKey = Optional[str]


class PartitionedEmployeeSet(Mapping):
    """
    Read-only mapping of department to the employees in that department.

    Partitions iterate in first-seen order and keep input order inside each
    partition. Employees without a department are kept under the None key.
    """

    def __init__(self, partitions: Mapping[PartitionKey, Iterable[Employee]]):
        self._partitions = MappingProxyType(
            OrderedDict((key, tuple(records)) for key, records in partitions.items())
        )

    def __getitem__(self, key: PartitionKey) -> Tuple[Employee, ...]:
        return self._partitions[key]

    def __iter__(self) -> Iterator[PartitionKey]:
        return iter(self._partitions)

    def __len__(self) -> int:
        return len(self._partitions)

    def __repr__(self) -> str:
        return f"PartitionedEmployeeSet({self.partition_sizes()})"

    def partition(self, key: PartitionKey) -> Tuple[Employee, ...]:
        """Return the employees of one department, empty for unknown keys."""
        return self._partitions.get(key, ())

    def departments(self) -> List[PartitionKey]:
        return list(self._partitions)

    def partition_sizes(self) -> Dict[PartitionKey, int]:
        return {key: len(records) for key, records in self._partitions.items()}

    def flatten(self) -> List[Employee]:
        """Return every employee, partition by partition."""
        return [employee for records in self._partitions.values() for employee in records]

    def total_records(self) -> int:
        return sum(len(records) for records in self._partitions.values())


def partition_by_department(employees: Iterable[Employee]) -> PartitionedEmployeeSet:
    """
    Build the department partitions for a collection of employees.

    Args:
        employees: Employee records in input order

    Returns:
        PartitionedEmployeeSet: Immutable partitioned view
    """
    partitions = OrderedDict()
    for employee in employees:
        partitions.setdefault(employee.department, []).append(employee)

    partitioned = PartitionedEmployeeSet(partitions)
    logger.info(
        f"Partitioned {partitioned.total_records()} employees into {len(partitioned)} departments"
    )
    logger.debug(f"Partition sizes: {partitioned.partition_sizes()}")
    return partitioned
