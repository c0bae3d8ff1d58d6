# ========================
# employee_analytics/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Creates sample employee and department files for demos and load tests.
"""

import csv
import logging
import random
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..pipeline.models import DEPARTMENT_COLUMNS, EMPLOYEE_COLUMNS, Project

logger = logging.getLogger(__name__)


class DataGenerator:
    """
    Sample data generator for the employee and department datasets.
    """

    DEPARTMENTS = [
        (1, "IT", "Bangalore"),
        (2, "HR", "Mumbai"),
        (3, "Finance", "Delhi"),
        (4, "Marketing", "Pune"),
        (5, "Sales", "Chennai"),
        (6, "Operations", "Hyderabad"),
    ]

    # Present in employee rows but missing from the department file
    UNREGISTERED_DEPARTMENTS = ["Legal", "Research"]

    JOB_ROLES = {
        "IT": [("Software Engineer", 70000), ("Data Engineer", 75000), ("DevOps Engineer", 72000)],
        "HR": [("HR Executive", 45000), ("Recruiter", 40000)],
        "Finance": [("Accountant", 50000), ("Financial Analyst", 60000)],
        "Marketing": [("Marketing Executive", 48000), ("Content Strategist", 52000)],
        "Sales": [("Sales Executive", 42000), ("Account Manager", 58000)],
        "Operations": [("Operations Analyst", 50000), ("Logistics Coordinator", 44000)],
        "Legal": [("Legal Counsel", 80000)],
        "Research": [("Research Scientist", 90000)],
    }

    FIRST_NAMES = ["Aarav", "Diya", "Rohan", "Ananya", "Vikram", "Meera", "Kabir", "Isha",
                   "Arjun", "Sara", "Nikhil", "Priya", "Dev", "Kavya", "Rahul", "Neha"]
    LAST_NAMES = ["Sharma", "Iyer", "Patel", "Reddy", "Singh", "Gupta", "Nair", "Das"]

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self._random = random.Random(seed)
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def generate_departments(self, file_path: str, include_header: bool = True) -> Dict[str, Any]:
        """
        Write the department file.

        Returns:
            dict: Generation statistics
        """
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            if include_header:
                writer.writerow(DEPARTMENT_COLUMNS)
            writer.writerows(self.DEPARTMENTS)

        logger.info(f"Department file generated: {file_path}")
        return {'total_rows': len(self.DEPARTMENTS), 'file_path': str(file_path)}

    def generate_employees(self,
                           file_path: str,
                           num_rows: int,
                           null_rate: float = 0.05,
                           unregistered_rate: float = 0.03,
                           include_header: bool = True) -> Dict[str, Any]:
        """
        Write an employee file with some incomplete rows and some rows whose
        department has no department record.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of employees to generate
            null_rate (float): Fraction of rows with one empty optional field
            unregistered_rate (float): Fraction of rows in an unregistered department
            include_header (bool): Write a header row first

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} employees...")

        stats = {
            'total_rows': num_rows,
            'null_rate': null_rate,
            'rows_with_nulls': 0,
            'rows_unregistered_department': 0,
            'file_path': str(file_path),
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            if include_header:
                writer.writerow(EMPLOYEE_COLUMNS)

            for emp_id in range(1, num_rows + 1):
                writer.writerow(self._generate_employee(emp_id, null_rate, unregistered_rate, stats))

                if emp_id % 10000 == 0:
                    logger.debug(f"Generated {emp_id:,} employees")

        logger.info(f"Employee file generated: {file_path}")
        logger.info(
            f"Rows with nulls: {stats['rows_with_nulls']}, "
            f"unregistered department rows: {stats['rows_unregistered_department']}"
        )
        return stats

    def _generate_employee(self, emp_id: int, null_rate: float, unregistered_rate: float,
                           stats: Dict[str, Any]) -> List[Any]:
        rnd = self._random

        if rnd.random() < unregistered_rate:
            department = rnd.choice(self.UNREGISTERED_DEPARTMENTS)
            stats['rows_unregistered_department'] += 1
        else:
            department = rnd.choice(self.DEPARTMENTS)[1]

        job_role, base_salary = rnd.choice(self.JOB_ROLES[department])
        # Round to hundreds so equal salaries, and therefore rank ties, occur
        salary = round(base_salary * rnd.uniform(0.8, 1.5), -2)
        join_date = date(2010, 1, 1) + timedelta(days=rnd.randint(0, 365 * 14))

        row = [
            emp_id,
            f"{rnd.choice(self.FIRST_NAMES)} {rnd.choice(self.LAST_NAMES)}",
            rnd.randint(21, 60),
            job_role,
            f"{salary:.2f}",
            rnd.choice(list(Project)).value,
            join_date.isoformat(),
            department,
        ]

        if rnd.random() < null_rate:
            # Never blank emp_id; it is the record key
            row[rnd.randint(1, len(row) - 1)] = ''
            stats['rows_with_nulls'] += 1

        return row
