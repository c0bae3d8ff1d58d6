# ========================
# tests/test_ingestion.py
# ========================

import csv
import os
import sys
import tempfile
import unittest
from datetime import date
from decimal import Decimal

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from employee_analytics.pipeline.cleaning import RecordParser
from employee_analytics.pipeline.errors import MalformedRecordError
from employee_analytics.pipeline.ingestion import CSVReader, load_departments, load_employees
from employee_analytics.pipeline.models import Project


def _write_csv(rows, delimiter=','):
    with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False, newline='') as f:
        writer = csv.writer(f, delimiter=delimiter)
        writer.writerows(rows)
        return f.name


class TestCSVReader(unittest.TestCase):
    """Test the chunked CSV reader."""

    def test_chunked_reading_with_header(self):
        temp_file_path = _write_csv([
            ['dept_id', 'department_name', 'location'],
            ['1', 'IT', 'Bangalore'],
            ['2', 'HR', 'Mumbai'],
            ['3', 'Finance', 'Delhi'],
        ])
        try:
            reader = CSVReader(temp_file_path, has_header=True)
            chunks = list(reader.read_in_chunks(chunk_size=2))

            self.assertEqual(len(chunks), 2)
            self.assertEqual(len(chunks[0]), 2)
            self.assertEqual(len(chunks[1]), 1)
            self.assertEqual(reader.header, ['dept_id', 'department_name', 'location'])

            line_number, row = chunks[0][0]
            self.assertEqual(line_number, 2)
            self.assertEqual(row, ['1', 'IT', 'Bangalore'])
        finally:
            os.unlink(temp_file_path)

    def test_headerless_file_keeps_first_row(self):
        temp_file_path = _write_csv([['1', 'IT', 'Bangalore']])
        try:
            chunks = list(CSVReader(temp_file_path).read_in_chunks(chunk_size=10))
            self.assertEqual(chunks, [[(1, ['1', 'IT', 'Bangalore'])]])
        finally:
            os.unlink(temp_file_path)

    def test_custom_delimiter(self):
        temp_file_path = _write_csv([['1', 'IT', 'Bangalore, KA']], delimiter='|')
        try:
            chunks = list(CSVReader(temp_file_path, delimiter='|').read_in_chunks(chunk_size=10))
            self.assertEqual(chunks[0][0][1], ['1', 'IT', 'Bangalore, KA'])
        finally:
            os.unlink(temp_file_path)

    def test_file_not_found(self):
        reader = CSVReader("non_existent_file.csv")
        with self.assertRaises(FileNotFoundError):
            list(reader.read_in_chunks(chunk_size=10))

    def test_empty_file(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False) as f:
            temp_file_path = f.name
        try:
            chunks = list(CSVReader(temp_file_path, has_header=True).read_in_chunks(chunk_size=10))
            self.assertEqual(chunks, [])
        finally:
            os.unlink(temp_file_path)

    def test_invalid_chunk_size(self):
        with self.assertRaises(ValueError):
            list(CSVReader("any.csv").read_in_chunks(chunk_size=0))


class TestRecordParser(unittest.TestCase):
    """Test typed record coercion."""

    VALID_ROW = ['1', 'Asha', '30', 'Software Engineer', '75000.50', 'Alpha', '2018-04-01', 'IT']

    def setUp(self):
        self.parser = RecordParser()

    def test_parse_valid_employee(self):
        employee = self.parser.parse_employee(self.VALID_ROW)

        self.assertEqual(employee.emp_id, 1)
        self.assertEqual(employee.name, 'Asha')
        self.assertEqual(employee.age, 30)
        self.assertEqual(employee.salary, Decimal('75000.50'))
        self.assertIs(employee.project, Project.ALPHA)
        self.assertEqual(employee.join_date, date(2018, 4, 1))
        self.assertEqual(employee.department, 'IT')
        self.assertTrue(employee.is_complete())

    def test_empty_and_null_marker_fields_become_none(self):
        row = ['2', '', '\\N', 'Recruiter', '', 'Beta', '', 'HR']
        employee = self.parser.parse_employee(row)

        self.assertIsNone(employee.name)
        self.assertIsNone(employee.age)
        self.assertIsNone(employee.salary)
        self.assertIsNone(employee.join_date)
        self.assertFalse(employee.is_complete())

    def test_field_count_mismatch(self):
        with self.assertRaises(MalformedRecordError) as ctx:
            self.parser.parse_employee(self.VALID_ROW[:-1], source='employees.csv', line_number=7)
        self.assertEqual(ctx.exception.line_number, 7)
        self.assertIn('employees.csv:7', str(ctx.exception))

    def test_non_numeric_salary(self):
        row = list(self.VALID_ROW)
        row[4] = 'lots'
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_employee(row)

    def test_unknown_project(self):
        row = list(self.VALID_ROW)
        row[5] = 'Zeta'
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_employee(row)

    def test_project_is_case_insensitive(self):
        row = list(self.VALID_ROW)
        row[5] = 'omega'
        self.assertIs(self.parser.parse_employee(row).project, Project.OMEGA)

    def test_date_formats(self):
        test_dates = [
            ('2020-02-29', date(2020, 2, 29)),
            ('2020/02/29', date(2020, 2, 29)),
            ('29-Feb-2020', date(2020, 2, 29)),
            ('02/29/2020', date(2020, 2, 29)),
        ]
        for emp_id, (raw, expected) in enumerate(test_dates, start=10):
            row = list(self.VALID_ROW)
            row[0] = str(emp_id)
            row[6] = raw
            self.assertEqual(self.parser.parse_employee(row).join_date, expected, f"Failed for {raw}")

    def test_invalid_date(self):
        row = list(self.VALID_ROW)
        row[6] = '2020-13-45'
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_employee(row)

    def test_duplicate_emp_id(self):
        self.parser.parse_employee(self.VALID_ROW)
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_employee(self.VALID_ROW)

    def test_missing_emp_id(self):
        row = list(self.VALID_ROW)
        row[0] = ''
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_employee(row)

    def test_duplicate_department_name(self):
        self.parser.parse_department(['1', 'IT', 'Bangalore'])
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_department(['2', 'IT', 'Pune'])

    def test_skip_malformed_counts_dropped_rows(self):
        parser = RecordParser(skip_malformed=True)
        rows = [
            (1, self.VALID_ROW),
            (2, ['2', 'Bad', 'x', 'Role', '100', 'Alpha', '2019-01-01', 'IT']),
            (3, ['3', 'Short']),
        ]
        employees = parser.parse_employees(rows, source='employees.csv')

        self.assertEqual([e.emp_id for e in employees], [1])
        stats = parser.get_statistics()
        self.assertEqual(stats['records_processed'], 3)
        self.assertEqual(stats['records_dropped'], 2)
        self.assertEqual(stats['records_parsed'], 1)


class TestLoaders(unittest.TestCase):

    def test_load_employees_and_departments(self):
        employee_path = _write_csv([
            ['1', 'A', '25', 'Engineer', '100', 'Alpha', '2016-01-01', 'IT'],
            ['2', 'B', '35', 'Engineer', '200', 'Beta', '2014-06-30', 'IT'],
            ['3', 'C', '45', 'Recruiter', '50', 'Gamma', '2019-03-15', 'HR'],
        ])
        department_path = _write_csv([['1', 'IT', 'Bangalore'], ['2', 'HR', 'Mumbai']])
        try:
            employees = load_employees(employee_path, chunk_size=2)
            departments = load_departments(department_path)

            self.assertEqual([e.emp_id for e in employees], [1, 2, 3])
            self.assertEqual([d.department_name for d in departments], ['IT', 'HR'])
        finally:
            os.unlink(employee_path)
            os.unlink(department_path)

    def test_malformed_row_reports_line_number(self):
        employee_path = _write_csv([
            ['1', 'A', '25', 'Engineer', '100', 'Alpha', '2016-01-01', 'IT'],
            ['2', 'B', '35', 'Engineer', 'abc', 'Beta', '2014-06-30', 'IT'],
        ])
        try:
            with self.assertRaises(MalformedRecordError) as ctx:
                load_employees(employee_path)
            self.assertEqual(ctx.exception.line_number, 2)
            self.assertEqual(ctx.exception.source, employee_path)
        finally:
            os.unlink(employee_path)


if __name__ == '__main__':
    unittest.main()
