# ========================
# tests/test_orchestrator.py
# ========================

import csv
import json
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from employee_analytics.pipeline.errors import MalformedRecordError
from employee_analytics.pipeline.orchestrator import EmployeeAnalyticsPipeline
from employee_analytics.utils.config import Config
from employee_analytics.utils.data_generator import DataGenerator


class TestEmployeeAnalyticsPipeline(unittest.TestCase):
    """End-to-end runs over small files."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.employee_file = self.temp_dir / 'employees.csv'
        self.department_file = self.temp_dir / 'departments.csv'
        self.output_dir = self.temp_dir / 'out'

        with open(self.employee_file, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerows([
                ['emp_id', 'name', 'age', 'job_role', 'salary', 'project', 'join_date', 'department'],
                ['1', 'A', '25', 'Engineer', '100', 'Alpha', '2016-01-01', 'IT'],
                ['2', 'B', '35', 'Engineer', '200', 'Beta', '2014-06-30', 'IT'],
                ['3', 'C', '45', 'Recruiter', '50', 'Alpha', '2019-03-15', 'HR'],
                ['4', 'D', '', 'Counsel', '300', 'Omega', '2020-01-01', 'Legal'],
            ])
        with open(self.department_file, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerows([
                ['dept_id', 'department_name', 'location'],
                ['1', 'IT', 'Bangalore'],
                ['2', 'HR', 'Mumbai'],
            ])

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _pipeline(self, **overrides):
        config = Config({'input_has_header': True, 'join_year_threshold': 2015,
                         'project_filter': 'Alpha', 'top_n': 3, **overrides})
        return EmployeeAnalyticsPipeline(self.employee_file, self.department_file, self.output_dir, config=config)

    def test_run_exports_every_result(self):
        pipeline = self._pipeline()
        self.assertTrue(pipeline.validate_input())

        summary = pipeline.run()

        self.assertEqual(summary['pipeline_status'], 'completed')
        counts = summary['result_row_counts']
        self.assertEqual(counts['employees_joined_after_2015'], 3)
        self.assertEqual(counts['employees_in_alpha'], 2)
        self.assertEqual(counts['employees_with_location'], 3)
        self.assertEqual(counts['complete_records'], 3)
        self.assertEqual(counts['department_with_most_employees'], 1)
        self.assertEqual(summary['partition_sizes'], {'IT': 2, 'HR': 1, 'Legal': 1})
        self.assertEqual(summary['ingest_stats']['records_parsed'], 6)

        averages = Path(summary['saved_files']['avg_salary_by_department']).read_text(encoding='utf-8')
        self.assertEqual(averages.splitlines(), ['HR,50', 'IT,150', 'Legal,300'])

        above = Path(summary['saved_files']['above_department_average']).read_text(encoding='utf-8')
        self.assertEqual(above.splitlines(), ['2,B,IT,200,150'])

        for path in summary['saved_files'].values():
            self.assertTrue(os.path.exists(path), path)
        for path in summary['partition_files'].values():
            self.assertTrue(os.path.exists(path), path)
        self.assertIsNotNone(summary['performance'])

    def test_json_export_format(self):
        summary = self._pipeline(export_format='json').run()
        path = summary['saved_files']['department_with_most_employees']

        self.assertTrue(path.endswith('.json'))
        with open(path, encoding='utf-8') as f:
            self.assertEqual(json.load(f), [{'department': 'IT', 'employee_count': 2}])

    def test_malformed_input_aborts_run(self):
        with open(self.employee_file, 'a', newline='') as f:
            csv.writer(f).writerow(['5', 'E', '30', 'Engineer', 'n/a', 'Alpha', '2020-01-01', 'IT'])

        with self.assertRaises(MalformedRecordError):
            self._pipeline().run()

    def test_skip_malformed_continues(self):
        with open(self.employee_file, 'a', newline='') as f:
            csv.writer(f).writerow(['5', 'E', '30', 'Engineer', 'n/a', 'Alpha', '2020-01-01', 'IT'])

        summary = self._pipeline(skip_malformed=True).run()
        self.assertEqual(summary['ingest_stats']['records_dropped'], 1)

    def test_run_twice_gives_same_results(self):
        pipeline = self._pipeline()

        first = pipeline.run()
        second = pipeline.run()

        self.assertEqual(second['result_row_counts'], first['result_row_counts'])
        self.assertEqual(second['ingest_stats'], first['ingest_stats'])
        self.assertEqual(second['ingest_stats']['records_processed'], 6)

    def test_validate_input_missing_file(self):
        pipeline = EmployeeAnalyticsPipeline(self.temp_dir / 'missing.csv', self.department_file, self.output_dir)
        self.assertFalse(pipeline.validate_input())

    def test_generated_data_runs_end_to_end(self):
        generator = DataGenerator(seed=1)
        generator.generate_departments(str(self.department_file))
        stats = generator.generate_employees(str(self.employee_file), num_rows=200)

        summary = self._pipeline().run()

        self.assertEqual(summary['ingest_stats']['records_parsed'], 200 + len(DataGenerator.DEPARTMENTS))
        self.assertEqual(sum(summary['partition_sizes'].values()), stats['total_rows'])


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Config()
        self.assertEqual(config.TOP_N, 3)
        self.assertEqual(config.FIELD_DELIMITER, ',')
        self.assertEqual(config.EXPORT_FORMAT, 'delimited')
        self.assertFalse(config.STRICT_JOIN)
        self.assertTrue(all(config.validate_config().values()))

    def test_environment_overrides(self):
        env = {'TOP_N': '5', 'PIPELINE_STRICT_JOIN': 'true', 'PIPELINE_FIELD_DELIMITER': '|'}
        with mock.patch.dict(os.environ, env, clear=True):
            config = Config()
        self.assertEqual(config.TOP_N, 5)
        self.assertTrue(config.STRICT_JOIN)
        self.assertEqual(config.FIELD_DELIMITER, '|')

    def test_dict_overrides_and_validation(self):
        config = Config({'top_n': 0, 'export_format': 'xml'})
        validations = config.validate_config()
        self.assertFalse(validations['top_n'])
        self.assertFalse(validations['export_format'])

    def test_save_and_load_round_trip(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, 'config.json')
            Config({'top_n': 7}).save_to_file(path)
            self.assertEqual(Config.load_from_file(path).TOP_N, 7)


if __name__ == '__main__':
    unittest.main()
