# ========================
# employee_analytics/pipeline/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Coordinates ingest, partitioning, querying and export for one batch run.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .cleaning import RecordParser
from .ingestion import load_departments, load_employees
from .partitioning import partition_by_department
from .storage import ResultExporter
from .transformation import QueryEngine
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)


class EmployeeAnalyticsPipeline:
    """
    Orchestrates the employee analytics pipeline.
    Loads both datasets, partitions employees, runs every query and
    exports the results.
    """

    def __init__(self,
                 employee_file: str,
                 department_file: str,
                 output_dir: str,
                 config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            employee_file (str): Path to the employee CSV file
            department_file (str): Path to the department CSV file
            output_dir (str): Directory for output files
            config (Config): Configuration object
        """
        self.employee_file = str(employee_file)
        self.department_file = str(department_file)
        self.output_dir = str(output_dir)
        self.config = config or Config()

        self.parser = None

        logger.info("EmployeeAnalyticsPipeline initialized:")
        logger.info(f"  Employees: {self.employee_file}")
        logger.info(f"  Departments: {self.department_file}")
        logger.info(f"  Output: {self.output_dir}")

    def run(self) -> Dict[str, Any]:
        """
        Execute the complete pipeline from start to finish.

        Returns:
            dict: Summary of processing results and saved files
        """
        logger.info("Starting employee analytics pipeline...")
        # Duplicate-key tracking and counters are per run
        self.parser = RecordParser(skip_malformed=self.config.SKIP_MALFORMED)
        read_options = {
            'parser': self.parser,
            'chunk_size': self.config.DEFAULT_CHUNK_SIZE,
            'delimiter': self.config.FIELD_DELIMITER,
            'has_header': self.config.INPUT_HAS_HEADER,
        }

        with monitor_performance("EmployeeAnalytics") as monitor:
            employees = load_employees(self.employee_file, **read_options)
            departments = load_departments(self.department_file, **read_options)
            monitor.update_progress(len(employees) + len(departments))
            monitor.add_checkpoint('ingest', {'employees': len(employees), 'departments': len(departments)})

            partitioned = partition_by_department(employees)
            monitor.add_checkpoint('partition', {'partitions': len(partitioned)})

            engine = QueryEngine(partitioned, departments, strict_join=self.config.STRICT_JOIN)
            results = engine.run_all(
                year=self.config.JOIN_YEAR_THRESHOLD,
                project=self.config.PROJECT_FILTER,
                top_n=self.config.TOP_N,
            )
            monitor.add_checkpoint('query', {'results': len(results)})

            exporter = ResultExporter(
                self.output_dir,
                delimiter=self.config.FIELD_DELIMITER,
                export_format=self.config.EXPORT_FORMAT,
            )
            if self.config.ECHO_TO_CONSOLE:
                for result in results:
                    exporter.write_to_console(result)
            saved_files = exporter.save_all_results(results)
            saved_files['data_dictionary'] = exporter.create_data_dictionary(results)
            partition_files = exporter.save_partitions(partitioned)
            monitor.add_checkpoint('export', {'files': len(saved_files) + len(partition_files)})

        summary = {
            'pipeline_status': 'completed',
            'employee_file': self.employee_file,
            'department_file': self.department_file,
            'output_directory': self.output_dir,
            'saved_files': saved_files,
            'partition_files': partition_files,
            'result_row_counts': {result.name: len(result) for result in results},
            'partition_sizes': partitioned.partition_sizes(),
            'ingest_stats': self.parser.get_statistics(),
            'performance': monitor.summary,
        }

        logger.info("Pipeline finished successfully.")
        self._log_final_summary(summary)
        return summary

    def _log_final_summary(self, summary: Dict[str, Any]) -> None:
        logger.info("=" * 60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("=" * 60)

        ingest_stats = summary['ingest_stats']
        logger.info(f"Records parsed: {ingest_stats['records_parsed']:,}")
        logger.info(f"Records dropped: {ingest_stats['records_dropped']:,}")
        logger.info(f"Partitions: {len(summary['partition_sizes'])}")
        logger.info(f"Output directory: {summary['output_directory']}")

        logger.info("Query results:")
        for name, count in summary['result_row_counts'].items():
            logger.info(f"  - {name}: {count} rows")

        logger.info("=" * 60)

    def validate_input(self) -> bool:
        """
        Validate both input files exist and are readable.

        Returns:
            bool: True if input is valid
        """
        for input_file in (self.employee_file, self.department_file):
            input_path = Path(input_file)
            if not input_path.exists():
                logger.error(f"Input file does not exist: {input_file}")
                return False

            if not input_path.is_file():
                logger.error(f"Input path is not a file: {input_file}")
                return False

            try:
                with open(input_path, 'r', encoding='utf-8') as f:
                    f.readline()
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Cannot read input file {input_file}: {e}")
                return False

        logger.info("Input validation passed")
        return True
