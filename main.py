#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Employee Analytics Pipeline

Generates sample employee and department files, then loads, partitions,
queries and exports them.
"""

import sys

from employee_analytics.pipeline import EmployeeAnalyticsPipeline, PipelineError
from employee_analytics.utils import Config, DataGenerator, get_logger, setup_logging


def main():
    """Main execution function."""
    config = Config()

    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="pipeline.log",
        log_dir="logs",
        row_detail_on_console=config.LOG_ROW_DETAIL
    )

    logger = get_logger(__name__)
    logger.info("=" * 60)
    logger.info("EMPLOYEE ANALYTICS PIPELINE - MAIN EXECUTION")
    logger.info("=" * 60)

    invalid = [name for name, ok in config.validate_config().items() if not ok]
    if invalid:
        logger.error(f"Invalid configuration values: {', '.join(invalid)}")
        return 1

    try:
        config.ensure_directories()

        # Step 1: Generate sample data
        logger.info("Step 1: Generating sample data...")
        generator = DataGenerator(seed=42)
        generator.generate_departments(config.DEPARTMENT_FILE, include_header=config.INPUT_HAS_HEADER)
        generation_stats = generator.generate_employees(
            config.EMPLOYEE_FILE,
            num_rows=config.DEFAULT_SAMPLE_EMPLOYEES,
            include_header=config.INPUT_HAS_HEADER,
        )

        # Step 2: Run the pipeline
        logger.info("Step 2: Running pipeline...")
        pipeline = EmployeeAnalyticsPipeline(
            employee_file=config.EMPLOYEE_FILE,
            department_file=config.DEPARTMENT_FILE,
            output_dir=config.DEFAULT_OUTPUT_DIR,
            config=config
        )

        if not pipeline.validate_input():
            logger.error("Input validation failed. Exiting.")
            return 1

        results = pipeline.run()

        # Step 3: Print summary
        _print_execution_summary(results, generation_stats)

        logger.info("Pipeline execution completed successfully!")
        return 0

    except (PipelineError, OSError, ValueError) as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1


def _print_execution_summary(results: dict, generation_stats: dict) -> None:
    """Print final execution summary."""
    print("\n" + "=" * 70)
    print("PIPELINE EXECUTION SUMMARY")
    print("=" * 70)

    print("Sample data:")
    print(f"   - Employees generated: {generation_stats['total_rows']:,}")
    print(f"   - Rows with empty fields: {generation_stats['rows_with_nulls']:,}")
    print(f"   - Rows in unregistered departments: {generation_stats['rows_unregistered_department']:,}")

    ingest_stats = results['ingest_stats']
    print("\nIngest:")
    print(f"   - Records parsed: {ingest_stats['records_parsed']:,}")
    print(f"   - Records dropped: {ingest_stats['records_dropped']:,}")
    print(f"   - Department partitions: {len(results['partition_sizes'])}")

    print("\nQuery results:")
    for name, count in results['result_row_counts'].items():
        print(f"   - {name}: {count:,} rows")

    print(f"\nOutput directory: {results['output_directory']}")
    print("=" * 70)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
