# ========================
# employee_analytics/pipeline/storage.py
# ========================

"""
Data Storage Module

Exports query results as delimited text or JSON records, to the console
or to files in an output directory.
"""

import csv
import io
import json
import logging
import sys
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

from .errors import WriteError
from .models import EMPLOYEE_COLUMNS, QueryResult
from .partitioning import PartitionedEmployeeSet

logger = logging.getLogger(__name__)

NULL_TEXT = '\\N'
DEFAULT_PARTITION = '__HIVE_DEFAULT_PARTITION__'
PARTITION_FILE_NAME = '000000_0'
EXPORT_FORMATS = ('delimited', 'json')


def _format_value(value: Any) -> str:
    if value is None:
        return NULL_TEXT
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _partition_dir_name(column: str, value: Any) -> str:
    """Build a column=value directory name with path characters percent-escaped."""
    if value is None:
        return f"{column}={DEFAULT_PARTITION}"
    return f"{column}={quote(str(value), safe=' ')}"


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class ResultExporter:
    """
    Writes QueryResult objects in delimited (headerless) or JSON form.
    """

    def __init__(self, output_dir: Optional[str] = None,
                 delimiter: str = ',',
                 export_format: str = 'delimited'):
        """
        Initialize the exporter.

        Args:
            output_dir (str): Directory for output files; console-only when None
            delimiter (str): Field separator for delimited output
            export_format (str): 'delimited' or 'json'

        Raises:
            WriteError: If the output directory cannot be created
        """
        if export_format not in EXPORT_FORMATS:
            raise ValueError(f"export_format must be one of {EXPORT_FORMATS}, got {export_format!r}")
        if len(delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {delimiter!r}")

        self.delimiter = delimiter
        self.export_format = export_format
        self.output_dir = Path(output_dir) if output_dir is not None else None
        if self.output_dir is not None:
            self._ensure_dir(self.output_dir)
        logger.info(
            f"ResultExporter initialized (output_dir={self.output_dir}, "
            f"format={export_format}, delimiter={delimiter!r})"
        )

    @property
    def file_extension(self) -> str:
        return '.json' if self.export_format == 'json' else '.csv'

    def format_result(self, result: QueryResult) -> str:
        """Render a result in the configured format."""
        if self.export_format == 'json':
            return json.dumps(result.to_records(), indent=2, default=_json_default, ensure_ascii=False) + '\n'
        return self._format_delimited(result.rows)

    def _format_delimited(self, rows: Iterable[tuple]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator='\n')
        for row in rows:
            writer.writerow([_format_value(value) for value in row])
        return buffer.getvalue()

    def write_to_console(self, result: QueryResult, stream=None) -> None:
        """Print a result to stdout or the given text stream."""
        stream = stream or sys.stdout
        stream.write(f"-- {result.name} ({len(result)} rows)\n")
        stream.write(self.format_result(result))

    def save_result(self, result: QueryResult, file_name: Optional[str] = None) -> str:
        """
        Save one result into the output directory.

        Args:
            result (QueryResult): Result to write
            file_name (str): File name; defaults to the result name plus extension

        Returns:
            str: Path of the written file
        """
        if self.output_dir is None:
            raise ValueError("ResultExporter has no output_dir; use write_to_console")
        file_path = self.output_dir / (file_name or f"{result.name}{self.file_extension}")
        self._write_text(file_path, self.format_result(result))
        logger.info(f"Saved {len(result)} records to {file_path}")
        return str(file_path)

    def save_all_results(self, results: Iterable[QueryResult]) -> Dict[str, str]:
        """
        Save every result plus a JSON summary of row counts.

        Returns:
            dict: Mapping of result name to saved file path
        """
        saved_files = {}
        row_counts = {}
        for result in results:
            saved_files[result.name] = self.save_result(result)
            row_counts[result.name] = len(result)

        saved_files['summary'] = self._save_summary({
            'results': row_counts,
            'format': self.export_format,
            'delimiter': self.delimiter,
        })
        logger.info(f"All results saved successfully to {len(saved_files)} files")
        return saved_files

    def save_partitions(self, partitioned: PartitionedEmployeeSet,
                        table_name: str = 'employees_partitioned') -> Dict[str, str]:
        """
        Lay the partitioned employee table out as department=<value> directories.

        The department column is carried by the directory name, so it is
        left out of the row data, as in a Hive partitioned table.

        Returns:
            dict: Mapping of partition directory name to data file path
        """
        if self.output_dir is None:
            raise ValueError("ResultExporter has no output_dir")
        table_dir = self.output_dir / table_name
        department_index = EMPLOYEE_COLUMNS.index('department')
        written = {}
        for department, employees in partitioned.items():
            partition_name = _partition_dir_name('department', department)
            partition_dir = table_dir / partition_name
            self._ensure_dir(partition_dir)
            rows = (employee.as_row()[:department_index] for employee in employees)
            file_path = partition_dir / PARTITION_FILE_NAME
            self._write_text(file_path, self._format_delimited(rows))
            written[partition_name] = str(file_path)
        logger.info(f"Wrote {len(written)} partitions under {table_dir}")
        return written

    def _save_summary(self, summary_data: Dict[str, Any]) -> str:
        file_path = self.output_dir / "query_summary.json"
        self._write_text(file_path, json.dumps(summary_data, indent=2, ensure_ascii=False))
        logger.info(f"Summary saved to {file_path}")
        return str(file_path)

    def create_data_dictionary(self, results: Iterable[QueryResult]) -> str:
        """Write DATA_DICTIONARY.md describing every exported result."""
        file_path = self.output_dir / "DATA_DICTIONARY.md"
        lines = [
            "# Data Dictionary",
            "",
            "Result files carry no header row; columns appear in the order listed below.",
            f"Format: {self.export_format}. Null values are written as `{NULL_TEXT}`.",
            "",
        ]
        for number, result in enumerate(results, start=1):
            lines.append(f"## {number}. {result.name}{self.file_extension}")
            lines.append("")
            lines.append("| Position | Column |")
            lines.append("|----------|--------|")
            for position, column in enumerate(result.columns, start=1):
                lines.append(f"| {position} | {column} |")
            lines.append("")
        self._write_text(file_path, "\n".join(lines))
        logger.info(f"Data dictionary created at {file_path}")
        return str(file_path)

    def _ensure_dir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create directory {path}: {e}")
            raise WriteError(path, str(e)) from e

    def _write_text(self, file_path: Path, content: str) -> None:
        try:
            with open(file_path, 'w', newline='', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error writing file {file_path}: {e}")
            raise WriteError(file_path, str(e)) from e
