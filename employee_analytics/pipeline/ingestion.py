# ========================
# employee_analytics/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Reads delimited source files in chunks and turns them into typed records.
"""

import csv
import logging
from typing import List, Optional, Tuple

from .cleaning import RecordParser
from .models import Department, Employee

logger = logging.getLogger(__name__)

RawRow = Tuple[int, List[str]]


class CSVReader:
    """
    A memory-efficient CSV reader that reads a file in chunks.
    Rows are yielded as plain lists in source column order, each paired
    with its line number so parse errors can point at the offending row.
    """

    def __init__(self, file_path, delimiter: str = ',', has_header: bool = False):
        """
        Initialize the CSV reader.

        Args:
            file_path (str): Path to the CSV file to read
            delimiter (str): Field separator
            has_header (bool): Skip the first row when True
        """
        self.file_path = str(file_path)
        self.delimiter = delimiter
        self.has_header = has_header
        self.header = []
        logger.info(f"Initialized CSVReader for file: {self.file_path}")

    def read_in_chunks(self, chunk_size: int):
        """
        A generator that yields lists of (line_number, row) pairs.

        Args:
            chunk_size (int): The number of rows to yield per chunk.

        Yields:
            list[tuple[int, list[str]]]: A chunk of numbered rows.
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        try:
            with open(self.file_path, 'r', newline='', encoding='utf-8') as f:
                reader = csv.reader(f, delimiter=self.delimiter)

                chunk = []
                row_count = 0
                header_pending = self.has_header

                for row in reader:
                    if header_pending:
                        header_pending = False
                        self.header = row
                        logger.info(f"CSV header: {self.header}")
                        continue
                    if not row:
                        continue

                    chunk.append((reader.line_num, row))
                    row_count += 1

                    if len(chunk) == chunk_size:
                        logger.debug(f"Yielding chunk with {len(chunk)} rows")
                        yield chunk
                        chunk = []

                if chunk:
                    logger.debug(f"Yielding final chunk with {len(chunk)} rows")
                    yield chunk

                logger.info(f"Total rows read from {self.file_path}: {row_count}")

        except FileNotFoundError:
            logger.error(f"File '{self.file_path}' was not found")
            raise
        except csv.Error as e:
            logger.error(f"Error reading CSV file {self.file_path}: {e}")
            raise


def load_employees(file_path,
                   parser: Optional[RecordParser] = None,
                   chunk_size: int = 1000,
                   delimiter: str = ',',
                   has_header: bool = False) -> List[Employee]:
    """
    Read and parse an employee file.

    Args:
        file_path (str): Employee source file
        parser (RecordParser): Parser to use; a strict one is created if omitted
        chunk_size (int): Rows per chunk
        delimiter (str): Field separator
        has_header (bool): Whether the first row is a header

    Returns:
        list[Employee]: Records in file order
    """
    parser = parser or RecordParser()
    reader = CSVReader(file_path, delimiter=delimiter, has_header=has_header)
    employees = []
    for chunk in reader.read_in_chunks(chunk_size):
        employees.extend(parser.parse_employees(chunk, source=reader.file_path))
    logger.info(f"Loaded {len(employees)} employees from {reader.file_path}")
    return employees


def load_departments(file_path,
                     parser: Optional[RecordParser] = None,
                     chunk_size: int = 1000,
                     delimiter: str = ',',
                     has_header: bool = False) -> List[Department]:
    """Read and parse a department file."""
    parser = parser or RecordParser()
    reader = CSVReader(file_path, delimiter=delimiter, has_header=has_header)
    departments = []
    for chunk in reader.read_in_chunks(chunk_size):
        departments.extend(parser.parse_departments(chunk, source=reader.file_path))
    logger.info(f"Loaded {len(departments)} departments from {reader.file_path}")
    return departments
