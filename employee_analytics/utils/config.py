# ========================
# employee_analytics/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the employee analytics pipeline with
environment variable support.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Configuration class for the pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Input files
        self.EMPLOYEE_FILE = os.getenv('PIPELINE_EMPLOYEE_FILE', 'data/raw/employees.csv')
        self.DEPARTMENT_FILE = os.getenv('PIPELINE_DEPARTMENT_FILE', 'data/raw/departments.csv')
        self.INPUT_HAS_HEADER = _env_bool('PIPELINE_INPUT_HAS_HEADER', 'true')
        self.DEFAULT_CHUNK_SIZE = int(os.getenv('PIPELINE_CHUNK_SIZE', '1000'))
        self.SKIP_MALFORMED = _env_bool('PIPELINE_SKIP_MALFORMED', 'false')

        # Output
        self.DEFAULT_OUTPUT_DIR = os.getenv('PIPELINE_OUTPUT_DIR', 'data/processed')
        self.FIELD_DELIMITER = os.getenv('PIPELINE_FIELD_DELIMITER', ',')
        self.EXPORT_FORMAT = os.getenv('PIPELINE_EXPORT_FORMAT', 'delimited')
        self.ECHO_TO_CONSOLE = _env_bool('PIPELINE_ECHO_TO_CONSOLE', 'false')

        # Query parameters
        self.STRICT_JOIN = _env_bool('PIPELINE_STRICT_JOIN', 'false')
        self.JOIN_YEAR_THRESHOLD = int(os.getenv('JOIN_YEAR_THRESHOLD', '2015'))
        self.PROJECT_FILTER = os.getenv('PROJECT_FILTER', 'Alpha')
        self.TOP_N = int(os.getenv('TOP_N', '3'))

        # Sample data
        self.DEFAULT_SAMPLE_EMPLOYEES = int(os.getenv('SAMPLE_EMPLOYEES', '1000'))

        # Logging
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_ROW_DETAIL = _env_bool('LOG_ROW_DETAIL', 'false')

        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def get_data_paths(self) -> Dict[str, Path]:
        """Get all configured data paths as Path objects."""
        return {
            'employee_file': Path(self.EMPLOYEE_FILE),
            'department_file': Path(self.DEPARTMENT_FILE),
            'output_dir': Path(self.DEFAULT_OUTPUT_DIR),
            'raw_data_dir': Path(self.EMPLOYEE_FILE).parent,
            'logs_dir': Path('logs')
        }

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        for path_name, path in self.get_data_paths().items():
            if path_name.endswith('_dir'):
                path.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['chunk_size'] = self.DEFAULT_CHUNK_SIZE > 0
        validations['top_n'] = self.TOP_N > 0
        validations['sample_employees'] = self.DEFAULT_SAMPLE_EMPLOYEES > 0
        validations['field_delimiter'] = len(self.FIELD_DELIMITER) == 1
        validations['export_format'] = self.EXPORT_FORMAT in ('delimited', 'json')
        validations['project_filter'] = self.PROJECT_FILTER in ('Alpha', 'Beta', 'Gamma', 'Delta', 'Omega')

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if not attr.startswith('_') and not callable(getattr(self, attr))
        }

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls(config_dict)

    def __str__(self) -> str:
        lines = ["Configuration Settings:"]
        for key, value in sorted(self.to_dict().items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
