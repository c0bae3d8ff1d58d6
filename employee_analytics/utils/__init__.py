# ========================
# employee_analytics/utils/__init__.py
# ========================

"""
Utilities Package

Common utilities and helper functions for the pipeline.
"""

from .config import Config
from .data_generator import DataGenerator
from .logging_setup import get_logger, setup_logging
from .performance_monitor import PerformanceMonitor, monitor_performance

__all__ = [
    'Config',
    'monitor_performance',
    'PerformanceMonitor',
    'setup_logging',
    'get_logger',
    'DataGenerator',
]
