"""
Employee Analytics

Loads employee and department CSV files, partitions employees by
department, runs analytical queries and exports the results.
"""

__version__ = "1.0.0"
