"""
SQL statement engine: verb classification and execution with commit policy.

Exports: classify, run_statement, execute_statement.
"""

from sqlgateway.engines.sql.classifier import classify
from sqlgateway.engines.sql.executor import execute_statement, run_statement

__all__ = [
    "classify",
    "execute_statement",
    "run_statement",
]
