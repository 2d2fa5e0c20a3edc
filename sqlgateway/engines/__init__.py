"""
Engines: SQL statement classification and execution.
"""

from sqlgateway.engines.sql import classify, execute_statement, run_statement

__all__ = [
    "classify",
    "execute_statement",
    "run_statement",
]
