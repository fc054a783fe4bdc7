"""
Cookbook Adapters.

Implementations of the TextSearchBackend protocol, one per storage engine.
The active adapter is resolved by cookbook.conf.get_search_backend().
"""

from cookbook.adapters.contains import ContainsTextSearch
from cookbook.adapters.mysql import MySQLTextSearch
from cookbook.adapters.postgres import PostgresTextSearch

__all__ = [
    "ContainsTextSearch",
    "MySQLTextSearch",
    "PostgresTextSearch",
]
