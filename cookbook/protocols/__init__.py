"""
Cookbook Protocols.

Defines interfaces for storage-engine specific behaviour.
"""

from cookbook.protocols.search import TextSearchBackend

__all__ = [
    "TextSearchBackend",
]
