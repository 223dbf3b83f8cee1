"""
Utility functions and helper classes
"""

from .logger import setup_logger
from .schema_analyzer import SchemaAnalyzer

__all__ = [
    'setup_logger',
    'SchemaAnalyzer'
]
