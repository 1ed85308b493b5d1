"""
Column Alignment Processors

Stateful components bound to a ColumnEngine:

- ColumnBreakLocator: finds where column 1 wraps into column 2
- ColumnStateExtractor: splits a section and measures both column bottoms
- ColumnHeightBalancer: grows paragraph trailing space until the bottoms meet

These differ from utils/ which contains stateless helpers and scope guards.
"""

from processors.column_break_locator import ColumnBreakLocator
from processors.column_state import ColumnDescriptor, ColumnStateExtractor
from processors.column_balancer import ColumnHeightBalancer

__version__ = "1.0.0"
__all__ = [
    'ColumnBreakLocator',
    'ColumnDescriptor',
    'ColumnStateExtractor',
    'ColumnHeightBalancer',
]
