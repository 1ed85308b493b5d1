"""
Error types and argument validation for column alignment.

Section-level errors (MeasurementFailure) are recovered by the page walker;
UndoRecordError and ConfigurationError propagate to the caller.
"""

import logging
from typing import Optional, Tuple

from models.column_types import Section, TextSpan

logger = logging.getLogger(__name__)

TWO_COLUMNS = 2


class ColumnAlignmentError(Exception):
    """Base exception for column alignment errors"""
    pass


class MeasurementFailure(ColumnAlignmentError):
    """The layout host could not report a position for a point"""

    def __init__(self, message: str, span: Optional[TextSpan] = None):
        super().__init__(message)
        self.span = span


class UndoRecordError(ColumnAlignmentError):
    """The undo record wrapping an apply pass could not be opened or closed"""
    pass


class ConfigurationError(ColumnAlignmentError):
    """Invalid engine configuration"""
    pass


def validate_section(section: Section) -> Tuple[bool, Optional[str]]:
    """
    Check that a section can be split into two columns.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if section.column_count != TWO_COLUMNS:
        return False, f"Section has {section.column_count} column(s), expected {TWO_COLUMNS}"

    if section.span.is_empty:
        return False, f"Section {section.span!r} is empty"

    return True, None


def is_two_column(section: Section) -> bool:
    return section.column_count == TWO_COLUMNS


def validate_break_point(span: TextSpan, offset: int) -> int:
    """
    Clamp a probed break offset into (span.start, span.end].

    Raises:
        MeasurementFailure: If the span is empty, so no valid break exists
    """
    if span.is_empty:
        raise MeasurementFailure(f"Cannot locate a column break in empty span {span!r}", span)

    clamped = min(max(offset, span.start + 1), span.end)
    if clamped != offset:
        logger.debug(f"Break point {offset} clamped to {clamped} within {span!r}")
    return clamped
