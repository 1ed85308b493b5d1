"""
Column state extraction.

Splits a two-column section at its break point and measures where each
column ends. Pure measurement: nothing here mutates the document.
"""

import logging
from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

from engine.base_processor import BaseProcessor
from models.column_types import Section, TextSpan
from utils.validation import MeasurementFailure, validate_section

if TYPE_CHECKING:
    from engine.column_engine import ColumnEngine
    from engine.layout_facade import LayoutFacade

logger = logging.getLogger(__name__)


@dataclass
class ColumnDescriptor:
    """
    One column of a section and its last measured bottom position.

    y_position is a cache: it is only valid right after a layout recompute
    and must be refreshed after any spacing change.
    """
    span: TextSpan
    bottom_anchor: TextSpan
    y_position: float

    def refresh(self, layout: 'LayoutFacade') -> float:
        """Re-measure the bottom anchor."""
        self.y_position = measure(layout, self.bottom_anchor)
        return self.y_position


def measure(layout: 'LayoutFacade', point: TextSpan) -> float:
    """Vertical position of a point, with host errors mapped to MeasurementFailure."""
    try:
        return float(layout.vertical_position(point))
    except MeasurementFailure:
        raise
    except Exception as e:
        raise MeasurementFailure(f"No vertical position for {point!r}: {e}", point) from e


class ColumnStateExtractor(BaseProcessor):
    """Builds the (column 1, column 2) descriptor pair for a section."""

    required_operations = ("vertical_position",)

    def __init__(self, engine: 'ColumnEngine'):
        super().__init__(engine)

    def extract(self, section: Section) -> Tuple[ColumnDescriptor, ColumnDescriptor]:
        """
        Measure both columns of a section.

        Returns:
            Descriptors in column order, not sorted by height

        Raises:
            MeasurementFailure: If the section cannot be split or measured
        """
        is_valid, error = validate_section(section)
        if not is_valid:
            raise MeasurementFailure(error, section.span)

        break_point = self.engine.locator.locate(section.span)
        first_span, second_span = section.span.split_at(break_point)

        # Anchors sit on each column's last character
        first = ColumnDescriptor(
            span=first_span,
            bottom_anchor=TextSpan.at(break_point - 1),
            y_position=0.0,
        )
        second = ColumnDescriptor(
            span=second_span,
            bottom_anchor=TextSpan.at(section.span.end - 1),
            y_position=0.0,
        )
        first.refresh(self.layout)
        second.refresh(self.layout)

        logger.debug(
            f"Section {section.span!r}: break at {break_point}, "
            f"bottoms {first.y_position:.2f} / {second.y_position:.2f}"
        )
        return first, second
