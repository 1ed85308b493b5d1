"""
Column break location.

Columns render top-aligned, so the first line of column 2 sits at or above
the last line of column 1. Walking a probe line by line from the section
start, the first vertical position that does not increase marks the wrap
from column 1 into column 2 (or across a page boundary).
"""

import logging
from typing import Optional, TYPE_CHECKING

from engine.base_processor import BaseProcessor
from engine.config import LocatorOptions
from models.column_types import TextSpan
from utils.scope_guards import screen_freeze
from utils.validation import MeasurementFailure, validate_break_point

if TYPE_CHECKING:
    from engine.column_engine import ColumnEngine

logger = logging.getLogger(__name__)


class ColumnBreakLocator(BaseProcessor):
    """Finds the offset where column 1 ends and column 2 begins."""

    required_operations = ("vertical_position", "advance_by_line")

    def __init__(self, engine: 'ColumnEngine', options: Optional[LocatorOptions] = None):
        super().__init__(engine)
        self.options = options or LocatorOptions()

    def locate(self, section: TextSpan) -> int:
        """
        Locate the column break inside a two-column section span.

        Args:
            section: Span of the section, already clipped to one page

        Returns:
            Offset satisfying section.start < offset <= section.end

        Raises:
            MeasurementFailure: If the span is empty or the probe runs away
        """
        if section.is_empty:
            raise MeasurementFailure(f"Cannot locate a column break in empty span {section!r}", section)

        with screen_freeze(self.engine.host):
            probe = TextSpan.at(section.start)
            last_position = self.layout.vertical_position(probe)

            for _ in range(self.options.max_probe_lines):
                next_probe = self.layout.advance_by_line(probe)

                # End of document, or the probe walked out of the section
                if next_probe.start <= probe.start or next_probe.start >= section.end:
                    return validate_break_point(section, section.end)

                position = self.layout.vertical_position(next_probe)
                if position <= last_position:
                    logger.debug(
                        f"Column break at {next_probe.start} in {section!r} "
                        f"(y {last_position:.2f} -> {position:.2f})"
                    )
                    return validate_break_point(section, next_probe.start)

                probe = next_probe
                last_position = position

        raise MeasurementFailure(
            f"No column break within {self.options.max_probe_lines} lines of {section!r}",
            section,
        )
