"""
Column Alignment Entry Points

Run the column engine over a simulated document. Used by the HTTP service;
each call builds a fresh SimulatedLayout, so nothing is shared between calls.
"""

import logging
from typing import Optional, Tuple

from engine import ColumnEngine, EngineConfig, PageRange, SimulatedLayout
from models.column_types import (
    AlignmentOptions,
    ApplyReport,
    FindNextResult,
    SimulatedDocument,
    TextSpan,
)

DEFAULT_START_PAGE = 1

logger = logging.getLogger(__name__)


def align_columns(
    document: SimulatedDocument,
    options: Optional[AlignmentOptions] = None,
    start_page: int = DEFAULT_START_PAGE,
    end_page: Optional[int] = None,
) -> Tuple[ApplyReport, SimulatedDocument]:
    """Balance the two-column sections of a document and return it with updated spacing."""
    options = options or AlignmentOptions()
    layout = SimulatedLayout(document)
    config = EngineConfig(max_space_after=options.max_space_after)

    with ColumnEngine(layout, host=layout, config=config) as engine:
        report = engine.apply(PageRange(start=start_page, end=end_page))

    logger.info(
        f"Aligned {report.balanced} section(s) across {report.pages_scanned} page(s) "
        f"with {layout.recompute_count} layout recompute(s)"
    )
    return report, layout.to_document()


def find_uneven_columns(
    document: SimulatedDocument,
    selection_start: int = 0,
    wraparound: bool = False,
) -> FindNextResult:
    """Locate the next uneven two-column section after selection_start."""
    layout = SimulatedLayout(document)
    caret = min(selection_start, layout.document_span().end)
    layout.select(TextSpan.at(caret))

    with ColumnEngine(layout, host=layout) as engine:
        return engine.find_next(repeat=wraparound, confirm=lambda question: wraparound)
