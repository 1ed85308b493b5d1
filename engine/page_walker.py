"""
Page walking for column alignment.

Walks a page range, keeps the sections laid out in two columns, and either
balances them (apply) or stops at the first uneven one (find_next). A section
that fails to measure or balance is recorded and the walk moves on.
"""

import logging
from typing import Callable, List, Optional, TYPE_CHECKING

from engine.config import PageRange
from models.column_types import (
    ApplyReport,
    FindNextResult,
    Section,
    SectionOutcome,
    SectionStatus,
    TextSpan,
)
from utils.scope_guards import screen_freeze, undo_record
from utils.validation import is_two_column

if TYPE_CHECKING:
    from engine.column_engine import ColumnEngine

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "No uneven columns found"
WRAPAROUND_QUESTION = "No uneven columns found. Search again from the start of the document?"

ProgressCallback = Callable[[int], None]
ConfirmCallback = Callable[[str], bool]


class PageWalker:
    """Drives extraction and balancing across pages."""

    def __init__(self, engine: 'ColumnEngine', on_progress: Optional[ProgressCallback] = None):
        self.engine = engine
        self.on_progress = on_progress

    @property
    def layout(self):
        return self.engine.layout

    # Apply

    def apply(self, page_range: Optional[PageRange] = None) -> ApplyReport:
        """
        Balance every uneven two-column section in the page range.

        Args:
            page_range: Pages to walk; defaults to the pages covered by the
                current selection

        Returns:
            ApplyReport with one outcome per two-column section

        Raises:
            UndoRecordError: If the undo record cannot be opened or closed
        """
        config = self.engine.config
        report = ApplyReport()

        with undo_record(self.engine.host, config.undo_record_name, self.layout):
            pages = self._resolve_pages(page_range)
            if pages:
                report.first_page, report.last_page = pages[0], pages[-1]
            logger.info(f"Aligning columns on {len(pages)} page(s)")

            for page_number in pages:
                self._yield_if_due(page_number)
                report.pages_scanned += 1

                with screen_freeze(self.engine.host):
                    for outcome in self._apply_page(page_number):
                        report.outcomes.append(outcome)

        logger.info(
            f"Column alignment done: {report.balanced} balanced, "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        return report

    def _apply_page(self, page_number: int) -> List[SectionOutcome]:
        try:
            sections = self._two_column_sections(page_number)
        except Exception as e:
            logger.warning(f"Page {page_number}: could not enumerate sections: {e}")
            return [SectionOutcome(page_number=page_number, status=SectionStatus.FAILED, reason=str(e))]

        return [self._apply_section(page_number, section) for section in sections]

    def _apply_section(self, page_number: int, section: Section) -> SectionOutcome:
        try:
            columns = self.engine.extractor.extract(section)
            positions_before = [column.y_position for column in columns]

            # Exact comparison: sub-unit differences still count as uneven
            if columns[0].y_position == columns[1].y_position:
                logger.debug(f"Page {page_number}: section {section.span!r} already even")
                return SectionOutcome(
                    page_number=page_number,
                    span=section.span,
                    status=SectionStatus.SKIPPED,
                    reason="columns already even",
                    positions_before=positions_before,
                    positions_after=positions_before,
                )

            ordered = sorted(columns, key=lambda column: column.y_position)
            result = self.engine.balancer.balance(ordered)

        except Exception as e:
            logger.warning(f"Page {page_number}: section {section.span!r} failed: {e}")
            return SectionOutcome(
                page_number=page_number,
                span=section.span,
                status=SectionStatus.FAILED,
                reason=str(e),
            )

        logger.debug(
            f"Page {page_number}: section {section.span!r} balanced "
            f"({result.stop_reason.value} after {result.iterations} pass(es))"
        )
        return SectionOutcome(
            page_number=page_number,
            span=section.span,
            status=SectionStatus.BALANCED,
            positions_before=positions_before,
            positions_after=[column.y_position for column in columns],
            balance=result,
        )

    # Find next

    def find_next(
        self,
        repeat: bool = True,
        confirm: Optional[ConfirmCallback] = None,
        _passes: int = 1,
    ) -> FindNextResult:
        """
        Select the bottom line of the next uneven section after the caret.

        A hit whose selection still contains the caller's selection is the
        one already under review and is passed over.

        Args:
            repeat: Offer a restart from the document start when nothing is
                found; the restarted pass never offers again
            confirm: Asked whether to restart; no callback means no restart

        Returns:
            FindNextResult; found=False is the "nothing found" outcome
        """
        original = self.layout.selection()
        action_span = TextSpan(start=original.start, end=self.layout.document_span().end)
        pages = self.layout.page_range(action_span)

        # Starting on page 1 already covered the whole document
        if pages.first_page < 2:
            repeat = False

        for page_number in range(pages.first_page, pages.last_page + 1):
            self._yield_if_due(page_number)

            try:
                with screen_freeze(self.engine.host):
                    hit = self._find_on_page(page_number, original, _passes)
            except Exception as e:
                logger.warning(f"Page {page_number}: search failed: {e}")
                continue

            if hit is not None:
                return hit

        if not repeat or confirm is None or not confirm(WRAPAROUND_QUESTION):
            logger.info(f"{NOT_FOUND_MESSAGE} after {_passes} pass(es)")
            return FindNextResult(found=False, passes=_passes, wrapped=_passes > 1, message=NOT_FOUND_MESSAGE)

        start = self.layout.document_span().start
        self.layout.select(TextSpan(start=start, end=min(start + 1, self.layout.document_span().end)))
        return self.find_next(repeat=False, confirm=confirm, _passes=_passes + 1)

    def _find_on_page(self, page_number: int, original: TextSpan, passes: int) -> Optional[FindNextResult]:
        for section in self._two_column_sections(page_number):
            first, second = self.engine.extractor.extract(section)
            if first.y_position == second.y_position:
                continue

            selection = self.layout.select(first.bottom_anchor, extend_to_line_start=True)
            if selection.contains(original):
                continue

            logger.info(f"Uneven columns on page {page_number} at {section.span!r}")
            return FindNextResult(
                found=True,
                page_number=page_number,
                section_span=section.span,
                selection=selection,
                positions=[first.y_position, second.y_position],
                passes=passes,
                wrapped=passes > 1,
            )

        return None

    # Helpers

    def _resolve_pages(self, page_range: Optional[PageRange]) -> List[int]:
        if page_range is None:
            page_range = PageRange.from_page_span(self.layout.page_range(self.layout.selection()))
        return page_range.to_page_numbers(self.layout.total_pages())

    def _two_column_sections(self, page_number: int) -> List[Section]:
        page_span = self.layout.page_span(page_number)
        return [
            section for section in self.layout.sections_within_page(page_span)
            if is_two_column(section)
        ]

    def _yield_if_due(self, page_number: int) -> None:
        if self.on_progress is not None and page_number % self.engine.config.progress_interval_pages == 0:
            self.on_progress(page_number)
