"""
Simulated layout host.

A deterministic, analytic stand-in for a real pagination engine. It
implements both LayoutFacade and HostSession so the engine can be exercised
without a word processor:

- every line holds `chars_per_line` characters of the flattened text
- sections stack vertically from the page's top margin; a two-column
  section is as tall as its taller column
- a line sits below the earlier paragraphs of its column (their lines plus
  their trailing space)
- spacing changes stay pending until recompute_layout()
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from models.column_types import (
    PageSpanRange,
    Section,
    SimulatedDocument,
    SimulatedParagraph,
    SimulatedPage,
    SimulatedSection,
    TextSpan,
)
from utils.validation import MeasurementFailure

logger = logging.getLogger(__name__)


@dataclass
class _ParagraphSlot:
    page: int  # 0-based
    section: int  # index within the page
    column: int
    span: TextSpan
    lines: int
    line_height: float


@dataclass
class _Line:
    start: int
    end: int
    y: float


class SimulatedLayout:
    """Analytic layout engine over a SimulatedDocument."""

    def __init__(self, document: SimulatedDocument):
        self.document = document
        self.chars_per_line = document.chars_per_line
        self.top_margin = document.top_margin

        self._slots: List[_ParagraphSlot] = []
        self._slot_index: Dict[TextSpan, int] = {}
        self._page_spans: List[TextSpan] = []
        self._page_starts: List[int] = []
        self._section_spans: List[List[TextSpan]] = []
        self._pending: List[float] = []
        self._committed: List[float] = []
        self._lines: List[_Line] = []
        self._line_starts: List[int] = []
        self._selection = TextSpan.at(0)

        # Host session bookkeeping
        self.recompute_count = 0
        self.mutation_count = 0
        self.freeze_count = 0
        self._freeze_depth = 0
        self.undo_records: List[str] = []
        self._open_undo: Optional[str] = None
        self.status_messages: List[str] = []

        self._build_geometry()
        self._committed = list(self._pending)
        self._layout_lines()

    def _build_geometry(self) -> None:
        offset = 0
        for page_index, page in enumerate(self.document.pages):
            page_start = offset
            sections = []
            for section_index, section in enumerate(page.sections):
                section_start = offset
                for column_index, column in enumerate(section.columns):
                    for paragraph in column:
                        length = paragraph.lines * self.chars_per_line
                        span = TextSpan(start=offset, end=offset + length)
                        self._slot_index[span] = len(self._slots)
                        self._slots.append(_ParagraphSlot(
                            page=page_index,
                            section=section_index,
                            column=column_index,
                            span=span,
                            lines=paragraph.lines,
                            line_height=paragraph.line_height,
                        ))
                        self._pending.append(paragraph.space_after)
                        offset += length
                sections.append(TextSpan(start=section_start, end=offset))
            self._section_spans.append(sections)
            self._page_spans.append(TextSpan(start=page_start, end=offset))
            self._page_starts.append(page_start)
        self._document_end = offset

    def _layout_lines(self) -> None:
        """Lay every line out using the committed trailing spaces."""
        lines: List[_Line] = []
        cursor = 0
        for page_index, page in enumerate(self.document.pages):
            section_top = self.top_margin
            for section in page.sections:
                column_heights = []
                for column in section.columns:
                    y = section_top
                    for _ in column:
                        slot = self._slots[cursor]
                        for line in range(slot.lines):
                            start = slot.span.start + line * self.chars_per_line
                            lines.append(_Line(
                                start=start,
                                end=start + self.chars_per_line,
                                y=y + line * slot.line_height,
                            ))
                        y += slot.lines * slot.line_height + self._committed[cursor]
                        cursor += 1
                    column_heights.append(y - section_top)
                section_top += max(column_heights) if column_heights else 0.0

        self._lines = lines
        self._line_starts = [line.start for line in lines]

    def _line_index(self, offset: int) -> int:
        if offset < 0 or offset > self._document_end or not self._lines:
            raise MeasurementFailure(f"Offset {offset} outside the document", TextSpan.at(max(offset, 0)))
        if offset == self._document_end:
            return len(self._lines) - 1
        return bisect.bisect_right(self._line_starts, offset) - 1

    def _slot(self, paragraph: TextSpan) -> int:
        try:
            return self._slot_index[paragraph]
        except KeyError:
            raise ValueError(f"{paragraph!r} is not a paragraph of this document") from None

    # LayoutFacade

    def total_pages(self) -> int:
        return len(self._page_spans)

    def document_span(self) -> TextSpan:
        return TextSpan(start=0, end=self._document_end)

    def page_of(self, offset: int) -> int:
        """1-based page holding offset; the document end belongs to the last page."""
        # Empty pages share their start with the next page; bisect_right skips them
        index = bisect.bisect_right(self._page_starts, offset) - 1
        return max(index, 0) + 1

    def page_range(self, span: TextSpan) -> PageSpanRange:
        last_offset = span.start if span.is_empty else span.end - 1
        return PageSpanRange(first_page=self.page_of(span.start), last_page=self.page_of(last_offset))

    def page_span(self, page_number: int) -> TextSpan:
        if not 1 <= page_number <= len(self._page_spans):
            raise IndexError(f"Page {page_number} out of bounds (1-{len(self._page_spans)})")
        return self._page_spans[page_number - 1]

    def sections_within_page(self, page_span: TextSpan) -> List[Section]:
        if page_span.is_empty:
            return []

        sections = []
        first_page = self.page_of(page_span.start) - 1
        last_page = self.page_of(page_span.end - 1) - 1
        for page_index in range(first_page, last_page + 1):
            page = self.document.pages[page_index]
            for section_index, span in enumerate(self._section_spans[page_index]):
                if span.is_empty or not span.intersects(page_span):
                    continue
                clipped = span.clamp(page_span)
                if clipped.is_empty:
                    continue
                sections.append(Section(
                    span=clipped,
                    column_count=page.sections[section_index].column_count,
                    page_number=page_index + 1,
                ))
        return sections

    def vertical_position(self, point: TextSpan) -> float:
        return self._lines[self._line_index(point.start)].y

    def advance_by_line(self, point: TextSpan) -> TextSpan:
        index = self._line_index(point.start)
        if index + 1 >= len(self._lines):
            return point
        return TextSpan.at(self._lines[index + 1].start)

    def paragraphs_within(self, span: TextSpan) -> List[TextSpan]:
        return [slot.span for slot in self._slots if slot.span.intersects(span)]

    def get_trailing_space(self, paragraph: TextSpan) -> float:
        return self._pending[self._slot(paragraph)]

    def set_trailing_space(self, paragraph: TextSpan, value: float) -> None:
        if value < 0:
            raise ValueError(f"Trailing space must be non-negative, got {value}")
        self._pending[self._slot(paragraph)] = value
        self.mutation_count += 1

    def recompute_layout(self) -> None:
        self._committed = list(self._pending)
        self._layout_lines()
        self.recompute_count += 1

    def select(self, span: TextSpan, extend_to_line_start: bool = False) -> TextSpan:
        if extend_to_line_start:
            line = self._lines[self._line_index(span.start)]
            span = TextSpan(start=min(line.start, span.start), end=span.end)
        self._selection = span
        return span

    def selection(self) -> TextSpan:
        return self._selection

    # HostSession

    def suspend_screen_updates(self) -> None:
        self._freeze_depth += 1
        self.freeze_count += 1

    def resume_screen_updates(self) -> None:
        self._freeze_depth = max(0, self._freeze_depth - 1)

    @property
    def screen_updating(self) -> bool:
        return self._freeze_depth == 0

    def start_undo_record(self, name: str) -> None:
        if self._open_undo is not None:
            raise RuntimeError(f"Undo record '{self._open_undo}' is still open")
        self._open_undo = name

    def end_undo_record(self) -> None:
        if self._open_undo is None:
            raise RuntimeError("No undo record is open")
        self.undo_records.append(self._open_undo)
        self._open_undo = None

    @property
    def undo_record_open(self) -> bool:
        return self._open_undo is not None

    def set_status(self, text: str) -> None:
        self.status_messages.append(text)

    # Inspection

    def section_spans(self, page_number: int) -> List[TextSpan]:
        return list(self._section_spans[page_number - 1])

    def column_paragraphs(self, page_number: int, section_index: int, column: int) -> List[TextSpan]:
        return [
            slot.span for slot in self._slots
            if slot.page == page_number - 1 and slot.section == section_index and slot.column == column
        ]

    def trailing_spaces(self) -> List[float]:
        return list(self._pending)

    def to_document(self) -> SimulatedDocument:
        """Snapshot of the document with the current trailing spaces."""
        cursor = 0
        pages = []
        for page in self.document.pages:
            sections = []
            for section in page.sections:
                columns = []
                for column in section.columns:
                    paragraphs = []
                    for paragraph in column:
                        paragraphs.append(SimulatedParagraph(
                            lines=paragraph.lines,
                            line_height=paragraph.line_height,
                            space_after=self._pending[cursor],
                        ))
                        cursor += 1
                    columns.append(paragraphs)
                sections.append(SimulatedSection(columns=columns))
            pages.append(SimulatedPage(sections=sections))

        return SimulatedDocument(
            pages=pages,
            chars_per_line=self.chars_per_line,
            top_margin=self.top_margin,
        )

    def __repr__(self) -> str:
        return f"SimulatedLayout({len(self._page_spans)} pages, {len(self._slots)} paragraphs)"
