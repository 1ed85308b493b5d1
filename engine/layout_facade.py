"""
Layout host interfaces.

The engine never paginates or renders anything itself. It consumes a layout
host through two narrow protocols:

- LayoutFacade: pagination queries, vertical positions, line navigation,
  paragraph spacing and the layout recompute trigger
- HostSession: side effects the host owns (screen updates, undo records,
  status messages)

Any object with matching methods can be passed; SimulatedLayout implements
both for tests and the HTTP service.
"""

from typing import List, Protocol

from models.column_types import PageSpanRange, Section, TextSpan


class LayoutFacade(Protocol):
    """
    Query and mutation surface of an external layout engine.

    Positions are page-relative vertical offsets; larger values sit lower on
    the page. Positions reflect the layout as of the last recompute_layout().
    """

    def total_pages(self) -> int:
        """Number of pages in the document."""
        ...

    def document_span(self) -> TextSpan:
        """Span of the whole flattened text."""
        ...

    def page_range(self, span: TextSpan) -> PageSpanRange:
        """1-based inclusive pages covering span."""
        ...

    def page_span(self, page_number: int) -> TextSpan:
        """Character span of a page, ending at the next page's start."""
        ...

    def sections_within_page(self, page_span: TextSpan) -> List[Section]:
        """Sections intersected with the page, in document order."""
        ...

    def vertical_position(self, point: TextSpan) -> float:
        """Page-relative vertical offset of a zero-width point."""
        ...

    def advance_by_line(self, point: TextSpan) -> TextSpan:
        """Move a zero-width point to the start of the next rendered line."""
        ...

    def paragraphs_within(self, span: TextSpan) -> List[TextSpan]:
        """Spans of the paragraphs intersecting span, in document order."""
        ...

    def get_trailing_space(self, paragraph: TextSpan) -> float:
        ...

    def set_trailing_space(self, paragraph: TextSpan, value: float) -> None:
        ...

    def recompute_layout(self) -> None:
        """Re-flow so later position queries reflect pending mutations."""
        ...

    def select(self, span: TextSpan, extend_to_line_start: bool = False) -> TextSpan:
        """Place the interactive selection and return the resulting span."""
        ...

    def selection(self) -> TextSpan:
        """Current interactive selection."""
        ...


class HostSession(Protocol):
    """Host-owned side effects wrapped around a walk."""

    def suspend_screen_updates(self) -> None:
        ...

    def resume_screen_updates(self) -> None:
        ...

    def start_undo_record(self, name: str) -> None:
        ...

    def end_undo_record(self) -> None:
        ...

    def set_status(self, text: str) -> None:
        ...
