"""
Shared fixtures and document builders for column alignment tests.

Run with: pytest tests/ -v
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from engine import ColumnEngine, EngineConfig, SimulatedLayout
from models.column_types import (
    SimulatedDocument,
    SimulatedPage,
    SimulatedParagraph,
    SimulatedSection,
    TextSpan,
)
from utils.validation import MeasurementFailure

CHARS_PER_LINE = 10


def para(lines: int = 1, line_height: float = 12.0, space_after: float = 0.0) -> SimulatedParagraph:
    return SimulatedParagraph(lines=lines, line_height=line_height, space_after=space_after)


def two_columns(left: List[SimulatedParagraph], right: List[SimulatedParagraph]) -> SimulatedSection:
    return SimulatedSection(columns=[left, right])


def one_column(paragraphs: List[SimulatedParagraph]) -> SimulatedSection:
    return SimulatedSection(columns=[paragraphs])


def document(*pages: List[SimulatedSection], top_margin: float = 72.0) -> SimulatedDocument:
    return SimulatedDocument(
        pages=[SimulatedPage(sections=list(sections)) for sections in pages],
        chars_per_line=CHARS_PER_LINE,
        top_margin=top_margin,
    )


def uneven_section() -> SimulatedSection:
    """Column 1 ends at 240, column 2 at 300 (with a 72pt top margin)."""
    return two_columns(
        [para(5), para(5), para(5)],
        [para(20)],
    )


def even_section() -> SimulatedSection:
    """Both columns end at 180."""
    return two_columns(
        [para(5), para(5)],
        [para(5), para(5)],
    )


def nearly_even_section() -> SimulatedSection:
    """Column 1 ends at 180, column 2 at 180.5."""
    return two_columns(
        [para(5), para(5)],
        [para(2, line_height=12.25), para(8)],
    )


def slow_converging_section() -> SimulatedSection:
    """
    Column 1 ends at 377, column 2 at 480.

    Most of column 1 is already near the 40pt cap, so each pass only closes
    part of the gap and the section needs more than five recomputes.
    """
    spacings = [30, 35, 10, 35, 30, 39, 0, 30, 0]
    return two_columns(
        [para(1, space_after=space) for space in spacings],
        [para(35)],
    )


def scenario_a_document() -> SimulatedDocument:
    """
    Column 1 bottom at 500 with three paragraphs; column 2 bottom at 520.

    Column 1: 80 + 144 + 144 + 11 * 12 = 500
    Column 2: 80 + 44 * 10 = 520
    """
    return document(
        [two_columns([para(12), para(12), para(12)], [para(45, line_height=10.0)])],
        top_margin=80.0,
    )


@pytest.fixture
def make_engine():
    """Open a ColumnEngine on a simulated document; closed at teardown."""
    engines = []

    def _make(doc: SimulatedDocument, config: Optional[EngineConfig] = None, on_progress=None, layout=None):
        layout = layout or SimulatedLayout(doc)
        engine = ColumnEngine(layout, host=layout, config=config, on_progress=on_progress)
        engine.open()
        engines.append(engine)
        return engine, layout

    yield _make

    for engine in engines:
        engine.close()


class DampedLayout:
    """
    Minimal layout facade for balancer tests.

    The short column's bottom moves down by `response` units per unit of
    committed trailing space on any of its paragraphs; the tall column's
    bottom never moves.
    """

    def __init__(
        self,
        short_y: float,
        tall_y: float,
        paragraph_count: int,
        response: float = 1.0,
        spaces: Optional[List[float]] = None,
    ):
        self.short_y = short_y
        self.tall_y = tall_y
        self.response = response
        self.paragraphs = [TextSpan(start=i * 10, end=i * 10 + 10) for i in range(paragraph_count)]
        initial = spaces or [0.0] * paragraph_count
        self.pending: Dict[TextSpan, float] = dict(zip(self.paragraphs, initial))
        self.committed: Dict[TextSpan, float] = dict(self.pending)
        self.baseline = sum(initial)
        self.short_anchor = TextSpan.at(max(paragraph_count * 10 - 1, 0))
        self.tall_anchor = TextSpan.at(999)
        self.recomputes = 0
        self.calls: List[tuple] = []
        self.history: Dict[TextSpan, List[float]] = {p: [s] for p, s in self.pending.items()}

    @property
    def short_span(self) -> TextSpan:
        return TextSpan(start=0, end=len(self.paragraphs) * 10)

    @property
    def tall_span(self) -> TextSpan:
        return TextSpan(start=len(self.paragraphs) * 10, end=1000)

    def vertical_position(self, point: TextSpan) -> float:
        if point == self.short_anchor:
            grown = sum(self.committed.values()) - self.baseline
            return self.short_y + self.response * grown
        if point == self.tall_anchor:
            return self.tall_y
        raise MeasurementFailure(f"Unknown point {point!r}", point)

    def advance_by_line(self, point: TextSpan) -> TextSpan:
        return point

    def paragraphs_within(self, span: TextSpan) -> List[TextSpan]:
        return [p for p in self.paragraphs if p.intersects(span)]

    def get_trailing_space(self, paragraph: TextSpan) -> float:
        self.calls.append(('get', paragraph))
        return self.pending[paragraph]

    def set_trailing_space(self, paragraph: TextSpan, value: float) -> None:
        self.calls.append(('set', paragraph, value))
        self.pending[paragraph] = value
        self.history[paragraph].append(value)

    def recompute_layout(self) -> None:
        self.committed = dict(self.pending)
        self.recomputes += 1
