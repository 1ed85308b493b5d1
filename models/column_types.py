"""
Pydantic models for the column alignment engine.

Covers text spans, sections, per-section outcomes and the report types
returned by the page walker, plus the simulated document payloads accepted
by the HTTP service.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextSpan(BaseModel):
    """Half-open range [start, end) of character offsets into the flattened text"""
    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> 'TextSpan':
        if self.end < self.start:
            raise ValueError(f"span end ({self.end}) must be >= start ({self.start})")
        return self

    @classmethod
    def at(cls, offset: int) -> 'TextSpan':
        """Zero-width point at offset."""
        return cls(start=offset, end=offset)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, other: 'TextSpan') -> bool:
        return self.start <= other.start and other.end <= self.end

    def intersects(self, other: 'TextSpan') -> bool:
        if other.is_empty:
            return self.start <= other.start < self.end
        return self.start < other.end and other.start < self.end

    def clamp(self, bounds: 'TextSpan') -> 'TextSpan':
        start = max(self.start, bounds.start)
        end = max(start, min(self.end, bounds.end))
        return TextSpan(start=start, end=end)

    def split_at(self, offset: int) -> tuple:
        """Split into ([start, offset), [offset, end))."""
        if not self.start <= offset <= self.end:
            raise ValueError(f"offset {offset} outside span [{self.start}, {self.end})")
        return TextSpan(start=self.start, end=offset), TextSpan(start=offset, end=self.end)

    def __repr__(self) -> str:
        return f"TextSpan[{self.start}, {self.end})"


class Section(BaseModel):
    """A section clipped to one page, with its column layout (read-only host metadata)"""
    model_config = ConfigDict(frozen=True)

    span: TextSpan
    column_count: int = Field(1, ge=1)
    page_number: Optional[int] = None


class PageSpanRange(BaseModel):
    """1-based inclusive page numbers covering a span"""
    first_page: int = Field(..., ge=1)
    last_page: int = Field(..., ge=1)


class SectionStatus(str, Enum):
    """Terminal state of one section within a walk"""
    BALANCED = "balanced"
    SKIPPED = "skipped"
    FAILED = "failed"


class BalanceStopReason(str, Enum):
    """Why the balancing loop stopped"""
    CONVERGED = "converged"
    NO_ELIGIBLE_PARAGRAPHS = "no-eligible-paragraphs"
    SPACING_CAPPED = "spacing-capped"
    ITERATION_LIMIT = "iteration-limit"


class BalanceResult(BaseModel):
    """Outcome of one ColumnHeightBalancer.balance call"""
    iterations: int = 0
    recomputes: int = 0
    stop_reason: BalanceStopReason
    short_column_y: float
    tall_column_y: float


class SectionOutcome(BaseModel):
    """What happened to one two-column section during an apply pass"""
    page_number: int
    span: Optional[TextSpan] = None
    status: SectionStatus
    reason: Optional[str] = None
    positions_before: Optional[List[float]] = None
    positions_after: Optional[List[float]] = None
    balance: Optional[BalanceResult] = None


class ApplyReport(BaseModel):
    """Aggregated result of a whole-document apply pass"""
    first_page: Optional[int] = None
    last_page: Optional[int] = None
    pages_scanned: int = 0
    outcomes: List[SectionOutcome] = Field(default_factory=list)

    def count(self, status: SectionStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def balanced(self) -> int:
        return self.count(SectionStatus.BALANCED)

    @property
    def skipped(self) -> int:
        return self.count(SectionStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(SectionStatus.FAILED)


class FindNextResult(BaseModel):
    """Result of a find-next traversal"""
    found: bool
    page_number: Optional[int] = None
    section_span: Optional[TextSpan] = None
    selection: Optional[TextSpan] = None
    positions: Optional[List[float]] = None
    passes: int = 1
    wrapped: bool = False
    message: Optional[str] = None


# Simulated document payloads (HTTP service and tests)

class SimulatedParagraph(BaseModel):
    """Paragraph in a simulated document: a run of equally tall lines"""
    lines: int = Field(1, ge=1)
    line_height: float = Field(12.0, gt=0)
    space_after: float = Field(0.0, ge=0)


class SimulatedSection(BaseModel):
    """
    Section on a simulated page.

    Single-column sections list their paragraphs in `columns[0]`; two-column
    sections carry the paragraphs of each column in order.
    """
    columns: List[List[SimulatedParagraph]] = Field(..., min_length=1, max_length=2)

    @property
    def column_count(self) -> int:
        return len(self.columns)


class SimulatedPage(BaseModel):
    sections: List[SimulatedSection] = Field(default_factory=list)


class SimulatedDocument(BaseModel):
    """Whole simulated document: pages of sections, with flat text geometry"""
    pages: List[SimulatedPage] = Field(..., min_length=1)
    chars_per_line: int = Field(40, ge=1)
    top_margin: float = Field(72.0, ge=0)


class AlignmentOptions(BaseModel):
    """Tunables accepted by the HTTP service"""
    max_space_after: float = Field(40.0, gt=0, description="Upper bound on any paragraph's trailing space")


class AlignColumnsRequest(BaseModel):
    document: SimulatedDocument
    options: AlignmentOptions = Field(default_factory=AlignmentOptions)
    start_page: int = Field(1, ge=1)
    end_page: Optional[int] = Field(None, ge=1)


class AlignColumnsResponse(BaseModel):
    report: ApplyReport
    document: SimulatedDocument


class FindUnevenColumnsRequest(BaseModel):
    document: SimulatedDocument
    selection_start: int = Field(0, ge=0, description="Character offset of the caret")
    wraparound: bool = Field(False, description="Restart from the document start when nothing is found")