"""
Column height balancing.

Stretches the shorter column of a section by growing the trailing space of
its paragraphs, re-measuring after each layout recompute, until the column
bottoms meet or a bound is hit:

- at most MAX_ITERATIONS recompute cycles per call, whatever the diff
- no paragraph's trailing space above `max_space_after`
- the short column's last paragraph is never stretched, so the gap at the
  column seam stays untouched
"""

import logging
from typing import List, Optional, Sequence, TYPE_CHECKING

from engine.base_processor import BaseProcessor
from engine.config import BalancerOptions
from models.column_types import BalanceResult, BalanceStopReason, TextSpan
from processors.column_state import ColumnDescriptor

if TYPE_CHECKING:
    from engine.column_engine import ColumnEngine

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 5


class ColumnHeightBalancer(BaseProcessor):
    """Iteratively equalizes the bottoms of two columns."""

    required_operations = (
        "vertical_position",
        "paragraphs_within",
        "get_trailing_space",
        "set_trailing_space",
        "recompute_layout",
    )

    def __init__(self, engine: 'ColumnEngine', options: Optional[BalancerOptions] = None):
        super().__init__(engine)
        self.options = options or BalancerOptions()

    def balance(
        self,
        columns: Sequence[ColumnDescriptor],
        max_space_after: Optional[float] = None,
    ) -> BalanceResult:
        """
        Stretch columns[0] toward columns[1].

        Args:
            columns: (short, tall) pair, ordered so columns[0].y_position is
                the smaller one
            max_space_after: Per-paragraph cap; defaults to the configured one

        Returns:
            BalanceResult with iteration count and stop reason
        """
        short, tall = columns[0], columns[1]
        cap = self.options.max_space_after if max_space_after is None else max_space_after
        iterations = 0
        recomputes = 0
        stop_reason = BalanceStopReason.CONVERGED

        while short.y_position < tall.y_position:
            if iterations >= MAX_ITERATIONS:
                stop_reason = BalanceStopReason.ITERATION_LIMIT
                break
            iterations += 1

            diff = tall.y_position - short.y_position
            paragraphs = self.layout.paragraphs_within(short.span)

            usable_count = len(paragraphs) - 1
            if usable_count <= 0:
                stop_reason = BalanceStopReason.NO_ELIGIBLE_PARAGRAPHS
                break

            if not self.distribute(paragraphs, diff, cap):
                stop_reason = BalanceStopReason.SPACING_CAPPED
                break

            self.layout.recompute_layout()
            recomputes += 1
            short.refresh(self.layout)
            tall.refresh(self.layout)

            logger.debug(
                f"Pass {iterations}: diff {diff:.2f} -> "
                f"{tall.y_position - short.y_position:.2f}"
            )

        return BalanceResult(
            iterations=iterations,
            recomputes=recomputes,
            stop_reason=stop_reason,
            short_column_y=short.y_position,
            tall_column_y=tall.y_position,
        )

    def distribute(self, paragraphs: List[TextSpan], diff: float, cap: float) -> bool:
        """
        Spread one pass of extra trailing space over the paragraphs.

        The last paragraph is excluded. A negative increment (overshoot)
        becomes a single bounded correction on the first paragraph.

        Returns:
            True if any paragraph's trailing space changed
        """
        usable_count = len(paragraphs) - 1
        if usable_count <= 0:
            return False

        increment = min(diff / usable_count, cap)
        changed = False

        if increment < 0:
            changed |= self.increase_space_after(paragraphs[0], min(diff, cap), cap)
        else:
            for paragraph in paragraphs[:usable_count]:
                changed |= self.increase_space_after(paragraph, increment, cap)

        return changed

    def increase_space_after(self, paragraph: TextSpan, increment: float, cap: float) -> bool:
        """
        Grow one paragraph's trailing space, clamped to cap.

        Paragraphs already at the cap are skipped. Trailing space never
        decreases, so a non-positive increment is a no-op.

        Returns:
            True if the paragraph changed
        """
        current = self.layout.get_trailing_space(paragraph)
        if current >= cap:
            return False

        new_space = min(current + max(increment, 0.0), cap)
        if new_space == current:
            return False

        self.layout.set_trailing_space(paragraph, new_space)
        return True
