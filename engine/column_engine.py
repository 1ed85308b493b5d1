"""
Column Alignment Engine - Core Coordinator

The ColumnEngine owns the configuration, the processors (locator, extractor,
balancer) and the page walker, all bound to one layout host.

Usage:
    >>> from engine.column_engine import ColumnEngine
    >>> from engine.config import EngineConfig
    >>>
    >>> with ColumnEngine(layout, host=layout, config=EngineConfig()) as engine:
    ...     report = engine.apply()
    ...     print(f"{report.balanced} sections balanced")
"""

import logging
from typing import Optional, Any, Dict

from engine.base_processor import ProcessorRegistry
from engine.config import EngineConfig, PageRange
from engine.layout_facade import HostSession, LayoutFacade
from engine.page_walker import ConfirmCallback, PageWalker, ProgressCallback
from models.column_types import ApplyReport, FindNextResult
from utils.validation import ConfigurationError

logger = logging.getLogger(__name__)


class ColumnEngine:
    """
    Column alignment engine with processor coordination.

    Example:
        >>> with ColumnEngine(layout) as engine:
        ...     result = engine.find_next()
    """

    def __init__(
        self,
        layout: LayoutFacade,
        host: Optional[HostSession] = None,
        config: Optional[EngineConfig] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            layout: Layout facade to query and mutate
            host: Host session for screen freezing, undo records and status;
                None runs without those side effects
            config: Engine configuration (uses defaults if None)
            on_progress: Called with the page number every
                config.progress_interval_pages pages

        Raises:
            ConfigurationError: If configuration is invalid
        """
        self.layout = layout
        self.host = host
        self.config = config or EngineConfig.default()

        if not self.config.validate():
            raise ConfigurationError(f"Invalid engine configuration: {self.config!r}")

        if self.config.enable_debug_logging:
            logging.getLogger("engine").setLevel(logging.DEBUG)
            logging.getLogger("processors").setLevel(logging.DEBUG)

        self._processors = ProcessorRegistry()
        self._walker = PageWalker(self, on_progress=on_progress)
        self._is_open = False
        self._busy = False

        logger.debug(f"ColumnEngine created: {self.config!r}")

    def __enter__(self) -> 'ColumnEngine':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

        if exc_type is not None:
            logger.error(f"Exception during engine operation: {exc_val}")

        # Don't suppress exceptions
        return False

    def open(self) -> None:
        """
        Create the processors and bind them to the layout host.

        Raises:
            ConfigurationError: If the host lacks an operation a processor needs
        """
        if self._is_open:
            return

        from processors.column_break_locator import ColumnBreakLocator
        from processors.column_state import ColumnStateExtractor
        from processors.column_balancer import ColumnHeightBalancer

        self._processors.register('locator', ColumnBreakLocator(self, self.config.locator_options()))
        self._processors.register('extractor', ColumnStateExtractor(self))
        self._processors.register('balancer', ColumnHeightBalancer(self, self.config.balancer_options()))
        try:
            self._processors.bind_all()
        except ConfigurationError:
            self._processors.clear()
            raise
        self._is_open = True

    def close(self) -> None:
        """Release the processors. Idempotent."""
        self._processors.clear()
        self._is_open = False

    # Public API - Operations

    def apply(self, page_range: Optional[PageRange] = None) -> ApplyReport:
        """
        Balance uneven two-column sections.

        Args:
            page_range: Pages to walk; defaults to the pages of the selection
        """
        self._require_open()
        if self._busy:
            raise RuntimeError("A column alignment pass is already running on this engine")

        self._busy = True
        try:
            return self._walker.apply(page_range)
        finally:
            self._busy = False

    def find_next(self, repeat: bool = True, confirm: Optional[ConfirmCallback] = None) -> FindNextResult:
        """Select the next uneven section after the caret (read-only)."""
        self._require_open()
        return self._walker.find_next(repeat=repeat, confirm=confirm)

    # Public API - Processor Access

    @property
    def locator(self):
        return self._processor('locator')

    @property
    def extractor(self):
        return self._processor('extractor')

    @property
    def balancer(self):
        return self._processor('balancer')

    def _processor(self, name: str):
        processor = self._processors.get(name)
        if processor is None:
            raise RuntimeError(f"Processor '{name}' not initialized - use within context manager")
        return processor

    def _require_open(self) -> None:
        if not self._is_open:
            raise RuntimeError("Engine not opened - use within context manager")

    # Status and Debugging

    @property
    def is_open(self) -> bool:
        return self._is_open

    def get_status(self) -> Dict[str, Any]:
        return {
            'is_open': self._is_open,
            'busy': self._busy,
            'processors': self._processors.processor_names,
            'config': self.config.to_dict(),
        }

    def __repr__(self) -> str:
        status = "open" if self._is_open else "closed"
        return f"ColumnEngine({status}, {self.config!r})"
