"""
Configuration system for the column alignment engine.

Provides structured configuration using dataclasses with clear defaults,
type safety, and backward compatibility with dict-based configs.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List
import logging

from models.column_types import PageSpanRange

logger = logging.getLogger(__name__)

DEFAULT_MAX_SPACE_AFTER = 40.0
DEFAULT_PROGRESS_INTERVAL_PAGES = 25
DEFAULT_MAX_PROBE_LINES = 10000
DEFAULT_UNDO_RECORD_NAME = "Align columns"


@dataclass
class ProcessorOptions:
    """
    Base class for processor-specific configuration options.

    All processor option classes inherit from this to provide
    a consistent interface.
    """

    def validate(self) -> bool:
        """
        Validate configuration options.

        Returns:
            True if configuration is valid, False otherwise
        """
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {}


@dataclass
class LocatorOptions(ProcessorOptions):
    """Options for the column break locator."""
    max_probe_lines: int = DEFAULT_MAX_PROBE_LINES  # Runaway guard for the line probe

    def validate(self) -> bool:
        if self.max_probe_lines < 1:
            logger.error("max_probe_lines must be at least 1")
            return False
        return super().validate()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict['max_probe_lines'] = self.max_probe_lines
        return base_dict


@dataclass
class BalancerOptions(ProcessorOptions):
    """Options for the column height balancer."""
    max_space_after: float = DEFAULT_MAX_SPACE_AFTER  # Cap on any paragraph's trailing space

    def validate(self) -> bool:
        if self.max_space_after <= 0:
            logger.error("max_space_after must be positive")
            return False
        return super().validate()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict['max_space_after'] = self.max_space_after
        return base_dict


@dataclass
class EngineConfig:
    """
    Central configuration for ColumnEngine initialization.

    Example:
        >>> config = EngineConfig(max_space_after=24.0)
        >>> with ColumnEngine(layout, host=layout, config=config) as engine:
        ...     report = engine.apply()
    """

    # Balancing
    max_space_after: float = DEFAULT_MAX_SPACE_AFTER

    # Break location
    max_probe_lines: int = DEFAULT_MAX_PROBE_LINES

    # Walking
    progress_interval_pages: int = DEFAULT_PROGRESS_INTERVAL_PAGES
    undo_record_name: str = DEFAULT_UNDO_RECORD_NAME

    # Logging
    enable_debug_logging: bool = False

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all values are valid, False otherwise
        """
        if not self.balancer_options().validate():
            return False

        if not self.locator_options().validate():
            return False

        if self.progress_interval_pages < 1:
            logger.error("progress_interval_pages must be at least 1")
            return False

        if not self.undo_record_name:
            logger.error("undo_record_name must not be empty")
            return False

        return True

    def balancer_options(self) -> BalancerOptions:
        return BalancerOptions(max_space_after=self.max_space_after)

    def locator_options(self) -> LocatorOptions:
        return LocatorOptions(max_probe_lines=self.max_probe_lines)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary.

        Useful for serialization, logging, and debugging.
        """
        return {
            'max_space_after': self.max_space_after,
            'max_probe_lines': self.max_probe_lines,
            'progress_interval_pages': self.progress_interval_pages,
            'undo_record_name': self.undo_record_name,
            'enable_debug_logging': self.enable_debug_logging,
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'EngineConfig':
        """
        Create EngineConfig from dictionary.

        Unknown keys are ignored with a warning.
        """
        valid_keys = {
            'max_space_after', 'max_probe_lines', 'progress_interval_pages',
            'undo_record_name', 'enable_debug_logging',
        }

        filtered_config = {}
        for key, value in config.items():
            if key in valid_keys:
                filtered_config[key] = value
            else:
                logger.warning(f"Unknown config key '{key}' will be ignored")

        return cls(**filtered_config)

    @classmethod
    def default(cls) -> 'EngineConfig':
        """Create configuration with default values."""
        return cls()

    def __repr__(self) -> str:
        return (
            f"EngineConfig("
            f"max_space_after={self.max_space_after}, "
            f"progress_every={self.progress_interval_pages})"
        )


@dataclass
class PageRange:
    """
    Range of pages to walk, 1-based and inclusive.

    Example:
        >>> PageRange(start=2, end=5).to_page_numbers(10)
        [2, 3, 4, 5]
        >>> PageRange(start=5).to_page_numbers(7)
        [5, 6, 7]
    """

    start: int  # 1-based page number
    end: Optional[int] = None  # None means "to end of document"

    def __post_init__(self):
        if self.start < 1:
            raise ValueError(f"start page must be >= 1, got {self.start}")

        if self.end is not None:
            if self.end < 1:
                raise ValueError(f"end page must be >= 1, got {self.end}")
            if self.end < self.start:
                raise ValueError(
                    f"end page ({self.end}) must be >= start page ({self.start})"
                )

    def to_page_numbers(self, total_pages: int) -> List[int]:
        """Explicit page numbers, clamped to the document."""
        if total_pages < 1 or self.start > total_pages:
            return []

        end = total_pages if self.end is None else min(self.end, total_pages)
        return list(range(self.start, end + 1))

    @classmethod
    def all_pages(cls) -> 'PageRange':
        return cls(start=1, end=None)

    @classmethod
    def single_page(cls, page_num: int) -> 'PageRange':
        return cls(start=page_num, end=page_num)

    @classmethod
    def from_page_span(cls, pages: PageSpanRange) -> 'PageRange':
        """Build from the page numbers a layout host reports for a span."""
        return cls(start=pages.first_page, end=pages.last_page)

    def __repr__(self) -> str:
        if self.end is None:
            return f"PageRange({self.start}→end)"
        elif self.start == self.end:
            return f"PageRange(page {self.start})"
        else:
            return f"PageRange({self.start}→{self.end})"
