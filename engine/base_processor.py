"""
Base processor class and registry.

Processors receive the owning ColumnEngine so they share one layout host,
one host session and one configuration. Each processor names the layout
operations it calls; binding checks the host offers them before any page
is touched.
"""

from abc import ABC
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING
import logging

from utils.validation import ConfigurationError

if TYPE_CHECKING:
    from engine.column_engine import ColumnEngine

logger = logging.getLogger(__name__)


class BaseProcessor(ABC):
    """
    Abstract base class for column alignment processors.

    Subclasses list the LayoutFacade methods they depend on in
    `required_operations`.
    """

    required_operations: Tuple[str, ...] = ()

    def __init__(self, engine: 'ColumnEngine'):
        self.engine = engine
        self._bound = False

    @property
    def layout(self):
        """Layout facade of the owning engine."""
        return self.engine.layout

    def missing_operations(self) -> List[str]:
        return [
            name for name in self.required_operations
            if not callable(getattr(self.layout, name, None))
        ]

    def bind(self) -> None:
        """
        Check the layout host against required_operations.

        Raises:
            ConfigurationError: If the host lacks an operation
        """
        missing = self.missing_operations()
        if missing:
            raise ConfigurationError(
                f"{self.__class__.__name__} needs layout operations the host "
                f"does not provide: {', '.join(missing)}"
            )

        self._bound = True
        logger.debug(f"{self.__class__.__name__} bound to {type(self.layout).__name__}")

    @property
    def is_bound(self) -> bool:
        return self._bound

    def __repr__(self) -> str:
        status = "bound" if self._bound else "unbound"
        return f"{self.__class__.__name__}({status})"


class ProcessorRegistry:
    """Named processors attached to an engine, bound in registration order."""

    def __init__(self):
        self._processors: Dict[str, BaseProcessor] = {}

    def register(self, name: str, processor: BaseProcessor) -> None:
        if name in self._processors:
            logger.warning(f"Processor '{name}' already registered, replacing")

        self._processors[name] = processor
        logger.debug(f"Registered processor: {name}")

    def get(self, name: str) -> Optional[BaseProcessor]:
        return self._processors.get(name)

    def bind_all(self) -> None:
        """
        Bind every processor, reporting all missing operations at once.

        Raises:
            ConfigurationError: If any processor cannot be bound
        """
        problems = []
        for name, processor in self._processors.items():
            try:
                processor.bind()
            except ConfigurationError as e:
                logger.error(f"Failed to bind processor '{name}': {e}")
                problems.append(str(e))

        if problems:
            raise ConfigurationError("; ".join(problems))

    def clear(self) -> None:
        self._processors.clear()

    @property
    def processor_names(self) -> List[str]:
        return list(self._processors.keys())

    def __repr__(self) -> str:
        return f"ProcessorRegistry({len(self._processors)} processors: {self.processor_names})"
