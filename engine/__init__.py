"""
Column Alignment Engine

Core engine module for balancing two-column page layouts.
Contains the ColumnEngine coordinator, its configuration, the page walker
and the layout host interfaces.
"""

__version__ = "1.0.0"

from engine.config import EngineConfig, ProcessorOptions, LocatorOptions, BalancerOptions, PageRange
from engine.base_processor import BaseProcessor, ProcessorRegistry
from engine.layout_facade import LayoutFacade, HostSession
from engine.page_walker import PageWalker
from engine.column_engine import ColumnEngine
from engine.simulated_layout import SimulatedLayout

__all__ = [
    'ColumnEngine',
    'EngineConfig',
    'ProcessorOptions',
    'LocatorOptions',
    'BalancerOptions',
    'PageRange',
    'BaseProcessor',
    'ProcessorRegistry',
    'LayoutFacade',
    'HostSession',
    'PageWalker',
    'SimulatedLayout',
]
