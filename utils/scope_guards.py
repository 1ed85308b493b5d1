"""
Guaranteed-release scope guards around host side effects.

Both guards acquire on entry and release on every exit path, including
exceptions raised inside the guarded block.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, TYPE_CHECKING

from utils.validation import UndoRecordError

if TYPE_CHECKING:
    from engine.layout_facade import HostSession, LayoutFacade

logger = logging.getLogger(__name__)

STATUS_DONE = "Column alignment finished"


@contextmanager
def screen_freeze(host: Optional['HostSession']) -> Iterator[None]:
    """Suspend screen updates for the duration of the block."""
    if host is None:
        yield
        return

    host.suspend_screen_updates()
    try:
        yield
    finally:
        host.resume_screen_updates()


@contextmanager
def undo_record(
    host: Optional['HostSession'],
    name: str,
    facade: Optional['LayoutFacade'] = None,
) -> Iterator[None]:
    """
    Group every mutation in the block into a single undoable record.

    Also posts the record name as a status message and restores the caller's
    selection on exit. Failing to open or close the record raises
    UndoRecordError; that is the one failure an apply pass does not absorb.
    """
    original_selection = facade.selection() if facade is not None else None

    if host is not None:
        try:
            host.start_undo_record(name)
        except Exception as e:
            raise UndoRecordError(f"Failed to start undo record '{name}': {e}") from e
        host.set_status(name)

    try:
        yield
    finally:
        if original_selection is not None:
            try:
                facade.select(original_selection, extend_to_line_start=False)
            except Exception as e:
                logger.warning(f"Could not restore selection {original_selection!r}: {e}")

        if host is not None:
            try:
                host.end_undo_record()
            except Exception as e:
                raise UndoRecordError(f"Failed to end undo record '{name}': {e}") from e
            host.set_status(STATUS_DONE)
