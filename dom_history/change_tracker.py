"""
Change Tracker Module
Records a DOM tree now, waits, captures the tree again and diffs the two.
"""

from typing import Awaitable, Callable, Optional, Union
import asyncio
import inspect
import logging

from .dom_node import DOMElementNode, validate_tree
from .exceptions import SnapshotUnavailableError
from .tree_comparator import DOMDiffResult, DOMTreeComparator

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Union[Awaitable[Optional[DOMElementNode]], Optional[DOMElementNode]]]


async def track_dom_changes(initial_tree: DOMElementNode,
                            delay_ms: float,
                            get_current_tree: SnapshotProvider,
                            comparator: Optional[DOMTreeComparator] = None) -> DOMDiffResult:
    """
    Wait ``delay_ms`` milliseconds, take a fresh snapshot and compare it
    against ``initial_tree``.

    Errors raised by ``get_current_tree`` propagate unchanged; a provider
    returning None raises SnapshotUnavailableError. There is no retry.
    """
    if delay_ms < 0:
        raise ValueError(f'delay_ms must be non-negative, got {delay_ms}')

    logger.info(f"Initial DOM tree recorded, comparing changes in {delay_ms}ms...")
    await asyncio.sleep(delay_ms / 1000)

    current_tree = get_current_tree()
    if inspect.isawaitable(current_tree):
        current_tree = await current_tree
    if current_tree is None:
        raise SnapshotUnavailableError('Snapshot provider returned no DOM tree')
    validate_tree(current_tree)

    logger.info("Comparing DOM tree changes...")
    comparator = comparator or DOMTreeComparator()
    return comparator.compare_trees(initial_tree, current_tree)
