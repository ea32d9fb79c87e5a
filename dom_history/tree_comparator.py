"""
Tree Comparator Module
Aligns two snapshots of the same DOM and classifies every element as
added, removed, modified or unchanged.

Elements carry no identity across snapshots, so pairs are inferred level by
level: old children are visited in document order and each takes the
best-scoring unclaimed new sibling whose similarity clears the match
threshold. The assignment is greedy, not globally optimal.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
import logging

from .change_detector import detect_element_changes
from .dom_node import DOMElementNode, iter_element_nodes
from .similarity import calculate_similarity_score

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.7


@dataclass
class ModifiedElement:
    old_element: DOMElementNode
    new_element: DOMElementNode
    changes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'old_element': self.old_element.to_dict(include_children=False),
            'new_element': self.new_element.to_dict(include_children=False),
            'changes': list(self.changes),
        }


@dataclass
class DOMDiffResult:
    added: List[DOMElementNode] = field(default_factory=list)
    removed: List[DOMElementNode] = field(default_factory=list)
    modified: List[ModifiedElement] = field(default_factory=list)
    unchanged: List[DOMElementNode] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    def summary(self) -> Dict[str, int]:
        return {
            'added': len(self.added),
            'removed': len(self.removed),
            'modified': len(self.modified),
            'unchanged': len(self.unchanged),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the diff to a JSON-friendly dictionary (nodes without their subtrees)."""
        return {
            'summary': self.summary(),
            'added': [node.to_dict(include_children=False) for node in self.added],
            'removed': [node.to_dict(include_children=False) for node in self.removed],
            'modified': [entry.to_dict() for entry in self.modified],
            'unchanged': [node.to_dict(include_children=False) for node in self.unchanged],
        }


class DOMTreeComparator:
    def __init__(self, match_threshold: float = MATCH_THRESHOLD,
                 ignored_attributes: Optional[Iterable[str]] = None):
        self.match_threshold = match_threshold
        self.ignored_attributes = tuple(ignored_attributes or ())

    def compare_trees(self, old_tree: DOMElementNode, new_tree: DOMElementNode) -> DOMDiffResult:
        """
        Compare two DOM trees.

        The roots are always paired, whatever their similarity: both trees are
        taken to be the same monitored document.
        """
        result = DOMDiffResult()
        processed_old: Set[DOMElementNode] = set()
        processed_new: Set[DOMElementNode] = set()

        processed_old.add(old_tree)
        processed_new.add(new_tree)
        self._compare_nodes(old_tree, new_tree, result, processed_old, processed_new)

        self._collect_unprocessed(old_tree, processed_old, result.removed)
        self._collect_unprocessed(new_tree, processed_new, result.added)

        logger.debug(f"DOM diff: {result.summary()}")
        return result

    def _compare_nodes(self, old_root: DOMElementNode, new_root: DOMElementNode,
                       result: DOMDiffResult,
                       processed_old: Set[DOMElementNode],
                       processed_new: Set[DOMElementNode]) -> None:
        # Work stack in place of recursion; pairs pop in document order
        stack: List[Tuple[DOMElementNode, DOMElementNode]] = [(old_root, new_root)]
        while stack:
            old_node, new_node = stack.pop()

            changes = detect_element_changes(old_node, new_node, self.ignored_attributes)
            if changes:
                result.modified.append(ModifiedElement(old_node, new_node, changes))
            else:
                result.unchanged.append(old_node)

            # Children are aligned even under a modified node
            child_pairs = self._match_children(old_node, new_node, processed_old, processed_new)
            stack.extend(reversed(child_pairs))

    def _match_children(self, old_parent: DOMElementNode, new_parent: DOMElementNode,
                        processed_old: Set[DOMElementNode],
                        processed_new: Set[DOMElementNode]) -> List[Tuple[DOMElementNode, DOMElementNode]]:
        old_children = old_parent.element_children
        new_children = new_parent.element_children
        pairs = []

        for old_child in old_children:
            if old_child in processed_old:
                continue

            best_match = None
            highest_score = 0.0
            for new_child in new_children:
                if new_child in processed_new:
                    continue
                score = calculate_similarity_score(old_child, new_child)
                if score > highest_score:
                    highest_score = score
                    best_match = new_child

            if best_match is not None and highest_score > self.match_threshold:
                processed_old.add(old_child)
                processed_new.add(best_match)
                pairs.append((old_child, best_match))

        return pairs

    def _collect_unprocessed(self, root: DOMElementNode, processed: Set[DOMElementNode],
                             bucket: List[DOMElementNode]) -> None:
        for node in iter_element_nodes(root):
            if node not in processed:
                bucket.append(node)
                processed.add(node)


def compare_dom_trees(old_tree: DOMElementNode, new_tree: DOMElementNode,
                      ignored_attributes: Optional[Iterable[str]] = None) -> DOMDiffResult:
    """Compare two DOM trees with the default match threshold."""
    return DOMTreeComparator(ignored_attributes=ignored_attributes).compare_trees(old_tree, new_tree)
