"""
Similarity Scoring Module
Cheap attribute-driven affinity between two DOM elements, used to pair
elements across snapshots. Text content is deliberately not part of the
score so copy changes do not break matching.
"""

from typing import Set

from .dom_node import DOMElementNode

TAG_WEIGHT = 3
XPATH_WEIGHT = 2
ID_WEIGHT = 4
CLASS_WEIGHT = 2
TOTAL_WEIGHT = TAG_WEIGHT + XPATH_WEIGHT + ID_WEIGHT + CLASS_WEIGHT


def tokenize_classes(value: str) -> Set[str]:
    """Split a class attribute into its whitespace-separated tokens."""
    return set(value.split())


def calculate_similarity_score(elem1: DOMElementNode, elem2: DOMElementNode) -> float:
    """
    Return a score in [0, 1]; 1 means every signal matched.

    Signals and weights:
        tag name equality           3
        xpath equality              2
        id equality (both present)  4
        class token overlap         2 * |common| / max(|classes1|, |classes2|)

    An id or class signal contributes zero when only one element carries
    the attribute. When neither element carries it, the signal is left out
    of the total weight as well, so elements without ids can still match
    themselves. With id and class on both sides the total weight is 11.
    """
    fixed = 0
    total = TAG_WEIGHT + XPATH_WEIGHT
    if elem1.tag_name == elem2.tag_name:
        fixed += TAG_WEIGHT
    if elem1.xpath == elem2.xpath:
        fixed += XPATH_WEIGHT

    id1 = elem1.attributes.get('id')
    id2 = elem2.attributes.get('id')
    if id1 or id2:
        total += ID_WEIGHT
        if id1 and id2 and id1 == id2:
            fixed += ID_WEIGHT

    common_classes = 0
    max_classes = 1
    class1 = elem1.attributes.get('class')
    class2 = elem2.attributes.get('class')
    if class1 or class2:
        total += CLASS_WEIGHT
        if class1 and class2:
            class1_set = tokenize_classes(class1)
            class2_set = tokenize_classes(class2)
            if class1_set and class2_set:
                common_classes = len(class1_set & class2_set)
                max_classes = max(len(class1_set), len(class2_set))

    # A single division keeps rational scores exact, e.g. 154/220 == 0.7
    return (fixed * max_classes + CLASS_WEIGHT * common_classes) / (total * max_classes)
