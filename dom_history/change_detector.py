"""
Change Detector Module
Lists field-level differences between two elements already paired as the
same logical node.
"""

from typing import Iterable, List

from .dom_node import DOMElementNode


def _format_flag(value: bool) -> str:
    return 'true' if value else 'false'


def _format_number(value: float) -> str:
    return f'{value:g}'


def should_ignore_attr(attr_name: str, ignore_list: Iterable[str]) -> bool:
    """Match an attribute name against exact names and ``prefix*`` patterns."""
    for pattern in ignore_list:
        if pattern.endswith('*'):
            if attr_name.startswith(pattern[:-1]):
                return True
        elif attr_name == pattern:
            return True
    return False


def detect_element_changes(old_elem: DOMElementNode, new_elem: DOMElementNode,
                           ignored_attributes: Iterable[str] = ()) -> List[str]:
    """
    Return human-readable change descriptors, in this order:
    tag, removed/changed attributes (old attribute order), added attributes,
    visibility, interactivity, viewport position.

    An empty list means the pair is unchanged.
    """
    ignored_attributes = tuple(ignored_attributes)
    changes = []

    if old_elem.tag_name != new_elem.tag_name:
        changes.append(f'tag changed from {old_elem.tag_name} to {new_elem.tag_name}')

    old_attrs = {k: v for k, v in old_elem.attributes.items() if not should_ignore_attr(k, ignored_attributes)}
    new_attrs = {k: v for k, v in new_elem.attributes.items() if not should_ignore_attr(k, ignored_attributes)}

    for key, value in old_attrs.items():
        if key not in new_attrs:
            changes.append(f'attribute {key}="{value}" removed')
        elif new_attrs[key] != value:
            changes.append(f'attribute {key} changed from "{value}" to "{new_attrs[key]}"')

    for key, value in new_attrs.items():
        if key not in old_attrs:
            changes.append(f'attribute {key}="{value}" added')

    if old_elem.is_visible != new_elem.is_visible:
        changes.append(
            f'visibility changed from {_format_flag(old_elem.is_visible)} to {_format_flag(new_elem.is_visible)}'
        )

    if old_elem.is_interactive != new_elem.is_interactive:
        changes.append(
            f'interactivity changed from {_format_flag(old_elem.is_interactive)} '
            f'to {_format_flag(new_elem.is_interactive)}'
        )

    if old_elem.viewport_coordinates and new_elem.viewport_coordinates:
        old_center = old_elem.viewport_coordinates.center
        new_center = new_elem.viewport_coordinates.center
        if old_center.x != new_center.x or old_center.y != new_center.y:
            changes.append(
                f'position changed from ({_format_number(old_center.x)}, {_format_number(old_center.y)}) '
                f'to ({_format_number(new_center.x)}, {_format_number(new_center.y)})'
            )

    return changes
