"""
DOM Node Module
Tree model for DOM snapshots compared across points in time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from .exceptions import MalformedTreeError


@dataclass(frozen=True)
class Coordinates:
    x: float
    y: float


@dataclass(frozen=True)
class ViewportCoordinates:
    """Bounding box of an element relative to the viewport."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Coordinates:
        return Coordinates(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ViewportCoordinates':
        return cls(
            x=float(data.get('x', 0)),
            y=float(data.get('y', 0)),
            width=float(data.get('width', 0)),
            height=float(data.get('height', 0)),
        )


@dataclass(eq=False)
class DOMTextNode:
    """Non-element leaf. Ignored by matching and never part of a diff."""
    text: str
    is_visible: bool = True
    parent: Optional['DOMElementNode'] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'text', 'text': self.text, 'isVisible': self.is_visible}


def _attribute_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        return ' '.join(str(v) for v in value)
    return str(value)


@dataclass(eq=False)
class DOMElementNode:
    """
    One element of a DOM snapshot.

    Nodes compare and hash by identity, so two structurally identical
    elements of the same snapshot are still distinct set members.
    """
    tag_name: str
    xpath: str = ''
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List['DOMNode'] = field(default_factory=list)
    is_visible: bool = True
    is_interactive: bool = False
    viewport_coordinates: Optional[ViewportCoordinates] = None
    parent: Optional['DOMElementNode'] = field(default=None, repr=False)

    def __post_init__(self):
        self.attributes = {str(k): _attribute_value(v) for k, v in self.attributes.items()}
        for child in self.children:
            child.parent = self

    def append_child(self, child: 'DOMNode') -> 'DOMNode':
        child.parent = self
        self.children.append(child)
        return child

    @property
    def element_children(self) -> List['DOMElementNode']:
        return [child for child in self.children if isinstance(child, DOMElementNode)]

    def to_dict(self, include_children: bool = True) -> Dict[str, Any]:
        data = {
            'type': 'element',
            'tagName': self.tag_name,
            'xpath': self.xpath,
            'attributes': dict(self.attributes),
            'isVisible': self.is_visible,
            'isInteractive': self.is_interactive,
            'viewportCoordinates': (
                self.viewport_coordinates.to_dict() if self.viewport_coordinates else None
            ),
        }
        if include_children:
            data['children'] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DOMElementNode':
        """Build a tree from the serialized snapshot format produced by ``to_dict``."""
        if not isinstance(data, dict) or data.get('type', 'element') != 'element':
            raise MalformedTreeError('Snapshot root must be an element')

        root = _element_from_dict(data)
        # Iterative: real pages can nest deeper than the recursion limit
        stack = [(root, _raw_children(data))]
        while stack:
            parent, raw_children = stack.pop()
            for raw in raw_children:
                if not isinstance(raw, dict):
                    raise MalformedTreeError(f'Invalid child node under {parent.xpath or parent.tag_name}: {raw!r}')
                if raw.get('type') == 'text':
                    parent.append_child(DOMTextNode(
                        text=str(raw.get('text', '')),
                        is_visible=bool(raw.get('isVisible', True)),
                    ))
                    continue
                child = parent.append_child(_element_from_dict(raw))
                stack.append((child, _raw_children(raw)))
        return root


DOMNode = Union[DOMElementNode, DOMTextNode]


def _raw_children(data: Dict[str, Any]) -> List[Any]:
    children = data.get('children') or []
    if not isinstance(children, list):
        raise MalformedTreeError(f'children must be a list, got {type(children).__name__}')
    return children


def _element_from_dict(data: Dict[str, Any]) -> DOMElementNode:
    if 'tagName' not in data:
        raise MalformedTreeError(f'Element node without tagName: {sorted(data)}')
    attributes = data.get('attributes') or {}
    if not isinstance(attributes, dict):
        raise MalformedTreeError(f'attributes must be an object, got {type(attributes).__name__}')
    coords = data.get('viewportCoordinates')
    if coords is not None and not isinstance(coords, dict):
        raise MalformedTreeError(f'viewportCoordinates must be an object, got {type(coords).__name__}')
    return DOMElementNode(
        tag_name=str(data['tagName']).lower(),
        xpath=data.get('xpath') or '',
        attributes=attributes,
        is_visible=bool(data.get('isVisible', True)),
        is_interactive=bool(data.get('isInteractive', False)),
        viewport_coordinates=ViewportCoordinates.from_dict(coords) if coords else None,
    )


def iter_element_nodes(root: DOMElementNode) -> Iterator[DOMElementNode]:
    """Yield every element node of the tree in document (pre-)order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.element_children))


def validate_tree(root: DOMElementNode) -> None:
    """Check that the tree is acyclic and that no element is shared between parents."""
    if not isinstance(root, DOMElementNode):
        raise MalformedTreeError(f'Expected a DOMElementNode root, got {type(root).__name__}')

    seen = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node in seen:
            raise MalformedTreeError(f'Element <{node.tag_name}> ({node.xpath}) is reachable more than once')
        seen.add(node)
        for child in node.children:
            if isinstance(child, DOMElementNode):
                stack.append(child)
            elif not isinstance(child, DOMTextNode):
                raise MalformedTreeError(f'Unsupported child type {type(child).__name__} under <{node.tag_name}>')
