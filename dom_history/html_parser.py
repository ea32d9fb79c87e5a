"""
HTML Snapshot Parser Module
Parses HTML content into a DOMElementNode snapshot tree.
"""

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString
from typing import Dict, List, Optional, Union
from pathlib import Path
import logging
import re

from utils.file_utils import read_file_content
from .dom_node import DOMElementNode, DOMTextNode

logger = logging.getLogger(__name__)

INTERACTIVE_TAGS = {'a', 'button', 'input', 'select', 'textarea', 'option'}
INTERACTIVE_ROLES = {'button', 'link', 'checkbox', 'menuitem', 'tab', 'radio'}
CLICK_HANDLER_ATTRS = ('onclick', 'ng-click', '@click')
CLICKABLE_CLASSES = {'btn', 'button', 'clickable', 'nav-item'}
NON_RENDERED_TAGS = {'head', 'script', 'style', 'meta', 'link', 'title', 'noscript', 'template'}

_HIDDEN_STYLE = re.compile(r'(display\s*:\s*none|visibility\s*:\s*hidden)', re.IGNORECASE)


class HTMLSnapshotParser:
    """Builds snapshot trees from static markup. Static markup carries no geometry."""

    def parse_file(self, file_path: Union[str, Path]) -> DOMElementNode:
        """Parse HTML file and return its snapshot tree."""
        try:
            logger.info(f"Starting to parse file: {file_path}")
            content = read_file_content(Path(file_path))
            logger.debug(f"Successfully read file, content length: {len(content)}")
            return self.parse(content)

        except Exception as e:
            logger.error(f"Error parsing file {file_path}: {str(e)}", exc_info=True)
            raise

    def parse(self, html_content: str) -> DOMElementNode:
        """
        Parse HTML content into a snapshot tree rooted at ``/html``.

        Fragments are wrapped in a synthetic ``html`` element, and top-level
        elements left outside ``<html>`` become its trailing children, so no
        element of the markup is dropped.
        """
        try:
            logger.debug(f"Input HTML content length: {len(html_content)}")
            soup = BeautifulSoup(html_content, 'html.parser')

            top_level = list(soup.children)
            html_tag = next((child for child in top_level
                             if isinstance(child, Tag) and child.name == 'html'), None)
            if html_tag is not None:
                root = self._make_element(html_tag, '/html', parent_visible=True)
                children = list(html_tag.children) + [child for child in top_level if child is not html_tag]
            else:
                logger.debug("No html element found, wrapping content in an html root")
                root = DOMElementNode(tag_name='html', xpath='/html')
                children = top_level

            self._build_tree(root, children)
            logger.debug(f"HTML parsing complete, {len(root.element_children)} top-level elements")
            return root

        except Exception as e:
            logger.error(f"Error parsing HTML: {str(e)}", exc_info=True)
            raise

    def _build_tree(self, root: DOMElementNode, root_children: List[PageElement]) -> None:
        stack = [(root_children, root)]
        while stack:
            children, node = stack.pop()
            sibling_counts: Dict[str, int] = {}
            for child in children:
                if isinstance(child, Tag):
                    index = sibling_counts.get(child.name, 0)
                    sibling_counts[child.name] = index + 1
                    suffix = f'[{index + 1}]' if index else ''
                    element = self._make_element(child, f'{node.xpath}/{child.name}{suffix}', node.is_visible)
                    node.append_child(element)
                    stack.append((list(child.children), element))
                else:
                    text_node = self._make_text(child, node.is_visible)
                    if text_node is not None:
                        node.append_child(text_node)

    def _make_text(self, child, parent_visible: bool) -> Optional[DOMTextNode]:
        if isinstance(child, PreformattedString) or not isinstance(child, NavigableString):
            return None
        text_content = str(child).strip()
        if not text_content:
            return None
        return DOMTextNode(text=text_content, is_visible=parent_visible)

    def _make_element(self, tag: Tag, xpath: str, parent_visible: bool) -> DOMElementNode:
        attrs = self._parse_attributes(tag)
        return DOMElementNode(
            tag_name=tag.name.lower(),
            xpath=xpath,
            attributes=attrs,
            is_visible=parent_visible and self._is_visible(tag.name, attrs),
            is_interactive=self._is_interactive(tag.name, attrs),
        )

    def _parse_attributes(self, tag: Tag) -> Dict[str, str]:
        attrs = {}
        for key, value in tag.attrs.items():
            # bs4 returns multi-valued attributes such as class as lists
            attrs[key] = ' '.join(value) if isinstance(value, list) else (value or '')
        return attrs

    def _is_visible(self, tag_name: str, attrs: Dict[str, str]) -> bool:
        if tag_name in NON_RENDERED_TAGS:
            return False
        if 'hidden' in attrs:
            return False
        if attrs.get('aria-hidden', '').lower() == 'true':
            return False
        if tag_name == 'input' and attrs.get('type', '').lower() == 'hidden':
            return False
        return not _HIDDEN_STYLE.search(attrs.get('style', ''))

    def _is_interactive(self, tag_name: str, attrs: Dict[str, str]) -> bool:
        if tag_name in INTERACTIVE_TAGS:
            return True
        if attrs.get('role', '').lower() in INTERACTIVE_ROLES:
            return True
        if any(attr in attrs for attr in CLICK_HANDLER_ATTRS):
            return True
        return bool(CLICKABLE_CLASSES & set(attrs.get('class', '').split()))
