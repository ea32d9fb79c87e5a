"""
Page Snapshot Module
Captures DOM snapshot trees from live pages using Playwright.
"""

from playwright.async_api import Page, async_playwright
from typing import Awaitable, Callable, Optional
import logging

from dom_history.config import DOMHistoryConfig
from dom_history.change_tracker import track_dom_changes
from dom_history.dom_node import DOMElementNode
from dom_history.exceptions import SnapshotUnavailableError
from dom_history.tree_comparator import DOMDiffResult, DOMTreeComparator

logger = logging.getLogger(__name__)

# Serializes document.documentElement into the DOMElementNode.from_dict format.
BUILD_DOM_TREE_JS = """
() => {
    const root = document.documentElement;
    if (!root) {
        return null;
    }

    const INTERACTIVE_TAGS = ['a', 'button', 'input', 'select', 'textarea', 'option'];
    const INTERACTIVE_ROLES = ['button', 'link', 'checkbox', 'menuitem', 'tab', 'radio'];
    const CLICKABLE_CLASSES = ['btn', 'button', 'clickable', 'nav-item'];

    function xpathSegment(el) {
        let index = 0;
        let sibling = el.previousElementSibling;
        while (sibling) {
            if (sibling.tagName === el.tagName) {
                index++;
            }
            sibling = sibling.previousElementSibling;
        }
        const tag = el.tagName.toLowerCase();
        return index ? `${tag}[${index + 1}]` : tag;
    }

    function isVisible(el, style, rect) {
        if (style.display === 'none' || style.visibility === 'hidden') {
            return false;
        }
        return rect.width > 0 && rect.height > 0;
    }

    function isInteractive(el, style) {
        const tag = el.tagName.toLowerCase();
        if (INTERACTIVE_TAGS.includes(tag)) {
            return true;
        }
        const role = el.getAttribute('role');
        if (role && INTERACTIVE_ROLES.includes(role)) {
            return true;
        }
        if (el.hasAttribute('onclick') || el.hasAttribute('ng-click') || el.hasAttribute('@click')) {
            return true;
        }
        if (CLICKABLE_CLASSES.some(cls => el.classList.contains(cls))) {
            return true;
        }
        return style.cursor === 'pointer';
    }

    function serialize(el, xpath) {
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        const attributes = {};
        for (const attr of el.attributes) {
            attributes[attr.name] = attr.value;
        }
        return {
            type: 'element',
            tagName: el.tagName.toLowerCase(),
            xpath: xpath,
            attributes: attributes,
            isVisible: isVisible(el, style, rect),
            isInteractive: isInteractive(el, style),
            viewportCoordinates: {x: rect.x, y: rect.y, width: rect.width, height: rect.height},
            children: [],
        };
    }

    const tree = serialize(root, '/' + xpathSegment(root));
    const stack = [[root, tree]];
    while (stack.length) {
        const [el, node] = stack.pop();
        for (const child of el.childNodes) {
            if (child.nodeType === Node.ELEMENT_NODE) {
                const childNode = serialize(child, node.xpath + '/' + xpathSegment(child));
                node.children.push(childNode);
                stack.push([child, childNode]);
            } else if (child.nodeType === Node.TEXT_NODE && child.textContent.trim()) {
                node.children.push({type: 'text', text: child.textContent.trim(), isVisible: node.isVisible});
            }
        }
    }
    return tree;
}
"""


async def capture_dom_tree(page: Page) -> DOMElementNode:
    """Capture the current DOM of ``page`` as a snapshot tree."""
    try:
        raw_tree = await page.evaluate(BUILD_DOM_TREE_JS)
    except Exception as e:
        logger.error(f"Error capturing DOM tree: {str(e)}", exc_info=True)
        raise
    if raw_tree is None:
        raise SnapshotUnavailableError('Page has no document element')
    tree = DOMElementNode.from_dict(raw_tree)
    logger.debug(f"Captured DOM tree rooted at {tree.xpath}")
    return tree


def page_snapshot_provider(page: Page) -> Callable[[], Awaitable[DOMElementNode]]:
    """Return a zero-argument coroutine function that snapshots ``page``."""
    async def get_current_tree() -> DOMElementNode:
        return await capture_dom_tree(page)
    return get_current_tree


async def track_page_changes(url: str, delay_ms: Optional[int] = None,
                             config: Optional[DOMHistoryConfig] = None) -> DOMDiffResult:
    """
    Open ``url`` in Chromium, record the DOM tree, wait ``delay_ms`` and
    diff against a second snapshot of the same page.
    """
    config = config or DOMHistoryConfig()
    delay_ms = config.delay_ms if delay_ms is None else delay_ms
    comparator = DOMTreeComparator(ignored_attributes=config.ignored_attributes)

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=config.headless)
        try:
            page = await browser.new_page()
            logger.info(f"Opening {url}")
            await page.goto(url, timeout=config.navigation_timeout_ms)
            initial_tree = await capture_dom_tree(page)
            logger.info(f"Initial DOM tree recorded, interact with the page within {delay_ms / 1000:g}s")
            return await track_dom_changes(initial_tree, delay_ms, page_snapshot_provider(page), comparator)
        finally:
            await browser.close()
