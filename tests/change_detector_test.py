import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from dom_history.change_detector import detect_element_changes, should_ignore_attr
from dom_history.dom_node import DOMElementNode, ViewportCoordinates


def test_identical_elements_have_no_changes():
    a = DOMElementNode(tag_name='div', attributes={'id': 'x', 'class': 'c'})
    b = DOMElementNode(tag_name='div', attributes={'class': 'c', 'id': 'x'})
    assert detect_element_changes(a, b) == []


def test_tag_change():
    a = DOMElementNode(tag_name='div')
    b = DOMElementNode(tag_name='section')
    assert detect_element_changes(a, b) == ['tag changed from div to section']


def test_attribute_changes_in_order():
    a = DOMElementNode(tag_name='div', attributes={'id': 'x', 'title': 'old', 'class': 'c'})
    b = DOMElementNode(tag_name='div', attributes={'id': 'x', 'class': 'c d', 'data-new': '1'})
    assert detect_element_changes(a, b) == [
        'attribute title="old" removed',
        'attribute class changed from "c" to "c d"',
        'attribute data-new="1" added',
    ]


def test_flag_changes_follow_attribute_changes():
    a = DOMElementNode(tag_name='button', attributes={'disabled': ''}, is_visible=True, is_interactive=True)
    b = DOMElementNode(tag_name='button', is_visible=False, is_interactive=False)
    assert detect_element_changes(a, b) == [
        'attribute disabled="" removed',
        'visibility changed from true to false',
        'interactivity changed from true to false',
    ]


def test_position_change_reported_without_tolerance():
    a = DOMElementNode(tag_name='div', viewport_coordinates=ViewportCoordinates(0, 0, 100, 50))
    b = DOMElementNode(tag_name='div', viewport_coordinates=ViewportCoordinates(0, 0.5, 100, 50))
    assert detect_element_changes(a, b) == ['position changed from (50, 25) to (50, 25.5)']


def test_position_ignored_when_geometry_missing():
    a = DOMElementNode(tag_name='div', viewport_coordinates=ViewportCoordinates(0, 0, 10, 10))
    b = DOMElementNode(tag_name='div')
    assert detect_element_changes(a, b) == []


def test_resized_box_with_same_center_is_unchanged():
    a = DOMElementNode(tag_name='div', viewport_coordinates=ViewportCoordinates(10, 10, 20, 20))
    b = DOMElementNode(tag_name='div', viewport_coordinates=ViewportCoordinates(0, 0, 40, 40))
    assert detect_element_changes(a, b) == []


def test_ignored_attributes():
    a = DOMElementNode(tag_name='div', attributes={'data-ts': '1', 'data-rev': 'a', 'style': 'x'})
    b = DOMElementNode(tag_name='div', attributes={'data-ts': '2', 'style': 'y'})
    assert detect_element_changes(a, b, ignored_attributes=['data-*']) == [
        'attribute style changed from "x" to "y"',
    ]


@pytest.mark.parametrize('name, patterns, expected', [
    ('style', ['style'], True),
    ('data-x', ['data-*'], True),
    ('data', ['data-*'], False),
    ('id', [], False),
])
def test_should_ignore_attr(name, patterns, expected):
    assert should_ignore_attr(name, patterns) is expected
