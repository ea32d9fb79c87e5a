import sys
import os
import json
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from dom_history.dom_node import DOMElementNode
from dom_history.tree_comparator import DOMDiffResult, ModifiedElement, compare_dom_trees
from reporting.report_builder import ReportBuilder, element_label, format_dom_diff_result
from snapshot_factory import create_test_dom_tree


def test_end_to_end_report():
    result = compare_dom_trees(create_test_dom_tree(False), create_test_dom_tree(True))
    assert format_dom_diff_result(result) == '\n'.join([
        '===== DOM tree changes =====',
        '1 elements added',
        '0 elements removed',
        '1 elements modified',
        '5 elements unchanged',
        '----- added -----',
        '1. <span> (/html/body/div/span)',
        '----- modified -----',
        '1. <div> (/html/body/div/div[2])',
        '   - attribute data-modified="true" added',
    ])


def test_empty_sections_are_omitted():
    tree = create_test_dom_tree(False)
    report = format_dom_diff_result(compare_dom_trees(tree, tree), title='No changes')
    assert report.splitlines() == [
        '===== No changes =====',
        '0 elements added',
        '0 elements removed',
        '0 elements modified',
        '6 elements unchanged',
    ]


def test_removed_section_and_numbering():
    result = DOMDiffResult(
        removed=[DOMElementNode(tag_name='li', xpath='/ul/li'), DOMElementNode(tag_name='li')],
        modified=[ModifiedElement(DOMElementNode(tag_name='a'), DOMElementNode(tag_name='a'),
                                  ['attribute href="/" removed', 'visibility changed from true to false'])],
    )
    lines = format_dom_diff_result(result).splitlines()
    assert lines[5:] == [
        '----- removed -----',
        '1. <li> (/ul/li)',
        '2. <li>',
        '----- modified -----',
        '1. <a>',
        '   - attribute href="/" removed',
        '   - visibility changed from true to false',
    ]


def test_markup_is_not_escaped():
    elem = DOMElementNode(tag_name='div', xpath='//*[@id="x"]')
    result = DOMDiffResult(added=[elem])
    assert '1. <div> (//*[@id="x"])' in format_dom_diff_result(result)
    assert element_label(elem) == '<div> (//*[@id="x"])'


def test_generate_reports(tmp_path):
    result = compare_dom_trees(create_test_dom_tree(False), create_test_dom_tree(True))
    builder = ReportBuilder(title='Nightly check')

    text_path = builder.generate_text_report(result, tmp_path / 'out' / 'report.txt')
    assert text_path.read_text(encoding='utf-8').startswith('===== Nightly check =====\n')

    json_path = builder.generate_json_report(result, tmp_path / 'report.json')
    data = json.loads(json_path.read_text(encoding='utf-8'))
    assert data['title'] == 'Nightly check'
    assert data['has_changes'] is True
    assert data['summary']['added'] == 1
    assert builder.result is result
