import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from dom_history.dom_node import DOMTextNode, iter_element_nodes
from dom_history.html_parser import HTMLSnapshotParser
from dom_history.tree_comparator import compare_dom_trees

PAGE = '''<!DOCTYPE html>
<html>
  <head><title>Shop</title></head>
  <body class="main-body">
    <!-- navigation -->
    <div id="container" class="container">
      <div id="item-1" class="item">One</div>
      <div id="item-2" class="item">Two</div>
      <div id="item-3" class="item">Three</div>
    </div>
  </body>
</html>'''


def test_html_tag_and_attribute_extraction():
    parser = HTMLSnapshotParser()
    tree = parser.parse('<div id="main" class="foo  bar"><span data-x="1">Hello</span></div>')
    div = tree.element_children[0]
    assert div.tag_name == 'div'
    assert div.attributes['id'] == 'main'
    assert div.attributes['class'] == 'foo bar'
    span = div.element_children[0]
    assert span.tag_name == 'span'
    assert span.attributes['data-x'] == '1'
    assert span.children[0].text == 'Hello'


def test_xpaths_index_repeated_tags():
    parser = HTMLSnapshotParser()
    tree = parser.parse('<html><body><p></p><div></div><p></p><p></p></body></html>')
    xpaths = [node.xpath for node in iter_element_nodes(tree)]
    assert xpaths == ['/html', '/html/body', '/html/body/p', '/html/body/div',
                      '/html/body/p[2]', '/html/body/p[3]']


def test_comments_doctype_and_whitespace_are_dropped():
    parser = HTMLSnapshotParser()
    tree = parser.parse(PAGE)
    body = tree.element_children[1]
    assert [child.tag_name for child in body.children] == ['div']
    item = body.element_children[0].element_children[0]
    assert len(item.children) == 1 and isinstance(item.children[0], DOMTextNode)


def test_visibility_heuristics():
    parser = HTMLSnapshotParser()
    tree = parser.parse(
        '<html><head><title>t</title></head><body>'
        '<div hidden><p>inner</p></div>'
        '<div style="display: none"></div>'
        '<div aria-hidden="true"></div>'
        '<input type="hidden" name="csrf">'
        '<div class="shown"></div>'
        '</body></html>'
    )
    visibility = {node.xpath: node.is_visible for node in iter_element_nodes(tree)}
    assert visibility['/html/head'] is False
    assert visibility['/html/body/div'] is False
    assert visibility['/html/body/div/p'] is False
    assert visibility['/html/body/div[2]'] is False
    assert visibility['/html/body/div[3]'] is False
    assert visibility['/html/body/input'] is False
    assert visibility['/html/body/div[4]'] is True


def test_interactivity_heuristics():
    parser = HTMLSnapshotParser()
    tree = parser.parse(
        '<body><a href="#">a</a><span role="tab">t</span><div class="btn primary">b</div>'
        '<div onclick="go()">c</div><p>plain</p></body>'
    )
    body = tree.element_children[0]
    interactive = [node.is_interactive for node in body.element_children]
    assert interactive == [True, True, True, True, False]


def test_empty_document():
    tree = HTMLSnapshotParser().parse('')
    assert tree.tag_name == 'html'
    assert tree.children == []


def test_parse_file(tmp_path):
    path = tmp_path / 'page.html'
    path.write_text(PAGE, encoding='utf-8')
    tree = HTMLSnapshotParser().parse_file(path)
    assert tree.xpath == '/html'


def test_parse_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        HTMLSnapshotParser().parse_file(tmp_path / 'missing.html')


def test_html_snapshots_diff_end_to_end():
    parser = HTMLSnapshotParser()
    modified_page = PAGE.replace(
        '<div id="item-2" class="item">Two</div>',
        '<div id="item-2" class="item" data-modified="true">Two, edited</div>'
    ).replace(
        '<div id="item-3" class="item">Three</div>',
        '<div id="item-3" class="item">Three</div>\n      <span id="new-element" class="highlight">New</span>'
    )
    result = compare_dom_trees(parser.parse(PAGE), parser.parse(modified_page))
    assert result.removed == []
    assert [node.attributes['id'] for node in result.added] == ['new-element']
    assert [m.changes for m in result.modified] == [['attribute data-modified="true" added']]
    # html, head, title, body, container, item-1, item-3
    assert len(result.unchanged) == 7


def test_fragment_is_wrapped_in_html_root():
    tree = HTMLSnapshotParser().parse('<div id="a">1</div><div id="b">2</div><p>3</p>')
    assert tree.tag_name == 'html'
    assert tree.xpath == '/html'
    assert [node.xpath for node in tree.element_children] == ['/html/div', '/html/div[2]', '/html/p']


def test_new_top_level_fragment_element_is_added():
    parser = HTMLSnapshotParser()
    result = compare_dom_trees(parser.parse('<div id="a">1</div>'),
                               parser.parse('<div id="a">1</div><div id="b">2</div>'))
    assert [node.attributes['id'] for node in result.added] == ['b']
    assert result.removed == []


def test_elements_after_closing_html_are_kept():
    parser = HTMLSnapshotParser()
    old_tree = parser.parse('<html><body><p>x</p></body></html>')
    new_tree = parser.parse('<html><body><p>x</p></body></html><div id="late">y</div>')
    assert [node.xpath for node in new_tree.element_children] == ['/html/body', '/html/div']

    result = compare_dom_trees(old_tree, new_tree)
    assert [node.attributes['id'] for node in result.added] == ['late']
