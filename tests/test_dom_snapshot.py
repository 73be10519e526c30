from __future__ import annotations

from dom_builders import el, page, to_payload
from websight.core.dom import build_snapshot_tree, node_from_payload
from websight.core.resolver import find_matches, resolve_interactive, select_occurrence


def test_snapshot_payload_rebuilds_parent_links() -> None:
    root = page(
        "Buy",
        el("div", el("span", "Buy", element_id="label"), role="button", element_id="card"),
        el("p", "unrelated"),
    )

    tree = build_snapshot_tree(to_payload(root))

    assert [node.tag for node in tree.children] == ["html"]
    span = next(node for node in tree.iter_subtree() if node.element_id == "label")
    assert [ancestor.tag for ancestor in span.iter_ancestors()] == ["div", "body", "html", "#document"]
    assert all(node.tag != "p" for node in tree.iter_subtree())


def test_resolution_over_snapshot_matches_full_tree() -> None:
    root = page(
        "Buy",
        el("div", el("span", "Buy", element_id="label"), role="button", element_id="card"),
        el("button", "Buy", element_id="second"),
    )

    tree = build_snapshot_tree(to_payload(root))
    full = [candidate.node.element_id for candidate in find_matches(root, "Buy").candidates]
    snapshot = [candidate.node.element_id for candidate in find_matches(tree, "Buy").candidates]

    assert snapshot == full
    assert resolve_interactive(select_occurrence(find_matches(tree, "Buy"), 1)).target.element_id == "card"


def test_entries_with_unknown_parent_hang_off_document() -> None:
    tree = build_snapshot_tree(
        [
            {"index": 7, "parent": 3, "tag": "SPAN", "depth": 4, "ownText": ["hi"], "text": "hi", "textLength": 2},
        ]
    )

    (node,) = tree.children
    assert node.tag == "span"
    assert node.parent is tree


def test_node_from_payload_defaults() -> None:
    node = node_from_payload({"index": 2, "tag": "div"})

    assert node.cursor == "auto"
    assert node.role is None
    assert node.own_text == ()
    assert node.width == 0.0
