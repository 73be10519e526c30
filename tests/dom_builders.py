from __future__ import annotations

from itertools import count
from typing import Any, Union

from websight.core.dom import DomNode, document_root

ElementSpec = tuple[str, dict[str, Any], tuple[Union[str, "ElementSpec"], ...]]

VISIBLE = {"width": 100.0, "height": 20.0}


def el(tag: str, *parts: Union[str, ElementSpec], **attrs: Any) -> ElementSpec:
    return (tag, attrs, parts)


def build_dom(query: str, *specs: ElementSpec) -> DomNode:
    """Build a DomNode tree the way the snapshot script would report it for ``query``.

    Elements get document-order indexes, their own text fragments, trimmed full
    text and the ``contains_query`` flag. Unlike the real snapshot, every element
    is kept, not only those containing the query.
    """
    root = document_root()
    indexes = count()

    def _make(spec: ElementSpec, parent: DomNode, depth: int) -> str:
        tag, attrs, parts = spec
        node = parent.append(DomNode(index=next(indexes), tag=tag, depth=depth, **attrs))
        own: list[str] = []
        content: list[str] = []
        for part in parts:
            if isinstance(part, str):
                own.append(part)
                content.append(part)
            else:
                content.append(_make(part, node, depth + 1))
        full = "".join(content)
        node.own_text = tuple(own)
        node.text = full.strip()
        node.text_length = len(node.text)
        node.contains_query = query in full
        return full

    for spec in specs:
        _make(spec, root, 0)
    return root


def page(query: str, *body: ElementSpec) -> DomNode:
    return build_dom(query, el("html", el("body", *body)))


def find_by_id(root: DomNode, element_id: str) -> DomNode:
    for node in root.iter_subtree():
        if node.element_id == element_id:
            return node
    raise LookupError(element_id)


def to_payload(root: DomNode) -> list[dict[str, Any]]:
    """Serialise a tree into the snapshot script's wire format, keeping only query-containing elements."""
    payload: list[dict[str, Any]] = []
    for node in root.iter_subtree():
        if not node.contains_query:
            continue
        parent = node.parent
        payload.append(
            {
                "index": node.index,
                "parent": parent.index if parent is not None and not parent.is_document else None,
                "tag": node.tag,
                "depth": node.depth,
                "ownText": list(node.own_text),
                "text": node.text,
                "textLength": node.text_length,
                "containsQuery": True,
                "id": node.element_id,
                "className": node.class_name,
                "hasHref": node.has_href,
                "role": node.role,
                "hasTabindex": node.has_tabindex,
                "hasClickHandler": node.has_click_handler,
                "cursor": node.cursor,
                "display": node.display,
                "visibility": node.visibility,
                "width": node.width,
                "height": node.height,
                "disabled": node.disabled,
            }
        )
    return payload
