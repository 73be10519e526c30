from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

DOCUMENT_TAG = "#document"


@dataclass(eq=False)
class DomNode:
    """Plain-data snapshot of one element, as reported by the in-page snapshot script.

    ``index`` is the element position in ``document.querySelectorAll('*')`` at
    snapshot time and is what the interaction script uses to find it again.
    ``text`` is the trimmed ``textContent``, possibly truncated; ``text_length``
    is the untruncated trimmed length. ``contains_query`` tells whether the
    full ``textContent`` contains the query the snapshot was taken for.
    """

    index: int
    tag: str
    depth: int
    own_text: tuple[str, ...] = ()
    text: str = ""
    text_length: int = 0
    contains_query: bool = False
    element_id: str = ""
    class_name: str = ""
    has_href: bool = False
    role: str | None = None
    has_tabindex: bool = False
    has_click_handler: bool = False
    cursor: str = "auto"
    display: str = "block"
    visibility: str = "visible"
    width: float = 0.0
    height: float = 0.0
    disabled: bool = False
    parent: DomNode | None = field(default=None, repr=False)
    children: list[DomNode] = field(default_factory=list, repr=False)

    @property
    def is_document(self) -> bool:
        return self.tag == DOCUMENT_TAG

    def append(self, child: DomNode) -> DomNode:
        child.parent = self
        self.children.append(child)
        return child

    def iter_subtree(self) -> Iterator[DomNode]:
        """Pre-order walk of the descendants, excluding this node."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_ancestors(self) -> Iterator[DomNode]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def text_equals(self, query: str) -> bool:
        return self.text_length == len(query) and self.text == query


def document_root() -> DomNode:
    return DomNode(index=-1, tag=DOCUMENT_TAG, depth=-1)


def node_from_payload(payload: dict[str, Any]) -> DomNode:
    return DomNode(
        index=int(payload["index"]),
        tag=str(payload.get("tag") or "").lower(),
        depth=int(payload.get("depth") or 0),
        own_text=tuple(str(item) for item in payload.get("ownText") or ()),
        text=str(payload.get("text") or ""),
        text_length=int(payload.get("textLength") or 0),
        contains_query=bool(payload.get("containsQuery")),
        element_id=str(payload.get("id") or ""),
        class_name=str(payload.get("className") or ""),
        has_href=bool(payload.get("hasHref")),
        role=payload.get("role") or None,
        has_tabindex=bool(payload.get("hasTabindex")),
        has_click_handler=bool(payload.get("hasClickHandler")),
        cursor=str(payload.get("cursor") or "auto"),
        display=str(payload.get("display") or ""),
        visibility=str(payload.get("visibility") or ""),
        width=float(payload.get("width") or 0.0),
        height=float(payload.get("height") or 0.0),
        disabled=bool(payload.get("disabled")),
    )


def build_snapshot_tree(payload: list[dict[str, Any]]) -> DomNode:
    """Link snapshot entries into a tree under a synthetic document root.

    Entries arrive in document order, so a parent is always seen before its
    children. Entries whose parent is absent from the snapshot hang off the
    document root.
    """
    root = document_root()
    by_index: dict[int, DomNode] = {}
    for item in payload:
        node = node_from_payload(item)
        parent_index = item.get("parent")
        parent = by_index.get(int(parent_index)) if parent_index is not None else None
        (parent or root).append(node)
        by_index[node.index] = node
    return root
