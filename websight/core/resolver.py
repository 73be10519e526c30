from __future__ import annotations

from websight.core.dom import DomNode
from websight.core.elements import Candidate, MatchSet, Resolution
from websight.core.errors import ElementNotFoundError, OccurrenceOutOfRangeError

CLICKABLE_TAGS = frozenset({"button", "input", "select", "textarea", "label"})
CLICKABLE_ROLES = frozenset({"button", "link", "tab", "menuitem"})
SKIPPED_TAGS = frozenset({"script", "style"})
_ANCESTOR_STOP_TAGS = frozenset({"body", "html"})


def find_matches(root: DomNode, query: str) -> MatchSet:
    """Collect elements holding ``query`` as direct text, deepest first.

    ``sorted`` is stable, so elements at the same depth keep document order.
    """
    candidates: list[Candidate] = []
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        if node.tag in SKIPPED_TAGS:
            continue
        direct = any(query in fragment for fragment in node.own_text)
        if direct or node.text_equals(query):
            candidates.append(Candidate(node=node, depth=node.depth, direct_text_match=direct))
        stack.extend(reversed(node.children))
    ordered = sorted(candidates, key=lambda candidate: candidate.depth, reverse=True)
    return MatchSet(query=query, candidates=tuple(ordered))


def select_occurrence(matches: MatchSet, occurrence: int) -> Candidate:
    if matches.is_empty():
        raise ElementNotFoundError(f'No element found containing text: "{matches.query}"', query=matches.query)
    if occurrence < 1 or occurrence > matches.total:
        raise OccurrenceOutOfRangeError(query=matches.query, occurrence=occurrence, total=matches.total)
    return matches.candidates[occurrence - 1]


def is_interactable(node: DomNode) -> bool:
    if node.tag == "a" and node.has_href:
        return True
    if node.tag in CLICKABLE_TAGS:
        return True
    if node.has_click_handler:
        return True
    if node.role and node.role.strip().lower() in CLICKABLE_ROLES:
        return True
    if node.has_tabindex:
        return True
    return node.cursor == "pointer"


def is_visible_target(node: DomNode, *, require_enabled: bool = True) -> bool:
    if node.width <= 0 or node.height <= 0:
        return False
    if node.visibility == "hidden" or node.display == "none":
        return False
    if require_enabled and node.disabled:
        return False
    return True


def resolve_interactive(candidate: Candidate) -> Resolution:
    """Pick the element to act on for a text match.

    Order: the match itself, the first interactable descendant whose text holds
    the query, the nearest interactable ancestor below ``body``, and finally the
    match itself again, flagged as a fallback.
    """
    node = candidate.node
    if is_interactable(node):
        return Resolution(candidate=candidate, target=node)
    for descendant in node.iter_subtree():
        if descendant.contains_query and is_interactable(descendant):
            return Resolution(candidate=candidate, target=descendant)
    for ancestor in node.iter_ancestors():
        if ancestor.is_document or ancestor.tag in _ANCESTOR_STOP_TAGS:
            break
        if is_interactable(ancestor):
            return Resolution(candidate=candidate, target=ancestor)
    return Resolution(candidate=candidate, target=node, fallback=True)
