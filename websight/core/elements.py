from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from websight.core.dom import DomNode


class InteractionKind(str, Enum):
    CLICK = "click"
    HOVER = "hover"


class InteractionStrategy(str, Enum):
    NATIVE = "native"
    SYNTHETIC_POINTER_EVENTS = "synthetic_pointer_events"
    BARE_EVENT = "bare_event"


DEFAULT_STRATEGIES: tuple[InteractionStrategy, ...] = (
    InteractionStrategy.NATIVE,
    InteractionStrategy.SYNTHETIC_POINTER_EVENTS,
    InteractionStrategy.BARE_EVENT,
)


@dataclass(frozen=True)
class Candidate:
    node: DomNode
    depth: int
    direct_text_match: bool


@dataclass(frozen=True)
class MatchSet:
    query: str
    candidates: tuple[Candidate, ...] = ()

    @property
    def total(self) -> int:
        return len(self.candidates)

    def is_empty(self) -> bool:
        return not self.candidates

    def __len__(self) -> int:
        return len(self.candidates)


@dataclass(frozen=True)
class Resolution:
    candidate: Candidate
    target: DomNode
    fallback: bool = False


@dataclass(frozen=True)
class ElementDescriptor:
    tag_name: str
    element_id: str = ""
    class_name: str = ""
    text: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> ElementDescriptor:
        data = payload or {}
        text = data.get("text")
        return cls(
            tag_name=str(data.get("tagName") or "").upper(),
            element_id=str(data.get("id") or ""),
            class_name=str(data.get("className") or ""),
            text=str(text) if text is not None else None,
        )

    def render_tag(self) -> str:
        rendered = f"<{self.tag_name}"
        if self.element_id:
            rendered += f' id="{self.element_id}"'
        if self.class_name:
            rendered += f' class="{self.class_name}"'
        return rendered + ">"

    def render(self, truncate_length: int) -> str:
        lines = [f"Element: {self.render_tag()}"]
        if self.text:
            suffix = "..." if len(self.text) >= truncate_length else ""
            lines.append(f'Text: "{self.text}{suffix}"')
        return "\n".join(lines)


@dataclass(frozen=True)
class InteractionTarget:
    """Where the interaction script should find its element.

    Exactly one of the three addressing modes is set: a snapshot index (with the
    tag it had, to detect a changed DOM), a CSS selector, or viewport
    coordinates.
    """

    index: int | None = None
    tag: str | None = None
    selector: str | None = None
    x: float | None = None
    y: float | None = None

    @classmethod
    def for_node(cls, node: DomNode) -> InteractionTarget:
        return cls(index=node.index, tag=node.tag)

    @classmethod
    def for_selector(cls, selector: str) -> InteractionTarget:
        return cls(selector=selector)

    @classmethod
    def at_point(cls, x: float, y: float) -> InteractionTarget:
        return cls(x=x, y=y)

    def to_payload(self) -> dict[str, Any]:
        if self.index is not None:
            return {"index": self.index, "tag": self.tag}
        if self.selector is not None:
            return {"selector": self.selector}
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class StrategyAttempt:
    strategy: InteractionStrategy
    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class InteractionOutcome:
    succeeded: bool
    strategy_used: InteractionStrategy | None
    descriptor: ElementDescriptor
    attempts: tuple[StrategyAttempt, ...] = field(default_factory=tuple)
    x: float = 0.0
    y: float = 0.0
