from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Sequence

from websight.adapters.browser.scripts import (
    ELEMENT_HTML_SCRIPT,
    INTERACT_SCRIPT,
    PROBE_SELECTOR_SCRIPT,
    SCROLL_INTO_VIEW_SCRIPT,
    SNAPSHOT_SCRIPT,
)
from websight.adapters.config.schema import InteractionConfig
from websight.core.dom import DomNode, build_snapshot_tree, node_from_payload
from websight.core.elements import (
    DEFAULT_STRATEGIES,
    Candidate,
    ElementDescriptor,
    InteractionKind,
    InteractionOutcome,
    InteractionStrategy,
    InteractionTarget,
    MatchSet,
    Resolution,
    StrategyAttempt,
)
from websight.core.errors import (
    ElementNotFoundError,
    ElementNotInteractableError,
    PageScriptError,
    StaleElementError,
)
from websight.core.resolver import find_matches, is_visible_target, resolve_interactive, select_occurrence
from websight.shared.retries import AsyncRetriesService, RetryPolicy
from websight.shared.utils import format_number


@dataclass(frozen=True)
class TextMatch:
    matches: MatchSet
    occurrence: int
    candidate: Candidate


@dataclass(frozen=True)
class TextResolution:
    match: TextMatch
    resolution: Resolution

    @property
    def total(self) -> int:
        return self.match.matches.total

    @property
    def target(self) -> DomNode:
        return self.resolution.target


@dataclass(frozen=True)
class ProbedElement:
    selector: str
    node: DomNode
    descriptor: ElementDescriptor
    attempt: int


class ElementInteractor:
    """Finds page elements by text, selector or position and drives the strategy chain on them."""

    def __init__(self, config: InteractionConfig, retries: AsyncRetriesService | None = None) -> None:
        self._config = config
        self._retries = retries or AsyncRetriesService()
        self._logger = logging.getLogger("websight.interaction")

    @property
    def text_truncate_length(self) -> int:
        return self._config.text_truncate_length

    async def snapshot(self, page: Any, query: str) -> DomNode:
        text_limit = max(len(query) + 1, self._config.text_truncate_length)
        payload = await page.evaluate(SNAPSHOT_SCRIPT, {"query": query, "textLimit": text_limit})
        return build_snapshot_tree(list(payload or []))

    async def match_text(self, page: Any, query: str, occurrence: int = 1) -> TextMatch:
        root = await self.snapshot(page, query)
        matches = find_matches(root, query)
        candidate = select_occurrence(matches, occurrence)
        self._logger.debug(
            "text matched",
            extra={"query": query, "occurrence": occurrence, "total": matches.total, "tag": candidate.node.tag},
        )
        return TextMatch(matches=matches, occurrence=occurrence, candidate=candidate)

    async def resolve_text(self, page: Any, query: str, occurrence: int = 1) -> TextResolution:
        match = await self.match_text(page, query, occurrence)
        resolution = resolve_interactive(match.candidate)
        if resolution.fallback:
            self._logger.warning(
                "no interactable element for text match; using the match itself",
                extra={"query": query, "occurrence": occurrence, "tag": resolution.target.tag},
            )
        return TextResolution(match=match, resolution=resolution)

    async def resolve_by_selector(
        self,
        page: Any,
        selector: str,
        *,
        kind: InteractionKind = InteractionKind.CLICK,
    ) -> ProbedElement:
        """Wait for ``selector`` to appear, then check that it can be acted on.

        A missing element is probed again after a fixed delay, up to the
        configured number of attempts. An element that is present but hidden
        (or disabled, for clicks) fails at once.
        """
        max_attempts = self._config.selector_max_attempts
        policy = RetryPolicy.fixed(
            max_attempts=max_attempts,
            delay_seconds=self._config.selector_attempt_delay_ms / 1000,
            retry_exceptions=(ElementNotFoundError,),
        )

        async def _probe(attempt: int) -> ProbedElement:
            payload = await page.evaluate(
                PROBE_SELECTOR_SCRIPT,
                {"selector": selector, "textLimit": self._config.text_truncate_length},
            )
            if not payload:
                raise ElementNotFoundError(
                    f'No element found after {max_attempts} attempts: "{selector}"',
                    query=selector,
                )
            node = node_from_payload(payload)
            if not is_visible_target(node, require_enabled=kind is InteractionKind.CLICK):
                state = "not clickable (hidden/disabled)" if kind is InteractionKind.CLICK else "not hoverable (hidden)"
                raise ElementNotInteractableError(f"Element found but {state}", selector=selector)
            descriptor = ElementDescriptor.from_payload(
                {
                    "tagName": payload.get("tag"),
                    "id": payload.get("id"),
                    "className": payload.get("className"),
                    "text": payload.get("text"),
                }
            )
            return ProbedElement(selector=selector, node=node, descriptor=descriptor, attempt=attempt)

        def _on_retry(exc: Exception, attempt: int, delay: float) -> None:
            self._logger.debug(
                "selector not present yet",
                extra={"selector": selector, "attempt": attempt, "delay_seconds": delay},
            )

        return await self._retries.run(_probe, policy=policy, on_retry=_on_retry)

    async def interact(
        self,
        page: Any,
        target: InteractionTarget,
        kind: InteractionKind,
        strategies: Sequence[InteractionStrategy] = DEFAULT_STRATEGIES,
    ) -> InteractionOutcome:
        if not strategies:
            raise ValueError("at least one interaction strategy is required")
        raw = await page.evaluate(
            INTERACT_SCRIPT,
            {
                "target": target.to_payload(),
                "kind": kind.value,
                "strategies": [strategy.value for strategy in strategies],
                "textLimit": self._config.text_truncate_length,
            },
        )
        result = raw or {}
        status = result.get("status")
        if status == "stale":
            raise StaleElementError("The element changed before it could be used. Retry the action.")
        if status == "not_found":
            if target.selector is not None:
                raise ElementNotFoundError(f'No element found: "{target.selector}"', query=target.selector)
            if target.x is not None:
                raise ElementNotFoundError(
                    f"No element found at coordinates ({format_number(target.x)}, {format_number(target.y)})",
                    query=f"{target.x},{target.y}",
                )
            raise StaleElementError("The element changed before it could be used. Retry the action.")

        attempts = tuple(
            StrategyAttempt(
                strategy=InteractionStrategy(item["strategy"]),
                ok=bool(item.get("ok")),
                error=item.get("error"),
            )
            for item in result.get("attempts") or []
        )
        for attempt in attempts:
            if not attempt.ok:
                self._logger.debug(
                    "interaction strategy failed",
                    extra={"kind": kind.value, "strategy": attempt.strategy.value, "error": attempt.error},
                )
        if status != "ok":
            details = "; ".join(f"{attempt.strategy.value}: {attempt.error}" for attempt in attempts)
            raise PageScriptError(f"All {kind.value} strategies failed ({details})")

        outcome = InteractionOutcome(
            succeeded=True,
            strategy_used=InteractionStrategy(result["strategy"]),
            descriptor=ElementDescriptor.from_payload(result.get("descriptor")),
            attempts=attempts,
            x=float(result.get("x") or 0.0),
            y=float(result.get("y") or 0.0),
        )
        if kind is InteractionKind.HOVER:
            await self._move_mouse(page, outcome.x, outcome.y)
        self._logger.info(
            "interaction completed",
            extra={
                "kind": kind.value,
                "strategy": outcome.strategy_used.value if outcome.strategy_used else None,
                "tag": outcome.descriptor.tag_name,
            },
        )
        return outcome

    async def scroll_into_view(self, page: Any, node: DomNode, *, smooth: bool) -> ElementDescriptor:
        payload = await page.evaluate(
            SCROLL_INTO_VIEW_SCRIPT,
            {"index": node.index, "tag": node.tag, "smooth": smooth},
        )
        if payload is None:
            raise StaleElementError("The element changed before it could be used. Retry the action.")
        return ElementDescriptor.from_payload(payload)

    async def element_html(self, page: Any, node: DomNode, *, clean: bool) -> str:
        html = await page.evaluate(ELEMENT_HTML_SCRIPT, {"index": node.index, "tag": node.tag, "clean": clean})
        if html is None:
            raise StaleElementError("The element changed before it could be used. Retry the action.")
        return str(html)

    async def _move_mouse(self, page: Any, x: float, y: float) -> None:
        try:
            await page.mouse.move(x, y)
        except Exception as exc:  # noqa: BLE001
            self._logger.debug("native mouse move failed", extra={"error": str(exc)})


