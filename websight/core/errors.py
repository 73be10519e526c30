from __future__ import annotations


class WebsightError(RuntimeError):
    """Base class for failures surfaced to the calling agent."""


class ElementNotFoundError(WebsightError):
    def __init__(self, message: str, *, query: str) -> None:
        super().__init__(message)
        self.query = query


class OccurrenceOutOfRangeError(WebsightError):
    def __init__(self, *, query: str, occurrence: int, total: int) -> None:
        super().__init__(
            f'Element occurrence {occurrence} not found. Only {total} matches found for text: "{query}"'
        )
        self.query = query
        self.occurrence = occurrence
        self.total = total


class ElementNotInteractableError(WebsightError):
    def __init__(self, message: str, *, selector: str) -> None:
        super().__init__(message)
        self.selector = selector


class StaleElementError(WebsightError):
    """The element picked from a snapshot changed before it could be used."""


class PageScriptError(WebsightError):
    pass


class NoPageLoadedError(WebsightError):
    def __init__(self) -> None:
        super().__init__("No page loaded. Use navigate tool first.")
