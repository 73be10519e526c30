from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

PartType = Literal["text", "image"]


@dataclass(frozen=True)
class ContentPart:
    type: PartType
    text: str | None = None
    data: str | None = None
    mime_type: str | None = None

    @classmethod
    def of_text(cls, text: str) -> ContentPart:
        return cls(type="text", text=text)

    @classmethod
    def of_image(cls, data: str, mime_type: str = "image/png") -> ContentPart:
        return cls(type="image", data=data, mime_type=mime_type)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type}
        if self.text is not None:
            payload["text"] = self.text
        if self.data is not None:
            payload["data"] = self.data
        if self.mime_type is not None:
            payload["mimeType"] = self.mime_type
        return payload


@dataclass(frozen=True)
class ToolResult:
    content: list[ContentPart] = field(default_factory=list)

    @classmethod
    def text(cls, text: str) -> ToolResult:
        return cls(content=[ContentPart.of_text(text)])

    @property
    def texts(self) -> list[str]:
        return [part.text for part in self.content if part.type == "text" and part.text is not None]

    @property
    def images(self) -> list[ContentPart]:
        return [part for part in self.content if part.type == "image"]

    def to_dict(self) -> dict[str, Any]:
        return {"content": [part.to_dict() for part in self.content]}
