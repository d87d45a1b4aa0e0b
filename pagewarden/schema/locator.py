import json
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class LocatorKind(str, Enum):
    CSS = "css"
    XPATH = "xpath"
    TEXT = "text"


class Locator(BaseModel):
    pattern: str
    kind: LocatorKind = LocatorKind.CSS
    label: str
    # Only used by text locators, restricts the match to one element name
    tag: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_tag(self):
        if self.tag is not None and self.kind != LocatorKind.TEXT:
            raise ValueError("tag is only allowed on text locators")
        if not self.pattern.strip():
            raise ValueError("pattern cannot be empty")
        return self

    @property
    def selector(self) -> str:
        """Playwright selector string for this locator."""
        if self.kind == LocatorKind.XPATH:
            return f"xpath={self.pattern}"
        if self.kind == LocatorKind.TEXT:
            if self.tag:
                return f"{self.tag}:has-text({json.dumps(self.pattern, ensure_ascii=False)})"
            return f"text={self.pattern}"
        return self.pattern


def css(pattern: str, label: str) -> Locator:
    return Locator(pattern=pattern, kind=LocatorKind.CSS, label=label)


def xpath(pattern: str, label: str) -> Locator:
    return Locator(pattern=pattern, kind=LocatorKind.XPATH, label=label)


def text(pattern: str, label: str, tag: str | None = None) -> Locator:
    return Locator(pattern=pattern, kind=LocatorKind.TEXT, label=label, tag=tag)


class DismissalOutcome(BaseModel):
    attempted: Locator
    matched: bool = False
    acted: bool = False
    error: str | None = None
