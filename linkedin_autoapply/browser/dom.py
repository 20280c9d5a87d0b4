"""Element snapshots and the document interface the state machine drives

A snapshot is a plain (tag, text, attributes, children) tree captured from the
live page in one evaluate call. Detection and field perception run as pure
functions over snapshots; writes go back through the document by element id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Protocol

# Attribute the page adapter stamps on every captured element
ELEMENT_ID_ATTR = "data-autoapply-id"


@dataclass
class ElementSnapshot:
    tag: str
    text: str = ""
    attributes: dict = field(default_factory=dict)
    children: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            tag=(data.get("tag") or "").lower(),
            text=data.get("text") or "",
            attributes={k: "" if v is None else str(v) for k, v in (data.get("attributes") or {}).items()},
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )

    @property
    def element_id(self) -> str:
        return self.attributes.get(ELEMENT_ID_ATTR, "")

    def attr(self, name, default=""):
        return self.attributes.get(name, default)

    def flag(self, name) -> bool:
        """Boolean attribute: present and not explicitly "false"."""
        if name not in self.attributes:
            return False
        return self.attributes[name].lower() != "false"

    @property
    def classes(self) -> list:
        return self.attributes.get("class", "").split()

    def has_class(self, fragment) -> bool:
        return any(fragment in cls for cls in self.classes)

    @property
    def input_type(self) -> str:
        return self.attributes.get("type", "text" if self.tag == "input" else "").lower()

    @property
    def is_disabled(self) -> bool:
        return (
            self.flag("disabled")
            or self.attributes.get("aria-disabled", "").lower() == "true"
        )

    def iter(self) -> Iterator["ElementSnapshot"]:
        """Depth-first, document order, including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def descendants(self) -> Iterator["ElementSnapshot"]:
        for child in self.children:
            yield from child.iter()

    def find_all(self, predicate: Callable[["ElementSnapshot"], bool]) -> list:
        return [el for el in self.descendants() if predicate(el)]

    def find(self, predicate: Callable[["ElementSnapshot"], bool]) -> Optional["ElementSnapshot"]:
        for el in self.descendants():
            if predicate(el):
                return el
        return None

    def find_outermost(self, predicate: Callable[["ElementSnapshot"], bool]) -> list:
        """Matching descendants, not descending into a match."""
        found = []
        for child in self.children:
            if predicate(child):
                found.append(child)
            else:
                found.extend(child.find_outermost(predicate))
        return found

    def buttons(self) -> list:
        return self.find_all(
            lambda el: el.tag == "button" or el.attributes.get("role") == "button"
        )


class FieldControl(Protocol):
    """Write access to one form group in the live dialog."""

    def type_text(self, value: str) -> None: ...

    def pick_suggestion(self, timeout_ms: int) -> bool: ...

    def press(self, key: str) -> None: ...

    def select_option(self, index: int) -> None: ...

    def check_radio(self, index: int) -> None: ...


class CheckboxControl(Protocol):
    def click(self) -> None: ...


class DialogDocument(Protocol):
    """The page, as seen by the dialog detector, filler and driver."""

    def current_url(self) -> str: ...

    def dialog_snapshots(self) -> list: ...

    def page_text(self) -> str: ...

    def field_control(self, group: ElementSnapshot) -> FieldControl: ...

    def checkbox_control(self, checkbox: ElementSnapshot) -> CheckboxControl: ...

    def click(self, element: ElementSnapshot) -> bool: ...

    def settle(self) -> None: ...

    def close_dialog(self) -> None: ...

    def go_back(self) -> None: ...
