"""Dialog state detection - NO ACTIONS beyond the single stuck-state settle

State detection priority:
1. Which container is the application dialog (by content, never by position)
2. Success message inside it
3. Enabled advance buttons (Submit/Review/Next)
4. Inline validation errors
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from linkedin_autoapply.browser.dom import ElementSnapshot

log = logging.getLogger(__name__)


class DialogStatus(Enum):
    NOT_PRESENT = "not_present"
    PRESENT = "present"
    ERROR = "error"
    SUCCESS = "success"


class ActionButton(Enum):
    NEXT = "next"
    REVIEW = "review"
    SUBMIT = "submit"
    DISMISS = "dismiss"
    DONE = "done"


# Richer action sets win when several containers qualify
ADVANCE_PRIORITY = (ActionButton.SUBMIT, ActionButton.REVIEW, ActionButton.NEXT)
_BUTTON_RANK = {ActionButton.SUBMIT: 3, ActionButton.REVIEW: 2, ActionButton.NEXT: 1}

SUCCESS_PHRASES = (
    "application sent",
    "application submitted",
    "your application was sent",
    "application was successfully sent",
    "successfully applied",
    "you applied for this job",
)

CHAT_WIDGET_PHRASES = (
    "compose message",
    "open emoji keyboard",
    "write a message",
)

ERROR_CLASS = "artdeco-inline-feedback--error"


@dataclass
class DialogState:
    status: DialogStatus
    buttons: Dict[ActionButton, ElementSnapshot] = field(default_factory=dict)
    dialog: Optional[ElementSnapshot] = None
    all_buttons: List[str] = field(default_factory=list)
    error_text: str = ""
    stuck: bool = False

    def advance_button(self):
        """(kind, snapshot) of the button to press next, Submit > Review > Next"""
        for kind in ADVANCE_PRIORITY:
            if kind in self.buttons:
                return kind, self.buttons[kind]
        return None, None


def _button_text(button):
    return " ".join(button.text.split()).lower()


def classify_button(button):
    """Map a button snapshot onto the action vocabulary, or None"""
    text = _button_text(button)
    aria = button.attr("aria-label").lower()
    both = f"{text} {aria}"

    if text == "done":
        return ActionButton.DONE
    if "submit" in both and "review" not in both:
        return ActionButton.SUBMIT
    if "review" in both and "mark" not in both and "edit" not in both:
        return ActionButton.REVIEW
    if "back" not in both and (
        "next" in both or text == "continue" or "continue to next step" in aria
    ):
        return ActionButton.NEXT
    if "dismiss" in both:
        return ActionButton.DISMISS
    return None


def looks_like_application_dialog(snapshot):
    """At least one button from the Easy Apply action vocabulary"""
    return any(
        classify_button(b) in (ActionButton.NEXT, ActionButton.REVIEW, ActionButton.SUBMIT, ActionButton.DISMISS)
        for b in snapshot.buttons()
    )


def looks_like_chat_widget(snapshot):
    """Messaging overlays also render as dialogs; their controls give them away"""
    haystack = [snapshot.text.lower()]
    for el in snapshot.iter():
        for attr in ("aria-label", "placeholder", "title"):
            value = el.attributes.get(attr)
            if value:
                haystack.append(value.lower())
    return any(phrase in text for text in haystack for phrase in CHAT_WIDGET_PHRASES)


def _enabled_buttons(dialog):
    buttons = {}
    for button in dialog.buttons():
        if button.is_disabled:
            continue
        kind = classify_button(button)
        if kind is not None and kind not in buttons:
            buttons[kind] = button
    return buttons


def _dialog_rank(snapshot):
    kinds = {classify_button(b) for b in snapshot.buttons()}
    best = max((_BUTTON_RANK.get(k, 0) for k in kinds), default=0)
    return (best, len(snapshot.buttons()))


def select_application_dialog(snapshots):
    """First qualifying container with the richest action set; ties keep document order"""
    candidates = [
        s for s in snapshots
        if looks_like_application_dialog(s) and not looks_like_chat_widget(s)
    ]
    if not candidates:
        return None
    # max() keeps the first of equal elements
    return max(candidates, key=_dialog_rank)


def text_shows_success(text):
    lowered = " ".join((text or "").split()).lower()
    return any(phrase in lowered for phrase in SUCCESS_PHRASES)


def dialog_shows_success(dialog, buttons):
    if text_shows_success(dialog.text):
        return True
    if ActionButton.DONE in buttons:
        lowered = dialog.text.lower()
        return "application" in lowered and ("sent" in lowered or "submitted" in lowered)
    return False


def inline_error_text(dialog):
    """Text of the first visible validation error, or "" """
    for el in dialog.iter():
        if el.has_class(ERROR_CLASS) and el.text.strip():
            return el.text.strip()
        if el.attr("role") == "alert" and el.text.strip():
            return el.text.strip()
    for el in dialog.iter():
        if el.attr("aria-invalid").lower() == "true":
            return el.attr("aria-label") or el.attr("id") or "invalid field"
    return ""


def page_shows_success(document):
    """Whole-page success check, for after the dialog has closed"""
    try:
        return text_shows_success(document.page_text())
    except Exception as e:
        log.warning("Could not read page text for success check: %s", e)
        return False


def detect(document, retry_stuck=True):
    """Detect the current dialog state from a fresh snapshot of the page"""
    dialog = select_application_dialog(document.dialog_snapshots())
    if dialog is None:
        return DialogState(DialogStatus.NOT_PRESENT)

    buttons = _enabled_buttons(dialog)
    all_buttons = [
        " ".join(b.text.split()) or b.attr("aria-label") or "unnamed"
        for b in dialog.buttons()
    ]

    if dialog_shows_success(dialog, buttons):
        return DialogState(DialogStatus.SUCCESS, buttons, dialog, all_buttons)

    error_text = inline_error_text(dialog)
    has_advance = any(kind in buttons for kind in ADVANCE_PRIORITY)

    if not has_advance:
        if retry_stuck:
            # Buttons are often disabled for a moment during transitions
            document.settle()
            return detect(document, retry_stuck=False)
        return DialogState(DialogStatus.ERROR, buttons, dialog, all_buttons, error_text, stuck=True)

    status = DialogStatus.ERROR if error_text else DialogStatus.PRESENT
    return DialogState(status, buttons, dialog, all_buttons, error_text)
