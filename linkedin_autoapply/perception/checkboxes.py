"""Checkbox detection and classification"""

from dataclasses import dataclass, field
from typing import List

from linkedin_autoapply.perception.fields import (
    extract_label,
    find_group_snapshots,
    option_label,
)
from linkedin_autoapply.reasoning.classify import FieldKind

# Labels that mark a group of checkboxes as mutually exclusive choices
MUTUALLY_EXCLUSIVE_STARTS = (
    "yes",
    "no",
    "not applicable",
    "decline",
    "i prefer not",
)


@dataclass
class CheckboxItem:
    label: str
    question: str
    checked: bool
    disabled: bool
    element: object = None

    @property
    def prompt_label(self):
        """Label with its group question, so 'Yes' alone is never asked about"""
        if self.question and self.question.lower() not in self.label.lower():
            return f"{self.question} - {self.label}"
        return self.label


@dataclass
class CheckboxGroup:
    question: str
    items: List[CheckboxItem] = field(default_factory=list)

    @property
    def option_labels(self):
        return [item.label for item in self.items]

    @property
    def is_radio_equivalent(self):
        """
        2-4 checkboxes whose labels read like exclusive choices (Yes/No/Decline)
        are answered like a radio group instead of one by one.
        """
        if not 2 <= len(self.items) <= 4:
            return False
        labels = [label.lower() for label in self.option_labels]
        exclusive = sum(
            any(label.startswith(start) for start in MUTUALLY_EXCLUSIVE_STARTS)
            for label in labels
        )
        return exclusive >= 2


def _is_checkbox(el):
    return el.tag == "input" and el.input_type == "checkbox"


def _item(checkbox, question, dialog):
    return CheckboxItem(
        label=option_label(checkbox, dialog) or question,
        question=question,
        checked=checkbox.flag("checked"),
        disabled=checkbox.is_disabled,
        element=checkbox,
    )


def detect_checkbox_groups(dialog):
    """
    Group every checkbox in the dialog by its enclosing form group.

    Checkboxes outside any form group (e.g. "Follow <company>" on the review
    step) each form their own single-item group with no question.
    """
    groups = []
    grouped_ids = set()

    for snapshot in find_group_snapshots(dialog):
        checkboxes = snapshot.find_all(_is_checkbox)
        if snapshot.tag == "input" and _is_checkbox(snapshot):
            checkboxes = [snapshot]
        if not checkboxes:
            continue
        question = extract_label(snapshot, dialog, FieldKind.CHECKBOX)
        group = CheckboxGroup(question=question)
        for checkbox in checkboxes:
            group.items.append(_item(checkbox, question, dialog))
            grouped_ids.add(id(checkbox))
        groups.append(group)

    for checkbox in dialog.find_all(_is_checkbox):
        if id(checkbox) in grouped_ids:
            continue
        groups.append(CheckboxGroup(question="", items=[_item(checkbox, "", dialog)]))

    return groups
