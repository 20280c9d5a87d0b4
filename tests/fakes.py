"""In-memory stand-ins for the live page, the AI providers and the resolver."""

from __future__ import annotations

from dataclasses import dataclass, field

from linkedin_autoapply.browser.dom import ELEMENT_ID_ATTR, ElementSnapshot
from linkedin_autoapply.llm import ProviderError
from linkedin_autoapply.reasoning.answer_resolver import AnswerDecision, AnswerSource


def el(tag, text="", *children, **attrs):
    """Build a snapshot; text aggregates the children's text like innerText."""
    attributes = {}
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        name = key.rstrip("_").replace("_", "-")
        attributes[name] = "true" if value is True else str(value)
    full_text = " ".join(part for part in [text] + [c.text for c in children] if part)
    return ElementSnapshot(tag=tag, text=full_text, attributes=attributes, children=list(children))


def button(text, element_id=None, aria_label=None, disabled=False):
    return el("button", text, aria_label=aria_label, disabled=disabled,
              data_autoapply_id=element_id or f"btn-{text.lower().replace(' ', '-')}")


# ---------------------------------------------------------------------------
# Form field specs
# ---------------------------------------------------------------------------


@dataclass
class TextField:
    id: str
    label: str
    value: str = ""
    placeholder: str = ""
    multiline: bool = False
    disabled: bool = False

    def snapshot(self):
        control = el(
            "textarea" if self.multiline else "input",
            "",
            id=self.id,
            type=None if self.multiline else "text",
            value=self.value,
            placeholder=self.placeholder or None,
            disabled=self.disabled,
            data_autoapply_id=self.id,
        )
        return el("div", "", el("label", self.label, for_=self.id), control,
                  class_="fb-dash-form-element", data_autoapply_id=f"group-{self.id}")


@dataclass
class SelectField:
    id: str
    label: str
    options: list
    selected: int = 0

    def snapshot(self):
        all_options = ["Select an option"] + list(self.options)
        option_els = [
            el("option", text, value="" if i == 0 else text, selected=(i == self.selected))
            for i, text in enumerate(all_options)
        ]
        select = el("select", "", *option_els, id=self.id, data_autoapply_id=self.id)
        return el("div", "", el("label", self.label, for_=self.id), select,
                  class_="fb-dash-form-element", data_autoapply_id=f"group-{self.id}")


@dataclass
class RadioField:
    id: str
    label: str
    options: list
    checked: int | None = None

    def snapshot(self):
        children = [el("legend", self.label)]
        for i, option in enumerate(self.options):
            radio_id = f"{self.id}-{i}"
            children.append(el("input", "", id=radio_id, type="radio", value=option,
                               checked=(i == self.checked), data_autoapply_id=radio_id))
            children.append(el("label", option, for_=radio_id))
        return el("fieldset", "", *children, data_autoapply_id=f"group-{self.id}")


@dataclass
class CheckboxField:
    id: str
    label: str
    checked: bool = False

    def snapshot(self):
        return el("div", "",
                  el("input", "", id=self.id, type="checkbox", checked=self.checked,
                     data_autoapply_id=self.id),
                  el("label", self.label, for_=self.id))

    def toggle(self, checkbox_id):
        self.checked = not self.checked
        return self.checked

    def owns(self, checkbox_id):
        return checkbox_id == self.id


@dataclass
class CheckboxGroupField:
    """A fieldset of checkboxes under one question."""

    id: str
    label: str
    options: list
    checked: list = field(default_factory=list)

    def snapshot(self):
        children = [el("legend", self.label)]
        for i, option in enumerate(self.options):
            box_id = f"{self.id}-{i}"
            children.append(el("input", "", id=box_id, type="checkbox",
                               checked=(i in self.checked), data_autoapply_id=box_id))
            children.append(el("label", option, for_=box_id))
        return el("fieldset", "", *children, data_autoapply_id=f"group-{self.id}")

    def toggle(self, checkbox_id):
        index = int(checkbox_id.rsplit("-", 1)[1])
        if index in self.checked:
            self.checked.remove(index)
            return False
        self.checked.append(index)
        return True

    def owns(self, checkbox_id):
        return checkbox_id.startswith(f"{self.id}-")


@dataclass
class FileField:
    id: str
    label: str = "Upload resume"

    def snapshot(self):
        return el("div", "", el("label", self.label, for_=self.id),
                  el("input", "", id=self.id, type="file", data_autoapply_id=self.id),
                  class_="fb-dash-form-element", data_autoapply_id=f"group-{self.id}")


@dataclass
class Step:
    fields: list = field(default_factory=list)
    button: str = "Next"


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class FakeFieldControl:
    def __init__(self, doc, spec):
        self.doc = doc
        self.spec = spec

    def type_text(self, value):
        if self.doc.fail_on == self.spec.id:
            raise RuntimeError("element detached")
        self.spec.value = value
        self.doc.writes.append((self.spec.id, "type", value))

    def pick_suggestion(self, timeout_ms):
        self.doc.writes.append((self.spec.id, "suggestion", self.doc.has_suggestions))
        return self.doc.has_suggestions

    def press(self, key):
        self.doc.writes.append((self.spec.id, "press", key))

    def select_option(self, index):
        self.spec.selected = index
        self.doc.writes.append((self.spec.id, "select", index))

    def check_radio(self, index):
        self.spec.checked = index
        self.doc.writes.append((self.spec.id, "radio", index))


class FakeCheckboxControl:
    def __init__(self, doc, spec, checkbox_id):
        self.doc = doc
        self.spec = spec
        self.checkbox_id = checkbox_id

    def click(self):
        state = self.spec.toggle(self.checkbox_id)
        self.doc.writes.append((self.checkbox_id, "checkbox", state))


class FakeDocument:
    """
    A multi-step Easy Apply dialog.

    Clicking the step's button moves to the next step; clicking Submit shows
    the confirmation dialog; clicking Done closes it.
    """

    def __init__(self, steps, url="https://www.linkedin.com/jobs/view/123/",
                 extra_dialogs=(), appear_after_settles=0, has_suggestions=True):
        self.steps = steps
        self.url = url
        self.extra_dialogs = list(extra_dialogs)
        self.appear_after_settles = appear_after_settles
        self.has_suggestions = has_suggestions
        self.index = 0
        self.submitted = False
        self.closed = False
        self.clicks = []
        self.writes = []
        self.settles = 0
        self.closed_dialogs = 0
        self.backs = 0
        self.fail_on = None

    # -- rendering ----------------------------------------------------------

    def reset(self):
        """A fresh dialog for the next job."""
        self.index = 0
        self.submitted = False
        self.closed = False

    @property
    def step(self):
        return self.steps[self.index]

    def _specs(self):
        return {spec.id: spec for spec in self.step.fields}

    def _dialog(self):
        if self.submitted:
            return el("div", "",
                      el("h2", "Application sent"),
                      el("p", "Your application was sent to Acme"),
                      button("Dismiss", "btn-dismiss", aria_label="Dismiss"),
                      button("Done", "btn-done"),
                      role="dialog", data_autoapply_id="dialog")
        children = [el("h2", "Apply to Acme")]
        children += [spec.snapshot() for spec in self.step.fields]
        children.append(button("Dismiss", "btn-dismiss", aria_label="Dismiss"))
        label = self.step.button
        aria = {
            "Next": "Continue to next step",
            "Review": "Review your application",
            "Submit application": "Submit application",
        }.get(label)
        children.append(button(label, "btn-advance", aria_label=aria))
        return el("div", "", *children, role="dialog", data_autoapply_id="dialog")

    def current_url(self):
        return self.url

    def dialog_snapshots(self):
        if self.closed or self.settles < self.appear_after_settles:
            return list(self.extra_dialogs)
        return list(self.extra_dialogs) + [self._dialog()]

    def page_text(self):
        if self.closed and self.submitted:
            return "Applied 1 minute ago. Application submitted"
        return "Software Engineer Acme"

    # -- writes -------------------------------------------------------------

    def field_control(self, group):
        element_id = group.element_id.removeprefix("group-")
        return FakeFieldControl(self, self._specs().get(element_id))

    def checkbox_control(self, checkbox):
        checkbox_id = checkbox.attr("id")
        spec = next(s for s in self.step.fields if hasattr(s, "owns") and s.owns(checkbox_id))
        return FakeCheckboxControl(self, spec, checkbox_id)

    def click(self, element):
        element_id = element.attr(ELEMENT_ID_ATTR)
        self.clicks.append(element_id)
        if element_id == "btn-done":
            self.closed = True
        elif element_id == "btn-advance":
            if self.step.button.startswith("Submit"):
                self.submitted = True
            else:
                self.index += 1
        return True

    def settle(self):
        self.settles += 1

    def close_dialog(self):
        self.closed_dialogs += 1
        self.closed = True

    def go_back(self):
        self.backs += 1


def multi_step(n, fields_per_step=None):
    """n steps: Next on every step but the last, Submit on the last."""
    steps = []
    for i in range(n):
        fields = fields_per_step(i) if fields_per_step else []
        steps.append(Step(fields, "Submit application" if i == n - 1 else "Next"))
    return steps


# ---------------------------------------------------------------------------
# Providers and resolver
# ---------------------------------------------------------------------------


class ScriptedProvider:
    """Returns (or raises) scripted results in order; repeats the last one."""

    def __init__(self, name, *results):
        self.name = name
        self.results = list(results)
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        result = self.results[0] if len(self.results) == 1 else self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def calls(self):
        return len(self.prompts)


class FakeResolver:
    """Answers by label substring; records every question asked."""

    def __init__(self, answers=None, checks=None, check_error=None):
        self.answers = answers or {}
        self.checks = checks or {}
        self.check_error = check_error
        self.questions = []
        self.checked_labels = []

    def decide(self, question, options=None, job_context=None):
        self.questions.append((question, options))
        for key, value in self.answers.items():
            if key.lower() in question.lower():
                return AnswerDecision(value, AnswerSource.PRESET, key)
        return AnswerDecision(None, AnswerSource.NONE)

    def resolve(self, question, options=None, job_context=None):
        return self.decide(question, options, job_context).value

    def should_check(self, label, job_context=None):
        self.checked_labels.append(label)
        if self.check_error is not None:
            raise self.check_error
        for key, value in self.checks.items():
            if key.lower() in label.lower():
                return value
        return False


def failing(message="boom"):
    return ProviderError(message)
