import pytest

from fakes import FakeDocument, Step, button, el

from linkedin_autoapply.state.detector import (
    ActionButton,
    DialogStatus,
    classify_button,
    detect,
    inline_error_text,
    select_application_dialog,
)


def chat_widget():
    return el("div", "",
              el("h2", "Messaging"),
              el("div", "", contenteditable="true", aria_label="Write a message…"),
              button("Send", "btn-send"),
              button("Dismiss", "btn-chat-close", aria_label="Dismiss"),
              role="dialog")


def compose_message():
    return el("div", "",
              el("h2", "Compose message"),
              button("Next", "btn-chat-next"),
              role="dialog")


class StaticDocument:
    """Serves a fixed list of dialog snapshots."""

    def __init__(self, *snapshots, later=None):
        self.snapshots = list(snapshots)
        self.later = later
        self.settles = 0

    def dialog_snapshots(self):
        if self.settles and self.later is not None:
            return self.later
        return self.snapshots

    def settle(self):
        self.settles += 1


@pytest.mark.parametrize(
    "text, aria, expected",
    [
        ("Next", "Continue to next step", ActionButton.NEXT),
        ("Continue", "", ActionButton.NEXT),
        ("Review", "Review your application", ActionButton.REVIEW),
        ("Submit application", "", ActionButton.SUBMIT),
        ("Done", "", ActionButton.DONE),
        ("", "Dismiss", ActionButton.DISMISS),
        ("Back", "Back to previous step", None),
        ("Edit", "Edit review of contact info", None),
        ("Mark as reviewed", "", None),
    ],
)
def test_classify_button(text, aria, expected):
    assert classify_button(el("button", text, aria_label=aria or None)) is expected


def test_compose_message_container_is_not_an_application_dialog():
    state = detect(StaticDocument(compose_message()))

    assert state.status is DialogStatus.NOT_PRESENT


def test_application_dialog_is_found_behind_a_chat_widget():
    doc = FakeDocument([Step([], "Next")], extra_dialogs=[chat_widget()])

    state = detect(doc)

    assert state.status is DialogStatus.PRESENT
    assert state.dialog.element_id == "dialog"
    kind, _ = state.advance_button()
    assert kind is ActionButton.NEXT


def test_richest_dialog_wins():
    weak = el("div", "", button("Dismiss", "a", aria_label="Dismiss"), role="dialog")
    strong = el("div", "", button("Dismiss", "b", aria_label="Dismiss"),
                button("Submit application", "c"), role="dialog")

    assert select_application_dialog([weak, strong]) is strong


def test_ties_keep_document_order():
    first = el("div", "", button("Next", "a"), role="dialog")
    second = el("div", "", button("Next", "b"), role="dialog")

    assert select_application_dialog([first, second]) is first


def test_submit_outranks_review_and_next():
    dialog = el("div", "", button("Next", "n"), button("Review", "r"),
                button("Submit application", "s"), role="dialog")

    kind, snapshot = detect(StaticDocument(dialog)).advance_button()

    assert kind is ActionButton.SUBMIT
    assert snapshot.element_id == "s"


def test_success_message():
    dialog = el("div", "", el("h2", "Your application was sent to Acme"),
                button("Done", "done"), button("Dismiss", "x", aria_label="Dismiss"),
                role="dialog")

    state = detect(StaticDocument(dialog))

    assert state.status is DialogStatus.SUCCESS
    assert ActionButton.DONE in state.buttons


def test_disabled_advance_settles_once_then_reports_stuck():
    dialog = el("div", "", button("Next", "n", disabled=True),
                button("Dismiss", "x", aria_label="Dismiss"), role="dialog")
    doc = StaticDocument(dialog)

    state = detect(doc)

    assert state.status is DialogStatus.ERROR
    assert state.stuck
    assert doc.settles == 1


def test_button_enabling_after_settle_is_not_stuck():
    disabled = el("div", "", button("Next", "n", disabled=True), role="dialog")
    enabled = el("div", "", button("Next", "n"), role="dialog")
    doc = StaticDocument(disabled, later=[enabled])

    state = detect(doc)

    assert state.status is DialogStatus.PRESENT
    assert not state.stuck


def test_inline_error_is_reported():
    dialog = el("div", "",
                el("div", "Enter a whole number between 0 and 99",
                   class_="artdeco-inline-feedback artdeco-inline-feedback--error"),
                button("Next", "n"), role="dialog")

    state = detect(StaticDocument(dialog))

    assert state.status is DialogStatus.ERROR
    assert not state.stuck
    assert "whole number" in state.error_text


def test_inline_error_text_falls_back_to_aria_invalid():
    dialog = el("div", "", el("input", "", id="years", aria_invalid="true"), role="dialog")

    assert inline_error_text(dialog) == "years"
