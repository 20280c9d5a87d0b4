import pytest

from fakes import FakeDocument, FakeResolver, Step, TextField, multi_step

from linkedin_autoapply.data.jobs import JobContext
from linkedin_autoapply.interaction.form_filler import FormFiller
from linkedin_autoapply.state.machine import (
    REASON_DIALOG_DISMISSED,
    REASON_MAX_STEPS,
    REASON_UNEXPECTED_NAVIGATION,
    ApplicationDialogDriver,
    DriverState,
    host_matches,
)

JOB = JobContext(title="Backend Engineer", company="Acme")


def one_field(i):
    return [TextField(f"q{i}", f"Question {i}")]


def driver_for(doc, max_steps=10, resolver=None):
    filler = FormFiller(doc, resolver or FakeResolver({"question": "yes"}), timing={})
    return ApplicationDialogDriver(doc, filler, max_steps=max_steps)


@pytest.mark.parametrize("n", [1, 2, 4])
def test_n_step_dialog_succeeds_with_n_advances(n):
    doc = FakeDocument(multi_step(n, one_field))

    result = driver_for(doc).run(JOB)

    assert result.state is DriverState.SUCCESS
    assert result.advances == n
    assert result.steps == n
    # every step's field was filled before its button was pressed
    assert [w for w in doc.writes if w[1] == "type"] == [(f"q{i}", "type", "yes") for i in range(n)]
    assert doc.clicks[-1] == "btn-done"


def test_review_step_is_one_more_advance():
    doc = FakeDocument([Step([], "Next"), Step([], "Review"), Step([], "Submit application")])

    result = driver_for(doc).run(JOB)

    assert result.succeeded
    assert result.advances == 3


def test_waits_for_dialog_to_appear():
    doc = FakeDocument(multi_step(1), appear_after_settles=2)

    result = driver_for(doc).run(JOB)

    assert result.succeeded
    assert result.steps == 3
    assert result.advances == 1


def test_never_ending_dialog_exhausts_the_step_budget():
    class Loop(FakeDocument):
        def click(self, element):
            self.clicks.append(element.element_id)
            return True

    doc = Loop([Step([], "Next")])

    result = driver_for(doc, max_steps=5).run(JOB)

    assert result.state is DriverState.EXHAUSTED
    assert result.reason == REASON_MAX_STEPS
    assert result.steps == 5
    assert result.advances == 5


def test_unregistered_clicks_do_not_count_as_advances():
    class DeadButton(FakeDocument):
        def click(self, element):
            return False

    result = driver_for(DeadButton([Step([], "Next")]), max_steps=3).run(JOB)

    assert result.state is DriverState.EXHAUSTED
    assert result.advances == 0


class GatedDocument(FakeDocument):
    """Advance button stays disabled until every text field has a value."""

    def _dialog(self):
        dialog = super()._dialog()
        if self.submitted:
            return dialog
        empty = any(isinstance(spec, TextField) and not spec.value for spec in self.step.fields)
        for element in dialog.iter():
            if element.element_id == "btn-advance" and empty:
                element.attributes["disabled"] = "true"
        return dialog


def test_disabled_advance_button_is_filled_then_pressed():
    doc = GatedDocument([Step([TextField("q0", "Question 0")], "Submit application")])

    result = driver_for(doc, max_steps=5).run(JOB)

    assert result.succeeded
    assert result.steps == 1
    assert result.advances == 1
    assert ("q0", "type", "yes") in doc.writes


def test_disabled_advance_button_with_unanswerable_field_exhausts():
    doc = GatedDocument([Step([TextField("q0", "Favourite colour")], "Next")])

    result = driver_for(doc, max_steps=3).run(JOB)

    assert result.state is DriverState.EXHAUSTED
    assert result.advances == 0
    assert doc.clicks == []


def test_off_site_page_is_an_error():
    doc = FakeDocument(multi_step(2), url="https://www.linkedin.com.example.net/jobs/view/1/")

    result = driver_for(doc).run(JOB)

    assert result.state is DriverState.ERROR
    assert result.reason == REASON_UNEXPECTED_NAVIGATION
    assert doc.clicks == []


def test_navigation_away_mid_dialog_is_an_error():
    class Redirect(FakeDocument):
        def click(self, element):
            self.url = "https://www.linkedin.com.evil.io/learning/"
            return super().click(element)

    result = driver_for(Redirect(multi_step(3))).run(JOB)

    assert result.state is DriverState.ERROR
    assert result.reason == REASON_UNEXPECTED_NAVIGATION
    assert result.advances == 1


def test_dialog_closed_without_success_is_dismissed():
    class Closes(FakeDocument):
        def click(self, element):
            self.closed = True
            return True

    result = driver_for(Closes(multi_step(3))).run(JOB)

    assert result.state is DriverState.ERROR
    assert result.reason == REASON_DIALOG_DISMISSED


def test_submit_that_closes_the_dialog_succeeds_on_page_text():
    class ClosesOnSubmit(FakeDocument):
        def click(self, element):
            super().click(element)
            if self.submitted:
                self.closed = True
            return True

    result = driver_for(ClosesOnSubmit(multi_step(2))).run(JOB)

    assert result.succeeded
    assert result.advances == 2


def test_history_records_the_path():
    result = driver_for(FakeDocument(multi_step(1))).run(JOB)

    assert result.history[0] is DriverState.SEARCHING
    assert DriverState.FILLING in result.history
    assert DriverState.ADVANCING in result.history
    assert result.history[-1] is DriverState.SUCCESS


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.linkedin.com/jobs/view/1/", True),
        ("https://linkedin.com/jobs/", True),
        ("https://www.linkedin.com.evil.io/", False),
        ("https://notlinkedin.com/", False),
        ("", False),
    ],
)
def test_host_matches(url, expected):
    assert host_matches(url, "linkedin.com") is expected
