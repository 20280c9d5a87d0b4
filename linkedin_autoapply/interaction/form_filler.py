"""Fill every field group of the current dialog step"""

import logging
from dataclasses import dataclass, field
from typing import List

from linkedin_autoapply.debug.unresolved_collector import record_unresolved_field
from linkedin_autoapply.perception.checkboxes import detect_checkbox_groups
from linkedin_autoapply.perception.fields import extract_field_groups
from linkedin_autoapply.reasoning.classify import FieldKind, is_follow_checkbox, is_location_label
from linkedin_autoapply.reasoning.resolve_radio import (
    RADIO_FALLBACK_FIRST,
    apply_radio_fallback,
    resolve_radio_index,
)
from linkedin_autoapply.reasoning.resolve_select import real_option_indexes, resolve_select_index

log = logging.getLogger(__name__)

DEFAULT_AUTOCOMPLETE_WAIT_MS = 2000


@dataclass
class FillReport:
    filled: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def writes(self):
        return len(self.filled)

    def merge(self, other):
        self.filled.extend(other.filled)
        self.skipped.extend(other.skipped)
        self.unresolved.extend(other.unresolved)
        self.failed.extend(other.failed)
        return self


class FormFiller:
    """
    Classify and fill the field groups of one rendered dialog step.

    Groups are rebuilt from the dialog snapshot on every call, so a second
    pass over the same step sees the values written by the first and writes
    nothing. A failure on one field is logged and skipped.
    """

    def __init__(self, document, resolver, radio_fallback=RADIO_FALLBACK_FIRST,
                 timing=None, collect_unresolved=False):
        self.document = document
        self.resolver = resolver
        self.radio_fallback = radio_fallback
        self.timing = timing or {}
        self.collect_unresolved = collect_unresolved

    # -- fields -------------------------------------------------------------

    def fill_all(self, dialog, job_context=None):
        report = FillReport()
        for group in extract_field_groups(dialog, self.document):
            label = group.label or "(unlabeled)"

            if group.kind in (FieldKind.FILE, FieldKind.CHECKBOX):
                # Uploads are skipped; checkboxes go through resolve_checkboxes
                continue
            if group.is_filled:
                log.debug("Already filled: %s = %r", label, group.current_value)
                report.skipped.append(label)
                continue
            if group.disabled:
                log.debug("Skipping disabled field: %s", label)
                report.skipped.append(label)
                continue

            try:
                if group.kind in (FieldKind.TEXT, FieldKind.TEXTAREA):
                    written = self._fill_text(group, job_context)
                elif group.kind is FieldKind.SELECT:
                    written = self._fill_select(group, job_context)
                else:
                    written = self._fill_radio(group, job_context)
            except Exception as e:
                log.warning("Error filling %r: %s", label, e)
                report.failed.append(label)
                continue

            if written:
                report.filled.append(label)
            else:
                report.unresolved.append(label)

        if report.filled or report.failed:
            log.info(
                "Filled %d field(s), %d already set, %d unresolved, %d failed",
                len(report.filled), len(report.skipped), len(report.unresolved), len(report.failed),
            )
        return report

    def _fill_text(self, group, job_context):
        decision = self.resolver.decide(group.label, None, job_context)
        value = decision.value
        if not value:
            if value is None:
                log.warning("No answer found for: %s", group.label)
                self._record(group, job_context, None, "left_empty")
            return False

        group.control.type_text(value)
        log.info("Filled: %s = %r", group.label, value[:60])

        if group.kind is FieldKind.TEXT and is_location_label(group.label):
            wait_ms = self.timing.get("autocomplete_wait_ms", DEFAULT_AUTOCOMPLETE_WAIT_MS)
            if not group.control.pick_suggestion(wait_ms):
                log.debug("No autocomplete suggestion for %s, using keyboard", group.label)
                group.control.press("ArrowDown")
                group.control.press("Enter")
        return True

    def _fill_select(self, group, job_context):
        choices = [group.options[i] for i in real_option_indexes(group.options, group.placeholder_indexes)]
        if not choices:
            log.warning("Dropdown has no real options: %s", group.label)
            return False

        decision = self.resolver.decide(group.label, choices, job_context)
        index, confidence, reason = resolve_select_index(
            group.options, decision.value, group.placeholder_indexes
        )
        group.control.select_option(index)

        if reason == "first_option_fallback":
            log.warning("Default selected: %s = %r (answer %r)", group.label, group.options[index], decision.value)
            self._record(group, job_context, decision.value, "first_option_fallback")
        else:
            log.info("Selected: %s = %r (%s)", group.label, group.options[index], confidence)
        return True

    def _fill_radio(self, group, job_context):
        decision = self.resolver.decide(group.label, group.options, job_context)
        index, confidence, reason = resolve_radio_index(group.options, decision.value)

        if index is None:
            index = apply_radio_fallback(group.options, self.radio_fallback)
            if index is None:
                log.warning("Radio unresolved, leaving empty: %s (answer %r)", group.label, decision.value)
                self._record(group, job_context, decision.value, "left_empty")
                return False
            log.warning("Default selected first radio option for: %s (answer %r)", group.label, decision.value)
            self._record(group, job_context, decision.value, "first_option_fallback")
        else:
            log.info("Selected radio: %s = %r (%s)", group.label, group.options[index], confidence)

        group.control.check_radio(index)
        return True

    # -- checkboxes ---------------------------------------------------------

    def resolve_checkboxes(self, dialog, job_context=None):
        """
        Decide every checkbox in the dialog.

        Priority: "follow" opt-ins are forced off -> already-checked boxes are
        left alone -> the resolver decides, and any failure leaves it unchecked.
        """
        report = FillReport()
        for group in detect_checkbox_groups(dialog):
            if group.is_radio_equivalent and not any(item.checked for item in group.items):
                self._resolve_exclusive_group(group, job_context, report)
                continue
            for item in group.items:
                try:
                    self._resolve_checkbox(item, job_context, report)
                except Exception as e:
                    log.warning("Error handling checkbox %r: %s", item.label, e)
                    report.failed.append(item.label)
        return report

    def _click(self, item):
        self.document.checkbox_control(item.element).click()

    def _resolve_checkbox(self, item, job_context, report):
        if item.disabled:
            report.skipped.append(item.label)
            return

        if is_follow_checkbox(item.label):
            if item.checked:
                self._click(item)
                log.info("Unchecked follow checkbox: %s", item.label)
                report.filled.append(item.label)
            else:
                report.skipped.append(item.label)
            return

        if item.checked:
            report.skipped.append(item.label)
            return

        try:
            should_check = self.resolver.should_check(item.prompt_label, job_context)
        except Exception as e:
            log.warning("Checkbox decision failed for %r, leaving unchecked: %s", item.label, e)
            should_check = False

        if should_check:
            self._click(item)
            log.info("Checked: %s", item.label)
            report.filled.append(item.label)
        else:
            report.skipped.append(item.label)

    def _resolve_exclusive_group(self, group, job_context, report):
        """Yes/No style checkbox groups: pick one option like a radio, never default"""
        labels = group.option_labels
        try:
            decision = self.resolver.decide(group.question, labels, job_context)
            index, confidence, reason = resolve_radio_index(labels, decision.value)
            if index is None:
                log.warning("Checkbox group unresolved, leaving unchecked: %s", group.question)
                report.unresolved.append(group.question)
                return
            if is_follow_checkbox(group.items[index].prompt_label):
                log.info("Leaving follow option unchecked: %s = %r", group.question, labels[index])
                report.skipped.append(group.question)
                return
            self._click(group.items[index])
            log.info("Checked option: %s = %r (%s)", group.question, labels[index], confidence)
            report.filled.append(group.question)
        except Exception as e:
            log.warning("Error handling checkbox group %r: %s", group.question, e)
            report.failed.append(group.question)

    # -- debug --------------------------------------------------------------

    def _record(self, group, job_context, answer, action):
        if not self.collect_unresolved:
            return
        record_unresolved_field(
            job_title=getattr(job_context, "title", ""),
            company=getattr(job_context, "company", ""),
            field_type=group.kind.value,
            question_text=group.label,
            options=group.options or None,
            answer=answer,
            action=action,
        )
