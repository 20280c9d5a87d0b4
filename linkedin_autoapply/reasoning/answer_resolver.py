"""Answer resolution: preset table first, then AI with primary/backup failover"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

from linkedin_autoapply.data.answer_bank import build_preset_rules, preset_answer
from linkedin_autoapply.llm import ProviderError, RateLimitError
from linkedin_autoapply.reasoning.prompts import build_checkbox_prompt, build_question_prompt

log = logging.getLogger(__name__)


class AnswerSource(Enum):
    PRESET = "preset"
    AI_PRIMARY = "ai_primary"
    AI_BACKUP = "ai_backup"
    NONE = "none"


@dataclass(frozen=True)
class AnswerDecision:
    value: str | None
    source: AnswerSource
    rule: str | None = None

    @property
    def answered(self) -> bool:
        return self.value is not None


class ProviderState:
    """Which provider is active and which are exhausted, for one resolver."""

    def __init__(self, primary=None, backup=None):
        self._lock = threading.Lock()
        self.primary = primary
        self.backup = backup
        self._exhausted: set[int] = set()
        self._active = primary if primary is not None else backup

    def _usable(self, provider) -> bool:
        return provider is not None and id(provider) not in self._exhausted

    def active(self):
        with self._lock:
            if not self._usable(self._active):
                self._active = next(
                    (p for p in (self.primary, self.backup) if self._usable(p)), None
                )
            return self._active

    def alternate(self, provider):
        """The other configured, non-exhausted provider, or None."""
        with self._lock:
            other = self.backup if provider is self.primary else self.primary
            return other if self._usable(other) else None

    def mark_exhausted(self, provider):
        """Retire a rate-limited provider for the rest of the process and switch."""
        with self._lock:
            self._exhausted.add(id(provider))
            if self._active is provider:
                other = self.backup if provider is self.primary else self.primary
                self._active = other if self._usable(other) else None
            return self._active

    def is_exhausted(self, provider) -> bool:
        with self._lock:
            return id(provider) in self._exhausted

    def source_for(self, provider) -> AnswerSource:
        if provider is not None and provider is self.primary:
            return AnswerSource.AI_PRIMARY
        return AnswerSource.AI_BACKUP


class AnswerResolver:
    """
    Turns a question label (plus options and job context) into an answer.

    Preset rules over the operator profile are checked first and never cost an
    AI call. Otherwise the active provider is asked; a rate-limited provider is
    retired and the other one gets a single retry. Never raises to callers.
    """

    def __init__(self, profile, primary=None, backup=None, rules=None):
        self.profile = profile
        self.rules = rules if rules is not None else build_preset_rules(profile)
        self.providers = ProviderState(primary, backup)
        self._profile_summary = profile.summary_text()

    # -- public API ---------------------------------------------------------

    def decide(self, question, options=None, job_context=None) -> AnswerDecision:
        matched, value, rule = preset_answer(question, self.rules)
        if matched and value is not None:
            log.debug("Preset answer (%s) for %r: %r", rule, question[:60], value)
            return AnswerDecision(value, AnswerSource.PRESET, rule)

        prompt = build_question_prompt(self._profile_summary, question, options, job_context)
        text, source = self._route(prompt)
        if not text:
            return AnswerDecision(None, AnswerSource.NONE, rule)

        log.info("AI answered (%s): %r -> %r", source.value, question[:40], text[:40])
        return AnswerDecision(text, source, rule)

    def resolve(self, question, options=None, job_context=None) -> str | None:
        return self.decide(question, options, job_context).value

    def should_check(self, label, job_context=None) -> bool:
        """Checkbox decision. Anything but an explicit "true" means unchecked."""
        user_info = self.profile.user_info or self._profile_summary
        text, source = self._route(build_checkbox_prompt(user_info, label, job_context))
        result = (text or "").strip().strip('."\'').lower() == "true"
        log.info("Checkbox AI (%s): %r -> %s", source.value, label[:40], result)
        return result

    def complete(self, prompt) -> str | None:
        """Raw routed generation, for callers with their own prompt."""
        return self._route(prompt)[0]

    @property
    def ai_available(self) -> bool:
        return self.providers.active() is not None

    # -- routing ------------------------------------------------------------

    def _route(self, prompt):
        provider = self.providers.active()
        if provider is None:
            return (None, AnswerSource.NONE)

        try:
            return (self._generate(provider, prompt), self.providers.source_for(provider))
        except RateLimitError as e:
            log.warning("%s rate limited, switching provider: %s", provider.name, e)
            retry = self.providers.mark_exhausted(provider)
        except ProviderError as e:
            log.warning("%s failed: %s", provider.name, e)
            retry = self.providers.alternate(provider)

        if retry is None or retry is provider:
            log.error("All AI providers failed")
            return (None, AnswerSource.NONE)

        log.info("Retrying with %s", retry.name)
        try:
            return (self._generate(retry, prompt), self.providers.source_for(retry))
        except RateLimitError as e:
            log.error("%s rate limited on retry: %s", retry.name, e)
            self.providers.mark_exhausted(retry)
        except ProviderError as e:
            log.error("All AI providers failed: %s", e)
        return (None, AnswerSource.NONE)

    @staticmethod
    def _generate(provider, prompt):
        try:
            text = provider.generate(prompt)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"{getattr(provider, 'name', 'provider')} raised {type(e).__name__}: {e}") from e
        text = (text or "").strip()
        return text or None
