"""Radio button resolution logic"""

from linkedin_autoapply.reasoning.normalize import normalize_text

RADIO_FALLBACK_FIRST = "first"
RADIO_FALLBACK_SKIP = "skip"


def _yes_no_token(answer):
    words = answer.split()
    if words and words[0] in ('yes', 'no'):
        return words[0]
    return None


def resolve_radio_index(option_labels, answer):
    """
    Resolve an answer to a radio option index.

    Yes/No answers are matched first (exact label, then whole word) so that
    "No" never lands on an option like "None of the above". Then exact
    normalized match, then containment in either direction.

    Returns: (index: int|None, confidence: str, reason: str)
    """
    if not option_labels:
        return (None, 'none', 'no_options')

    normalized_answer = normalize_text(answer)
    if not normalized_answer:
        return (None, 'none', 'no_answer')

    normalized_options = [normalize_text(label) for label in option_labels]

    token = _yes_no_token(normalized_answer)
    if token:
        for i, option in enumerate(normalized_options):
            if option == token:
                return (i, 'high', 'yes_no_exact')
        for i, option in enumerate(normalized_options):
            if token in option.split():
                return (i, 'high', 'yes_no_word')

    for i, option in enumerate(normalized_options):
        if option == normalized_answer:
            return (i, 'high', 'exact_match')

    for i, option in enumerate(normalized_options):
        if option and (normalized_answer in option or option in normalized_answer):
            return (i, 'medium', 'partial_match')

    return (None, 'low', 'unmatched')


def apply_radio_fallback(option_labels, policy=RADIO_FALLBACK_FIRST):
    """Index to select when nothing matched, or None to leave the group empty"""
    if policy == RADIO_FALLBACK_FIRST and option_labels:
        return 0
    return None
