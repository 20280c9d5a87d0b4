"""Select dropdown resolution logic"""

from linkedin_autoapply.reasoning.normalize import normalize_text, is_placeholder_option


def real_option_indexes(options, placeholder_indexes=()):
    """Indexes of options that are actual choices, not 'Select an option'"""
    skip = set(placeholder_indexes)
    return [
        i for i, text in enumerate(options)
        if i not in skip and not is_placeholder_option(text)
    ]


def resolve_select_index(options, answer, placeholder_indexes=()):
    """
    Resolve an answer to a dropdown option index.

    Matching order: exact (case-insensitive) -> normalized exact -> containment
    in either direction -> first real option. A dropdown with real options is
    never left on its placeholder (fail-open).

    Returns: (index: int|None, confidence: str, reason: str)
    """
    candidates = real_option_indexes(options, placeholder_indexes)
    if not candidates:
        return (None, 'none', 'no_real_options')

    wanted = (answer or '').strip().lower()
    if wanted:
        for i in candidates:
            if options[i].strip().lower() == wanted:
                return (i, 'high', 'exact_match')

        wanted_normalized = normalize_text(wanted)
        for i in candidates:
            if normalize_text(options[i]) == wanted_normalized:
                return (i, 'high', 'normalized_match')

        for i in candidates:
            option = options[i].strip().lower()
            if option and (wanted in option or option in wanted):
                return (i, 'medium', 'partial_match')

    return (candidates[0], 'low', 'first_option_fallback')
