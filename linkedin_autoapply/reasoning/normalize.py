"""Text normalization utilities"""

import string


def normalize_text(text):
    """Normalize text for keyword matching - lowercase, strip punctuation"""
    if not text:
        return ""
    text = text.lower()
    text = text.translate(str.maketrans('', '', string.punctuation))
    # Collapse whitespace
    return ' '.join(text.split())


def clean_label(text):
    """Collapse whitespace and drop the required-field asterisk from a label"""
    if not text:
        return ""
    text = ' '.join(str(text).split())
    return text.rstrip('*').strip()


def dedupe_repeated_label(text):
    """LinkedIn renders some labels twice (visible + screen-reader copy)"""
    text = clean_label(text)
    half = len(text) // 2
    if len(text) % 2 == 0 and half and text[:half] == text[half:]:
        return text[:half]
    words = text.split()
    if len(words) % 2 == 0 and words and words[:len(words) // 2] == words[len(words) // 2:]:
        return ' '.join(words[:len(words) // 2])
    return text


def is_placeholder_option(text):
    """True for 'Select an option' style dropdown entries"""
    normalized = normalize_text(text)
    if not normalized:
        return True
    placeholder_phrases = ['select an option', 'please select', 'select one', 'choose', 'pick one']
    return any(normalized.startswith(phrase) for phrase in placeholder_phrases) or normalized == 'select'
