"""Field classification logic"""

from enum import Enum

TEXT_INPUT_TYPES = ('text', 'number', 'email', 'tel', 'url', 'search', '')

LOCATION_KEYWORDS = ('city', 'location', 'address', 'where')


class FieldKind(Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO_GROUP = "radio_group"
    CHECKBOX = "checkbox"
    FILE = "file"


def _controls(group):
    return group.find_all(lambda el: el.tag in ('input', 'select', 'textarea'))


def classify_field_kind(group):
    """
    Classify a form group snapshot by the controls it contains.

    Classification order matters: File -> Select -> Radio group -> Text ->
    Textarea -> Checkbox. Returns None for groups with no fillable control.
    """
    controls = _controls(group)
    if group.tag in ('input', 'select', 'textarea'):
        controls = [group] + controls
    if not controls:
        return None

    input_types = [c.input_type for c in controls if c.tag == 'input']

    # RULE 1: uploads are never filled
    if 'file' in input_types:
        return FieldKind.FILE

    # RULE 2: native dropdown
    if any(c.tag == 'select' for c in controls):
        return FieldKind.SELECT

    # RULE 3: radio group (fieldset / radiogroup, or bare radios)
    if 'radio' in input_types:
        return FieldKind.RADIO_GROUP

    # RULE 4: single-line text inputs
    if any(t in TEXT_INPUT_TYPES for t in input_types):
        return FieldKind.TEXT

    # RULE 5: multi-line text
    if any(c.tag == 'textarea' for c in controls):
        return FieldKind.TEXTAREA

    # RULE 6: only checkboxes
    if input_types and all(t == 'checkbox' for t in input_types):
        return FieldKind.CHECKBOX

    return None


def is_location_label(label):
    """Location-like labels get autocomplete handling after typing"""
    lowered = (label or '').lower()
    return any(keyword in lowered for keyword in LOCATION_KEYWORDS)


def is_follow_checkbox(label):
    """'Follow <company>' opt-ins, but not 'follow up' consent text"""
    lowered = (label or '').lower()
    if 'follow up' in lowered or 'follow-up' in lowered:
        return False
    return 'follow' in lowered
