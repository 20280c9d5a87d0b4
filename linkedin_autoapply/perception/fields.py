"""Form field group detection and label extraction"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from linkedin_autoapply.reasoning.classify import FieldKind, classify_field_kind
from linkedin_autoapply.reasoning.normalize import dedupe_repeated_label, is_placeholder_option

# Exact class names of LinkedIn form-group wrappers
GROUP_CLASSES = (
    'fb-form-element',
    'jobs-easy-apply-form-element',
    'artdeco-text-input',
    'fb-dash-form-element',
)

# Class fragments of label-like spans
LABEL_CLASS_FRAGMENTS = (
    'fb-form-element-label',
    'artdeco-text-input--label',
    'jobs-easy-apply-form-element__label',
    'fb-dash-form-element__label',
    'form-component__title',
)

LABEL_ATTRS = ('data-test-form-element-label', 'data-test-text-entity-list-form-title')

# Set by the page adapter from element.labels / the nearest ancestor label
CONTROL_LABEL_ATTR = 'data-autoapply-label'
ANCESTOR_LABEL_ATTR = 'data-autoapply-ancestor-label'


@dataclass
class FormFieldGroup:
    kind: FieldKind
    label: str
    current_value: Optional[Union[str, bool]]
    options: List[str] = field(default_factory=list)
    disabled: bool = False
    placeholder: str = ''
    placeholder_indexes: tuple = ()
    element: object = None
    control: object = None

    @property
    def is_filled(self):
        if self.kind is FieldKind.RADIO_GROUP:
            return self.current_value is not None
        if self.kind is FieldKind.SELECT:
            return self.current_value is not None and not is_placeholder_option(self.current_value)
        if self.kind in (FieldKind.TEXT, FieldKind.TEXTAREA):
            value = (self.current_value or '').strip()
            return bool(value) and value != self.placeholder.strip()
        return False


def is_form_group(el):
    if el.tag == 'fieldset':
        return True
    if 'data-test-form-element' in el.attributes:
        return True
    return any(cls in GROUP_CLASSES for cls in el.classes)


def _is_control(el):
    return el.tag in ('input', 'select', 'textarea')


def primary_control(group):
    """The control a group's label describes: first non-choice input, select or textarea"""
    for el in group.iter():
        if el.tag in ('select', 'textarea'):
            return el
        if el.tag == 'input' and el.input_type not in ('radio', 'checkbox', 'hidden'):
            return el
    for el in group.iter():
        if el.tag == 'input' and el.input_type != 'hidden':
            return el
    return None


def label_for(dialog, element_id):
    """Text of label[for=element_id] anywhere in the dialog"""
    if not element_id or dialog is None:
        return ''
    for el in dialog.iter():
        if el.tag == 'label' and el.attr('for') == element_id:
            return dedupe_repeated_label(el.text)
    return ''


def extract_label(group, dialog=None, kind=None):
    """
    Find the question text for a form group.

    Strategies in priority order, first non-empty wins:
    explicit label[for] -> legend -> nested label -> label-class span ->
    aria-label -> ancestor label -> placeholder.
    """
    control = primary_control(group)
    is_choice_group = kind in (FieldKind.RADIO_GROUP, FieldKind.CHECKBOX)

    def explicit():
        if control is None or is_choice_group:
            return ''
        return label_for(dialog, control.attr('id')) or control.attr(CONTROL_LABEL_ATTR)

    def legend():
        el = group.find(lambda e: e.tag == 'legend')
        return el.text if el else ''

    def nested_label():
        # In choice groups nested labels name the options, not the question
        if is_choice_group:
            return ''
        el = group.find(lambda e: e.tag == 'label')
        return el.text if el else ''

    def label_span():
        el = group.find(
            lambda e: any(e.has_class(frag) for frag in LABEL_CLASS_FRAGMENTS)
            or any(attr in e.attributes for attr in LABEL_ATTRS)
        )
        return el.text if el else ''

    def aria_label():
        return control.attr('aria-label') if control is not None else ''

    def ancestor_label():
        return group.attr(ANCESTOR_LABEL_ATTR) or (
            control.attr(ANCESTOR_LABEL_ATTR) if control is not None else ''
        )

    def placeholder():
        return control.attr('placeholder') if control is not None else ''

    for strategy in (explicit, legend, nested_label, label_span, aria_label, ancestor_label, placeholder):
        text = dedupe_repeated_label(strategy())
        if text:
            return text
    return ''


def option_label(radio, dialog=None):
    return (
        label_for(dialog, radio.attr('id'))
        or dedupe_repeated_label(radio.attr(CONTROL_LABEL_ATTR))
        or dedupe_repeated_label(radio.attr('aria-label'))
        or radio.attr('value')
    )


def build_field_group(group, dialog=None, control=None):
    """Build a FormFieldGroup from a group snapshot, or None if it holds no control"""
    kind = classify_field_kind(group)
    if kind is None:
        return None

    label = extract_label(group, dialog, kind)
    main = primary_control(group)
    options = []
    placeholder_indexes = ()
    current_value = None
    disabled = bool(main is not None and (main.is_disabled or main.flag('readonly')))
    placeholder = main.attr('placeholder') if main is not None else ''

    if kind is FieldKind.SELECT:
        select = group if group.tag == 'select' else group.find(lambda e: e.tag == 'select')
        option_els = select.find_all(lambda e: e.tag == 'option')
        options = [dedupe_repeated_label(o.text) for o in option_els]
        placeholder_indexes = tuple(
            i for i, o in enumerate(option_els)
            if o.attributes.get('value', None) == '' or is_placeholder_option(options[i])
        )
        selected = [i for i, o in enumerate(option_els) if o.flag('selected')]
        if selected:
            i = selected[0]
            current_value = None if i in placeholder_indexes else options[i]
        disabled = select.is_disabled
    elif kind is FieldKind.RADIO_GROUP:
        radios = group.find_all(lambda e: e.tag == 'input' and e.input_type == 'radio')
        options = [option_label(r, dialog) for r in radios]
        checked = [i for i, r in enumerate(radios) if r.flag('checked')]
        current_value = options[checked[0]] if checked else None
        disabled = bool(radios) and all(r.is_disabled for r in radios)
    elif kind in (FieldKind.TEXT, FieldKind.TEXTAREA):
        current_value = main.attr('value') if main is not None else ''

    return FormFieldGroup(
        kind=kind,
        label=label,
        current_value=current_value,
        options=options,
        disabled=disabled,
        placeholder=placeholder,
        placeholder_indexes=placeholder_indexes,
        element=group,
        control=control,
    )


def find_group_snapshots(dialog):
    """Outermost form groups in a dialog, in document order"""
    groups = dialog.find_outermost(is_form_group)
    if groups:
        return groups
    # Bare controls with no recognised wrapper
    return [el for el in dialog.find_all(_is_control) if el.input_type != 'hidden']


def extract_field_groups(dialog, document=None):
    """Fresh FormFieldGroups for every fillable group in the dialog"""
    groups = []
    for snapshot in find_group_snapshots(dialog):
        group = build_field_group(snapshot, dialog)
        if group is None:
            continue
        if document is not None:
            group.control = document.field_control(snapshot)
        groups.append(group)
    return groups
