'''
Form builders.

A form builder is bound to an object name (the parameter name fields are
submitted under), an optional object, and the template helper which renders
nested scopes. :class:`FormBuilder` is the plain builder;
:class:`NestedFormBuilder` adds nested attribute support to ``fields_for``
and is the default (see :func:`nested_models.helpers.default_form_builder`).
You can still get the plain one for a particular form by passing
``builder=FormBuilder``.
'''

import logging
import re

from django import forms
from django.forms.utils import flatatt
from django.utils.html import conditional_escape, format_html
from django.utils.safestring import mark_safe
from django.utils.text import capfirst

from .record_identifier import is_record, new_record, singular_class_name
from .reflection import reflect_on_nested_association

logger = logging.getLogger(__name__)


class FormBuilder(object):

    field_helpers = ('text_field', 'password_field', 'hidden_field',
                     'text_area', 'check_box', 'label')

    def __init__(self, object_name, object, template, options=None):
        self.object_name = object_name
        self.object = object
        self.template = template
        self.options = dict(options or {})
        # The index of the enclosing collection, passed down explicitly. For
        # names like 'person[]' it defaults to the object's primary key.
        self.auto_index = self.options.pop('auto_index', None)
        if self.auto_index is None and object_name.endswith('[]') \
                and 'index' not in self.options:
            if not is_record(object) or new_record(object):
                raise ValueError(
                    'object[] naming needs a saved record to take the index '
                    'from, got {!r} for {!r}'.format(object, object_name))
            self.auto_index = object.pk

    def __repr__(self):
        return '<{} {!r}>'.format(type(self).__name__, self.object_name)

    def scope(self):
        """
        The object name and index string for names built in this scope. An
        ``index`` option wins over the auto index. Either drops a trailing
        ``[]`` from the object name.
        """
        if 'index' in self.options:
            index = self.options['index']
        elif self.auto_index is not None:
            index = self.auto_index
        else:
            return self.object_name, ''
        return re.sub(r'\[\]$', '', self.object_name), '[{}]'.format(index)

    def fields_for(self, record_or_name_or_array, *args, **options):
        block = options.pop('block', None)
        object_name, index = self.scope()

        if isinstance(record_or_name_or_array, str):
            name = '{}{}[{}]'.format(object_name, index,
                                     record_or_name_or_array)
        else:
            if isinstance(record_or_name_or_array, (list, tuple)):
                obj = record_or_name_or_array[-1]
            else:
                obj = record_or_name_or_array
            name = '{}{}[{}]'.format(object_name, index,
                                     singular_class_name(obj))
            args = (obj,) + args

        return self.template.fields_for(name, *args, block=block, **options)

    # Field helpers

    def field_name(self, method):
        object_name, index = self.scope()
        return '{}{}[{}]'.format(object_name, index, method)

    def field_id(self, method):
        object_name, index = self.scope()
        sanitized = re.sub(r'\]\[|[^-a-zA-Z0-9:.]', '_', object_name)
        sanitized = re.sub(r'_$', '', sanitized)
        if index:
            return '{}_{}_{}'.format(sanitized, index[1:-1], method)
        return '{}_{}'.format(sanitized, method)

    def value(self, method):
        if self.object is None:
            return None
        return getattr(self.object, method, None)

    def _render(self, widget, method, attrs, value=None):
        final_attrs = {'id': self.field_id(method)}
        final_attrs.update(attrs)
        if value is None:
            value = self.value(method)
        return widget.render(self.field_name(method), value, attrs=final_attrs)

    def text_field(self, method, **attrs):
        return self._render(forms.TextInput(), method, attrs)

    def password_field(self, method, **attrs):
        # Like the widget itself, never render the current value back.
        return self._render(forms.PasswordInput(), method, attrs, value='')

    def hidden_field(self, method, **attrs):
        return self._render(forms.HiddenInput(), method, attrs)

    def text_area(self, method, **attrs):
        return self._render(forms.Textarea(), method, attrs)

    def check_box(self, method, checked_value='1', unchecked_value='0',
                  **attrs):
        """
        A checkbox preceded by a hidden field carrying ``unchecked_value``, so
        that an unchecked box still submits something. The checkbox comes
        last so that it wins when both are submitted.
        """
        hidden = forms.HiddenInput().render(self.field_name(method),
                                            unchecked_value)
        attrs = dict(attrs, value=checked_value)
        checkbox = self._render(
            forms.CheckboxInput(check_test=_checked), method, attrs,
            value=bool(_checked(self.value(method))))
        return hidden + checkbox

    def label(self, method, text=None, **attrs):
        if text is None:
            text = capfirst(method.replace('_', ' '))
        final_attrs = {'for': self.field_id(method)}
        final_attrs.update(attrs)
        return format_html('<label{}>{}</label>',
                           flatatt(final_attrs), text)


def _checked(value):
    return value not in (None, False, 0, '', '0', 'false')


class NestedFormBuilder(FormBuilder):
    """
    A form builder whose ``fields_for`` renders nested attribute scopes for
    associations that accept nested attributes.

    Given a ``person`` builder and a ``person.addresses`` collection accepting
    nested attributes, ``fields_for('addresses', block=...)`` renders the block
    once per address, under ``person[addresses_attributes][<id>]`` for saved
    addresses and ``person[addresses_attributes][new_<n>]`` for new ones. For a
    single association (``address``) it renders once, under
    ``person[address_attributes]``.
    """

    def __init__(self, *args, **kwargs):
        super(NestedFormBuilder, self).__init__(*args, **kwargs)
        self._child_counter = 0

    def fields_for(self, record_or_name_or_array, *args, **options):
        if isinstance(record_or_name_or_array, str):
            association = reflect_on_nested_association(
                self.object, record_or_name_or_array)
            if association is not None:
                return self._fields_for_with_nested_attributes(
                    association, args, options.pop('block', None), options)
        return super(NestedFormBuilder, self).fields_for(
            record_or_name_or_array, *args, **options)

    def _fields_for_with_nested_attributes(self, association, args, block,
                                           options):
        # The carrier takes no index, and no trailing '[]' either.
        object_name = re.sub(r'\[\]$', '', self.object_name)
        name = '{}[{}_attributes]'.format(object_name, association.name)
        target = association.read(self.object)

        if not association.collection:
            logger.debug('Rendering %s for %r', name, association)
            return conditional_escape(self.template.fields_for(
                name, target, block=block, **options))

        if args and is_record(args[0]):
            # One member at a time, e.g. from a loop in the template.
            children = [args[0]]
        else:
            children = target

        fragments = []
        for child in children:
            if new_record(child):
                child_id = self._new_child_id()
            else:
                child_id = child.pk
            child_name = '{}[{}]'.format(name, child_id)
            logger.debug('Rendering %s for %r', child_name, association)
            fragments.append(self.template.fields_for(
                child_name, child, block=block, **options))
        return mark_safe(''.join(conditional_escape(fragment)
                                 for fragment in fragments))

    def _new_child_id(self):
        # Owned by this builder, so numbering goes on across calls and never
        # repeats within one form.
        self._child_counter += 1
        return 'new_{}'.format(self._child_counter)
