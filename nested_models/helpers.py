'''
Entry points for building forms: the template-side ``fields_for`` and
``form_for``, which form builders also call back into for nested scopes.

A *block* is any callable taking a form builder and returning the rendered
fragment for it; the template tags pass one rendering the tag body.
'''

from django.forms.utils import flatatt
from django.utils.html import format_html
from django.utils.module_loading import import_string

from . import settings
from .record_identifier import singular_class_name


def default_form_builder():
    """The builder class used when none is given, from settings."""
    return import_string(settings.default_form_builder_path())


class FormHelper(object):
    """Renders form scopes: creates the builder and yields it to the block."""

    def fields_for(self, record_or_name_or_array, *args, **options):
        """
        Creates a scope around a specific model object like ``form_for``,
        without the form tags themselves. This makes it suitable for
        additional model objects in the same form.

        Given a string, it is used as the parameter name and the first
        positional argument (if any) as the object; given an object (or a
        list ending with one), the parameter name is derived from its class.
        """
        block = options.pop('block', None)
        if block is None:
            raise TypeError('Missing block')

        if isinstance(record_or_name_or_array, str):
            object_name = record_or_name_or_array
            obj = args[0] if args else None
        else:
            if isinstance(record_or_name_or_array, (list, tuple)):
                obj = record_or_name_or_array[-1]
            else:
                obj = record_or_name_or_array
            object_name = singular_class_name(obj)

        builder = options.pop('builder', None) or default_form_builder()
        if isinstance(builder, str):
            builder = import_string(builder)
        return block(builder(object_name, obj, self, options))

    def form_for(self, record_or_name_or_array, *args, **options):
        """
        Like :meth:`fields_for`, wrapped in a ``<form>`` tag. Takes ``url``,
        ``method`` (default ``'post'``) and ``html`` (extra attributes for the
        form tag) options.
        """
        url = options.pop('url', '')
        method = options.pop('method', 'post')
        html = options.pop('html', None) or {}
        contents = self.fields_for(record_or_name_or_array, *args, **options)
        return format_html('<form action="{}" method="{}"{}>{}</form>',
                           url, method, flatatt(html), contents)


def fields_for(record_or_name_or_array, *args, **options):
    return FormHelper().fields_for(record_or_name_or_array, *args, **options)


def form_for(record_or_name_or_array, *args, **options):
    return FormHelper().form_for(record_or_name_or_array, *args, **options)
