"""
Template tags for nested forms.

Usage::

    {% load nested_forms %}

    {% form_for person url="/people/" as f %}
      {% field f "text_field" "name" %}
      {% fields_for f "addresses" as address_form %}
        {% field address_form "text_field" "street" %}
        {% field address_form "check_box" "_delete" %}
      {% endfields_for %}
    {% endform_for %}

``fields_for`` given a builder as its first argument goes through the
builder, so nested attribute associations are handled; otherwise it starts a
new top-level scope, like ``form_for`` without the form tag. The tag body is
rendered for every scope with the builder available under the ``as`` name.
"""

from django import template
from django.template.base import token_kwargs
from django.utils.html import conditional_escape

from ..builder import FormBuilder
from ..helpers import FormHelper

register = template.Library()


class FormScopeNode(template.Node):

    def __init__(self, tag_name, args, kwargs, var_name, nodelist):
        self.tag_name = tag_name
        self.args = args
        self.kwargs = kwargs
        self.var_name = var_name
        self.nodelist = nodelist

    def render(self, context):
        args = [arg.resolve(context) for arg in self.args]
        options = {key: value.resolve(context)
                   for key, value in self.kwargs.items()}

        def block(builder):
            with context.push(**{self.var_name: builder}):
                return self.nodelist.render(context)
        options['block'] = block

        if self.tag_name == 'form_for':
            return FormHelper().form_for(*args, **options)
        if isinstance(args[0], FormBuilder):
            return args[0].fields_for(*args[1:], **options)
        return FormHelper().fields_for(*args, **options)


def _parse_scope_tag(parser, token):
    bits = token.split_contents()
    tag_name = bits.pop(0)
    if len(bits) < 3 or bits[-2] != 'as':
        raise template.TemplateSyntaxError(
            "{!r} tag requires at least one argument followed by 'as <name>'"
            .format(tag_name))
    var_name = bits[-1]
    bits = bits[:-2]

    args = []
    kwargs = {}
    for bit in bits:
        kwarg = token_kwargs([bit], parser)
        if kwarg:
            kwargs.update(kwarg)
        elif kwargs:
            raise template.TemplateSyntaxError(
                '{!r} tag has a positional argument after keyword arguments'
                .format(tag_name))
        else:
            args.append(parser.compile_filter(bit))
    if not args:
        raise template.TemplateSyntaxError(
            "{!r} tag requires a builder, name or record".format(tag_name))

    nodelist = parser.parse(('end' + tag_name,))
    parser.delete_first_token()
    return FormScopeNode(tag_name, args, kwargs, var_name, nodelist)


@register.tag
def form_for(parser, token):
    return _parse_scope_tag(parser, token)


@register.tag
def fields_for(parser, token):
    return _parse_scope_tag(parser, token)


@register.simple_tag
def field(builder, helper, method, **attrs):
    """Render one field helper of ``builder``, e.g. ``text_field``."""
    if helper not in builder.field_helpers:
        raise template.TemplateSyntaxError(
            '{!r} is not a field helper of {!r}'.format(helper, builder))
    return conditional_escape(getattr(builder, helper)(method, **attrs))
