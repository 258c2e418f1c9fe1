"""
Nested attributes, autosave associations and nested forms for Django.

There are two halves to this, which meet at the ``<association>_attributes``
naming convention.

The model half
==============

Models extending :class:`~nested_models.models.NestedAttributesModel` can
declare, after the class body::

    class Person(NestedAttributesModel):
        name = models.CharField(max_length=50)

    Person.accepts_nested_attributes_for('addresses', allow_destroy=True)

which defines a ``person.addresses_attributes`` writer, taking the attributes
of new and existing addresses (see :mod:`nested_models.models`), and makes
``addresses`` an autosave association: saving the person saves the addresses
built or changed through it and deletes those marked for destruction (see
:mod:`nested_models.autosave`). Which associations are declared, and whether
each is a single object or a collection, can be asked of
:mod:`nested_models.reflection`.

The form half
=============

:class:`~nested_models.builder.NestedFormBuilder` (the default form builder)
names fields so that the submitted data is exactly what the writers take::

    {% form_for person url="/people/1/" as f %}
      {% field f "text_field" "name" %}
      {% fields_for f "addresses" as address_form %}
        {% field address_form "text_field" "street" %}
      {% endfields_for %}
    {% endform_for %}

renders, for a person with a saved address 7 and a new one::

    person[name]
    person[addresses_attributes][7][street]
    person[addresses_attributes][new_1][street]

:func:`~nested_models.params.parse_nested_params` turns ``request.POST`` back
into nested dicts, and ``person.addresses_attributes =
params['person']['addresses_attributes']`` does the rest. For JSON APIs,
:class:`~nested_models.serializers.NestedAttributesSerializer` takes the same
payloads.

Getting the plain builder
=========================

Set ``NESTED_MODELS_DEFAULT_FORM_BUILDER`` to a dotted path to change the
default, or pass ``builder=`` to a single ``form_for``/``fields_for``;
:class:`~nested_models.builder.FormBuilder` names fields without any nested
attribute handling.
"""
