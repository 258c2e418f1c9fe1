'''
Django REST framework support for nested attributes.

:class:`NestedAttributesSerializer` is a ``ModelSerializer`` which, for every
association of ``Meta.model`` accepting nested attributes, takes a write-only
``<association>_attributes`` field with the same shapes the model writers
take (a list of dicts, or a dict of them, for collections; a dict for single
associations)::

    class PersonSerializer(NestedAttributesSerializer):
        class Meta:
            model = Person
            fields = ('id', 'name')

    PersonSerializer(data={'name': 'Ann',
                           'addresses_attributes': [{'street': 'Main'}]})

Saving assigns the ordinary fields, then the nested attributes, validates the
whole graph with ``full_clean()`` and saves it (the autosave cascade takes
care of the associated records).
'''

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework.utils import model_meta

from .reflection import nested_associations


class NestedAttributesSerializer(serializers.ModelSerializer):

    def get_fields(self):
        fields = super(NestedAttributesSerializer, self).get_fields()
        for reflection in nested_associations(self.Meta.model):
            name = '{}_attributes'.format(reflection.name)
            if name not in fields:
                fields[name] = serializers.JSONField(write_only=True,
                                                     required=False)
        return fields

    def _pop_nested_attributes(self, validated_data):
        nested = {}
        for reflection in nested_associations(self.Meta.model):
            name = '{}_attributes'.format(reflection.name)
            if name in validated_data:
                nested[name] = validated_data.pop(name)
        return nested

    def create(self, validated_data):
        nested = self._pop_nested_attributes(validated_data)
        return self._save_graph(self.Meta.model(), validated_data, nested)

    def update(self, instance, validated_data):
        nested = self._pop_nested_attributes(validated_data)
        return self._save_graph(instance, validated_data, nested)

    def _save_graph(self, instance, validated_data, nested):
        info = model_meta.get_field_info(type(instance))
        many_to_many = {}
        for attr, value in validated_data.items():
            if attr in info.relations and info.relations[attr].to_many:
                many_to_many[attr] = value
            else:
                setattr(instance, attr, value)
        for attr, value in nested.items():
            setattr(instance, attr, value)

        try:
            instance.full_clean()
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)

        instance.save()
        for attr, value in many_to_many.items():
            getattr(instance, attr).set(value)
        return instance
