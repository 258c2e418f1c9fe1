'''
Association reflections for nested attribute models.

A reflection describes one relation of a model which is either autosaved,
accepts nested attributes, or both. The cardinality of the relation (a single
related object or a collection) is taken from the Django field metadata, so
nothing here probes for methods at runtime.

The reflection also owns the *association target*: the in-memory copy of the
related object(s) which nested attribute writers build into and which the
autosave cascade writes out. Django's related managers cannot hold unsaved
objects, hence the need for it.
'''

import logging

from django.core.exceptions import (FieldDoesNotExist, ImproperlyConfigured,
                                    ObjectDoesNotExist)
from django.db import models

from .record_identifier import new_record
from .register import Register

logger = logging.getLogger(__name__)

TARGETS_ATTRIBUTE = '_association_targets'


class AssociationReflection(object):
    """One autosaved and/or nested attribute association of a model."""

    def __init__(self, model, name, autosave=False, nested=False,
                 allow_destroy=False, reject_if=None):
        if reject_if is not None and reject_if != 'all_blank' \
                and not callable(reject_if):
            raise ImproperlyConfigured(
                "reject_if for {}.{} must be callable or 'all_blank', not {!r}"
                .format(model.__name__, name, reject_if))
        self.model = model
        self.name = name
        self.autosave = autosave
        self.nested = nested
        self.allow_destroy = allow_destroy
        self.reject_if = reject_if

    def __repr__(self):
        return '<{} {}.{}>'.format(type(self).__name__, self.model.__name__,
                                   self.name)

    def copy_for(self, model):
        return type(self)(model, self.name, autosave=self.autosave,
                          nested=self.nested,
                          allow_destroy=self.allow_destroy,
                          reject_if=self.reject_if)

    @property
    def field(self):
        # Resolved lazily: at class creation time the other end of the
        # relation may not have been loaded yet.
        try:
            field = self.model._meta.get_field(self.name)
        except FieldDoesNotExist:
            raise ImproperlyConfigured(
                'No association found for name {!r} on {}. Has it been '
                'defined yet?'.format(self.name, self.model.__name__))
        if not field.is_relation:
            raise ImproperlyConfigured(
                '{}.{} is not an association'
                .format(self.model.__name__, self.name))
        return field

    @property
    def collection(self):
        field = self.field
        return bool(field.one_to_many or field.many_to_many)

    @property
    def forward(self):
        """Whether the foreign key lives on this model (belongs-to style)."""
        return isinstance(self.field, models.ForeignKey)

    @property
    def related_model(self):
        return self.field.related_model

    @property
    def accessor(self):
        field = self.field
        if field.auto_created and not field.concrete:
            return field.get_accessor_name()
        return field.name

    @property
    def remote_field_name(self):
        """
        The foreign key on the related model pointing back here, for reverse
        one-to-one and one-to-many relations; None otherwise.
        """
        field = self.field
        if isinstance(field, models.ForeignObjectRel) and not field.many_to_many:
            return field.field.name
        return None

    def loaded(self, instance):
        return self.name in instance.__dict__.get(TARGETS_ATTRIBUTE, {})

    def read(self, instance):
        """
        The association target of ``instance``: a list for collections, the
        related object or None otherwise. Loaded from the database on first
        use and cached on the instance from then on.
        """
        targets = instance.__dict__.setdefault(TARGETS_ATTRIBUTE, {})
        if self.name not in targets:
            targets[self.name] = self._load(instance)
        return targets[self.name]

    def write(self, instance, target):
        instance.__dict__.setdefault(TARGETS_ATTRIBUTE, {})[self.name] = target

    def records(self, instance):
        """The non-None records of a loaded target, as a list."""
        if not self.loaded(instance):
            return []
        target = self.read(instance)
        if self.collection:
            return list(target)
        return [] if target is None else [target]

    def _load(self, instance):
        if self.collection:
            if new_record(instance):
                # Related managers refuse to work without a primary key.
                return []
            logger.debug('Loading %r for %r', self, instance)
            return list(getattr(instance, self.accessor).all())
        try:
            return getattr(instance, self.accessor)
        except ObjectDoesNotExist:
            return None

    def build(self, instance, attributes):
        """Instantiate a new related record and make it part of the target."""
        from .models import assign_attributes

        record = self.related_model()
        assign_attributes(record, attributes)
        if self.collection:
            self.read(instance).append(record)
        else:
            self.write(instance, record)
        logger.debug('Built %r for %r', record, self)
        return record

    def reject_new_record(self, attributes):
        if has_delete_flag(attributes):
            return True
        if self.reject_if == 'all_blank':
            return all(value in (None, '') for key, value in attributes.items()
                       if key != '_delete')
        if self.reject_if is not None:
            return bool(self.reject_if(attributes))
        return False


TRUE_VALUES = ('1', 'true', 'True', 1, True)


def has_delete_flag(attributes):
    value = attributes.get('_delete')
    return value is not None and value in TRUE_VALUES


class NestedAttributesOptions(object):
    """The reflections of one model, in declaration order."""

    def __init__(self, model):
        self.model = model
        self.reflections = {}

    def add(self, name, **options):
        existing = self.reflections.get(name)
        if existing is not None:
            # Declaring nested attributes for an autosaved association (or
            # redeclaring) merges the options.
            options.setdefault('autosave', existing.autosave)
            options.setdefault('nested', existing.nested)
        reflection = AssociationReflection(self.model, name, **options)
        self.reflections[name] = reflection
        return reflection

    def get(self, name):
        return self.reflections.get(name)

    def autosave(self):
        return [r for r in self.reflections.values() if r.autosave]

    def nested(self):
        return [r for r in self.reflections.values() if r.nested]


class ReflectionRegister(Register):

    value_type = NestedAttributesOptions

    @property
    def required_base(self):
        # models.py imports this module, hence the late import.
        from .models import NestedAttributesModel
        return NestedAttributesModel

    def create_value_for(self, model):
        options = NestedAttributesOptions(model)
        # Inherit the declarations of any registered bases, nearest last so
        # that it wins.
        for base in reversed(model.__mro__[1:]):
            if base in self:
                for name, reflection in self[base].reflections.items():
                    options.reflections[name] = reflection.copy_for(model)
        for name in getattr(model, 'autosave_associations', ()):
            options.add(name, autosave=True)
        return options


register = ReflectionRegister()


def _model_of(model_or_instance):
    if isinstance(model_or_instance, type):
        return model_or_instance
    return type(model_or_instance)


def reflect_on_association(model_or_instance, name):
    """The reflection for ``name``, or None if it is not registered."""
    model = _model_of(model_or_instance)
    if not register.accepts(model):
        return None
    return register[model].get(name)


def reflect_on_nested_association(model_or_instance, name):
    """
    Capability query: the reflection for ``name`` if it accepts nested
    attributes, None otherwise. Objects that aren't nested attribute models
    (including None) never have nested associations.
    """
    if model_or_instance is None:
        return None
    reflection = reflect_on_association(model_or_instance, name)
    if reflection is not None and reflection.nested:
        return reflection
    return None


def autosave_associations(model_or_instance):
    """Every reflection with autosave enabled."""
    model = _model_of(model_or_instance)
    if not register.accepts(model):
        return []
    return register[model].autosave()


def nested_associations(model_or_instance):
    model = _model_of(model_or_instance)
    if not register.accepts(model):
        return []
    return register[model].nested()
