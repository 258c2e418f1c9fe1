'''
Nested attributes for Django models.

Nested attributes allow you to save attributes on associated records through
the parent. By default nested attribute updating is turned off; you can enable
it with :meth:`NestedAttributesModel.accepts_nested_attributes_for`. When you
enable nested attributes a ``<association>_attributes`` writer is defined on
the model, and the association is autosaved (see :mod:`nested_models.autosave`).

One-to-one
==========

Consider a Member model that has one Avatar::

    class Member(NestedAttributesModel):
        avatar = models.ForeignKey(Avatar, null=True, on_delete=models.SET_NULL)

    Member.accepts_nested_attributes_for('avatar')

A new avatar is built if the attributes have no ``id``::

    member.avatar_attributes = {'icon': 'smiling'}
    member.save()

An existing avatar is updated if the ``id`` matches::

    member.avatar_attributes = {'id': '2', 'icon': 'sad'}

Deleting it through the attributes needs ``allow_destroy=True`` and a truthy
``_delete`` (``1``, ``'1'``, ``True`` or ``'true'``); the avatar is only
marked for destruction and goes when the member is saved.

One-to-many
===========

Collections accept either a list of attribute dicts or a dict of them keyed by
anything (such as the ``new_1`` tokens a form produces), in which case the
values are taken in key order. Entries without an ``id`` build new records
unless ``reject_if`` says otherwise; entries with an ``id`` update (or mark
for destruction) the loaded member with that id. Unknown ids are ignored.
'''

import logging
import re
from collections.abc import Mapping

from django.core.exceptions import ImproperlyConfigured
from django.db import models

from .autosave import AutosaveAssociationMixin, mark_for_destruction
from .reflection import has_delete_flag, register, reflect_on_association

logger = logging.getLogger(__name__)

UNASSIGNABLE_KEYS = ('id', '_delete')


def assign_attributes(record, attributes):
    """
    Set each of ``attributes`` on ``record``, raising :exc:`AttributeError`
    for names the record's class does not know.
    """
    for key, value in attributes.items():
        if key in UNASSIGNABLE_KEYS:
            continue
        if not hasattr(type(record), key):
            raise AttributeError('unknown attribute {!r} for {}'
                                 .format(key, type(record).__name__))
        setattr(record, key, value)


def _natural_key(key):
    return [int(part) if part.isdigit() else part
            for part in re.split(r'(\d+)', str(key))]


def _has_id(attributes):
    return attributes.get('id') not in (None, '')


def _attributes_writer(name):
    def writer(self, attributes):
        self.assign_nested_attributes(name, attributes)
    writer.__name__ = '{}_attributes'.format(name)
    writer.__doc__ = 'Assign nested attributes to the {!r} association.' \
        .format(name)
    return property(None, writer, doc=writer.__doc__)


class NestedAttributesModel(AutosaveAssociationMixin, models.Model):
    """
    A model which can accept nested attributes for, and autosave, its
    associations.

    Set ``autosave_associations`` to a tuple of association names to autosave
    them without defining nested attribute writers.
    """

    autosave_associations = ()

    class Meta:
        abstract = True

    @classmethod
    def accepts_nested_attributes_for(cls, *names, **options):
        """
        Define ``<name>_attributes`` writers for the named associations.

        Supported options:

        ``allow_destroy``
            Allow records to be marked for destruction with a truthy
            ``_delete`` key. Off by default.

        ``reject_if``
            A callable given the attributes dict of a would-be new record,
            returning True to skip it; or ``'all_blank'``, which skips it if
            all values are blank.
        """
        unknown = set(options) - {'allow_destroy', 'reject_if'}
        if unknown:
            raise TypeError('Unknown options for accepts_nested_attributes_for:'
                            ' {}'.format(', '.join(sorted(unknown))))
        for name in names:
            register[cls].add(name, autosave=True, nested=True,
                              allow_destroy=options.get('allow_destroy', False),
                              reject_if=options.get('reject_if'))
            setattr(cls, '{}_attributes'.format(name), _attributes_writer(name))

    def association(self, name):
        """
        The association target for ``name``: a list for collections, the
        related record (or None) otherwise. Built records are included.
        """
        reflection = reflect_on_association(self, name)
        if reflection is None:
            raise ImproperlyConfigured(
                '{!r} is neither autosaved nor nested on {}'
                .format(name, type(self).__name__))
        return reflection.read(self)

    def assign_nested_attributes(self, name, attributes):
        reflection = reflect_on_association(self, name)
        if reflection is None or not reflection.nested:
            raise ImproperlyConfigured(
                'No nested attributes for {!r} on {}'
                .format(name, type(self).__name__))
        logger.debug('Assigning nested attributes to %r: %r',
                     reflection, attributes)
        if reflection.collection:
            self._assign_nested_attributes_for_collection_association(
                reflection, attributes)
        else:
            self._assign_nested_attributes_for_one_to_one_association(
                reflection, attributes)

    def _assign_nested_attributes_for_one_to_one_association(self, reflection,
                                                             attributes):
        if not isinstance(attributes, Mapping):
            raise TypeError('Dict expected for {}, got {} ({!r})'.format(
                reflection.name, type(attributes).__name__, attributes))
        if _has_id(attributes):
            existing = reflection.read(self)
            if existing is not None and \
                    str(existing.pk) == str(attributes['id']):
                self._assign_to_or_mark_for_destruction(
                    existing, attributes, reflection.allow_destroy)
        elif not reflection.reject_new_record(attributes):
            reflection.build(self, attributes)

    def _assign_nested_attributes_for_collection_association(
            self, reflection, attributes_collection):
        if isinstance(attributes_collection, Mapping):
            keys = sorted(attributes_collection, key=_natural_key)
            attributes_collection = [attributes_collection[key]
                                     for key in keys]
        elif not isinstance(attributes_collection, (list, tuple)):
            raise TypeError('Dict or list expected for {}, got {} ({!r})'
                            .format(reflection.name,
                                    type(attributes_collection).__name__,
                                    attributes_collection))

        for attributes in attributes_collection:
            if not isinstance(attributes, Mapping):
                raise TypeError('Dict expected for each of {}, got {} ({!r})'
                                .format(reflection.name,
                                        type(attributes).__name__, attributes))
            if not _has_id(attributes):
                if not reflection.reject_new_record(attributes):
                    reflection.build(self, attributes)
                continue
            for record in reflection.read(self):
                if record.pk is not None and \
                        str(record.pk) == str(attributes['id']):
                    self._assign_to_or_mark_for_destruction(
                        record, attributes, reflection.allow_destroy)
                    break

    def _assign_to_or_mark_for_destruction(self, record, attributes,
                                           allow_destroy):
        if allow_destroy and has_delete_flag(attributes):
            mark_for_destruction(record)
        else:
            assign_attributes(record, attributes)

