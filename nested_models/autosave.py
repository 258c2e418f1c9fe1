'''
Autosave associations.

When a model with autosaved associations is saved, the loaded targets of those
associations are saved along with it, in one transaction:

1. Targets of relations whose foreign key lives on the model itself are saved
   first (so that the key can be set), or detached if marked for destruction.
2. The model itself is saved.
3. Members of reverse and many-to-many relations are saved (new members get
   their foreign key pointed at the model, or are added to the many-to-many
   relation) or deleted if marked for destruction.
4. Detached targets from step 1 are deleted.

Only *loaded* targets take part; an association which was never read or
written is left alone.

Validation works the same way: :meth:`AutosaveAssociationMixin.clean` runs
``full_clean()`` on every associated record which isn't marked for
destruction, reporting errors as ``<association>_<field>``.
'''

import logging

from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.db import router, transaction

from .record_identifier import new_record
from .reflection import autosave_associations

logger = logging.getLogger(__name__)


def mark_for_destruction(record):
    """Mark ``record`` to be deleted when its parent is saved."""
    record._marked_for_destruction = True


def marked_for_destruction(record):
    return getattr(record, '_marked_for_destruction', False)


class AutosaveAssociationMixin(object):
    """
    Model mixin saving and validating autosave associations along with the
    model. Must come before :class:`django.db.models.Model` in the bases.
    """

    def mark_for_destruction(self):
        mark_for_destruction(self)

    def marked_for_destruction(self):
        return marked_for_destruction(self)

    def save(self, *args, **kwargs):
        reflections = autosave_associations(self)
        if not reflections:
            return super(AutosaveAssociationMixin, self).save(*args, **kwargs)

        using = kwargs.get('using') or router.db_for_write(type(self),
                                                           instance=self)
        with transaction.atomic(using=using):
            detached = self._save_belongs_to_associations(reflections)
            super(AutosaveAssociationMixin, self).save(*args, **kwargs)
            self._save_has_associations(reflections)
            for record in detached:
                logger.debug('Deleting %r, detached from %r', record, self)
                record.delete()

    def _save_belongs_to_associations(self, reflections):
        detached = []
        for reflection in reflections:
            if not reflection.forward or not reflection.loaded(self):
                continue
            record = reflection.read(self)
            if record is None:
                continue
            if marked_for_destruction(record):
                setattr(self, reflection.accessor, None)
                reflection.write(self, None)
                if not new_record(record):
                    detached.append(record)
                continue
            record.save()
            setattr(self, reflection.accessor, record)
        return detached

    def _save_has_associations(self, reflections):
        for reflection in reflections:
            if reflection.forward or not reflection.loaded(self):
                continue
            if reflection.collection:
                kept = []
                for record in reflection.read(self):
                    if marked_for_destruction(record):
                        self._destroy_associated(reflection, record)
                    else:
                        self._save_associated(reflection, record)
                        kept.append(record)
                reflection.read(self)[:] = kept
            else:
                record = reflection.read(self)
                if record is None:
                    continue
                if marked_for_destruction(record):
                    self._destroy_associated(reflection, record)
                    reflection.write(self, None)
                else:
                    self._save_associated(reflection, record)

    def _save_associated(self, reflection, record):
        remote = reflection.remote_field_name
        if remote is not None:
            setattr(record, remote, self)
        logger.debug('Autosaving %r through %r', record, reflection)
        record.save()
        if remote is None:
            getattr(self, reflection.accessor).add(record)

    def _destroy_associated(self, reflection, record):
        if new_record(record):
            return
        logger.debug('Deleting %r, marked for destruction through %r',
                     record, reflection)
        record.delete()

    def clean(self):
        super(AutosaveAssociationMixin, self).clean()

        errors = {}
        for reflection in autosave_associations(self):
            exclude = None
            if reflection.remote_field_name is not None:
                # Still unset on new records; the autosave fills it in.
                exclude = [reflection.remote_field_name]
            for record in reflection.records(self):
                if marked_for_destruction(record):
                    continue
                try:
                    record.full_clean(exclude=exclude)
                except ValidationError as e:
                    for field, messages in e.message_dict.items():
                        if field == NON_FIELD_ERRORS:
                            key = reflection.name
                        else:
                            key = '{}_{}'.format(reflection.name, field)
                        errors.setdefault(key, []).extend(messages)
        if errors:
            raise ValidationError(errors)
