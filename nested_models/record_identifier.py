"""
Naming and identity of records, as used for form field names.
"""

import re

from django.db import models


def underscore(name):
    """
    Convert a class name to snake case: ``'ClassName'`` -> ``'class_name'``,
    ``'URLPart'`` -> ``'url_part'``.
    """
    name = re.sub(r'([A-Z\d]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
    return name.replace('-', '_').lower()


def singular_class_name(record_or_class):
    """
    The parameter name for a record (or model class): its class name in snake
    case. A list or tuple stands for its last element.
    """
    if isinstance(record_or_class, (list, tuple)):
        record_or_class = record_or_class[-1]
    if not isinstance(record_or_class, type):
        record_or_class = type(record_or_class)
    return underscore(record_or_class.__name__)


def is_record(obj):
    """Whether ``obj`` has new/persisted status, i.e. is a model instance."""
    return isinstance(obj, models.Model)


def new_record(record):
    """Whether ``record`` has not been saved to (or loaded from) storage."""
    return record._state.adding
