"""
Decoding of bracketed request parameter names.

Forms built with nested attributes submit flat names such as
``person[addresses_attributes][new_1][street]``; :func:`parse_nested_params`
turns a ``QueryDict`` (or any mapping) of those back into nested dicts::

    >>> parse_nested_params({'person[name]': 'Ann',
    ...                      'person[addresses_attributes][7][street]': 'Main'})
    {'person': {'name': 'Ann', 'addresses_attributes': {'7': {'street': 'Main'}}}}

A trailing ``[]`` collects all values for the name into a list. Otherwise the
last value wins, which is what makes a checkbox beat the hidden field before
it.
"""

import re

_NAME_RE = re.compile(r'^([^\[\]]+)((?:\[[^\[\]]*\])*)$')
_PART_RE = re.compile(r'\[([^\[\]]*)\]')


def split_name(name):
    """``'a[b][c]'`` -> ``['a', 'b', 'c']``; unbracketed names are one part."""
    match = _NAME_RE.match(name)
    if match is None:
        return [name]
    return [match.group(1)] + _PART_RE.findall(match.group(2))


def _lists(data):
    if hasattr(data, 'lists'):
        return data.lists()
    return ((key, list(value) if isinstance(value, (list, tuple)) else [value])
            for key, value in data.items())


def parse_nested_params(data):
    result = {}
    for name, values in _lists(data):
        parts = split_name(name)
        collect = len(parts) > 1 and parts[-1] == ''
        if collect:
            parts = parts[:-1]

        node = result
        for part in parts[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                raise ValueError('Conflicting types for parameter {!r}: '
                                 'expected a dict at {!r}'.format(name, part))

        key = parts[-1]
        if collect:
            existing = node.setdefault(key, [])
            if not isinstance(existing, list):
                raise ValueError('Conflicting types for parameter {!r}: '
                                 'expected a list'.format(name))
            existing.extend(values)
        else:
            if isinstance(node.get(key), (dict, list)):
                raise ValueError('Conflicting types for parameter {!r}: '
                                 'expected a value'.format(name))
            node[key] = values[-1] if values else None
    return result
