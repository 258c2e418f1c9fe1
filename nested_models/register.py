"""
Utilities for keeping a registry of values that correspond to model classes
with a one-to-one correspondence.

This is used to keep track of which associations of a model accept nested
attributes and which of them are autosaved.

There is the assumption that if a model has no entry yet, a default value can
be created for it.
"""

from django.core.exceptions import ImproperlyConfigured


class Register(object):
    """
    A register of nested attribute models and their related [value] objects.
    Lazy and dictionary-like, indexed by model type.

    Subclasses must set ``value_type`` and define ``create_value_for``.
    ``required_base`` may be set to the model class that every registered
    model must derive from; see
    :class:`~nested_models.reflection.ReflectionRegister` for an example of
    the configuration that must be done.
    """

    required_base = None

    def __init__(self):
        self._register = {}
        if not hasattr(self, 'value_type'):
            raise ImproperlyConfigured('value_type not set')
        if not hasattr(self, 'create_value_for'):
            raise ImproperlyConfigured('create_value_for not defined')

    def __contains__(self, model):
        return model in self._register

    def accepts(self, model):
        """Whether ``model`` is a class that may have an entry at all."""
        return (isinstance(model, type)
                and (self.required_base is None
                     or issubclass(model, self.required_base)))

    def __getitem__(self, model):
        if not self.accepts(model):
            raise TypeError("{!r} is not a {}, can't be in register"
                            .format(model, self.required_base.__name__))
        if model not in self._register:
            self._register[model] = self.create_value_for(model)
        return self._register[model]
