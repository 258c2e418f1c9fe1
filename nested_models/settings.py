'''nested_models-specific settings.'''
from django.conf import settings


DEFAULT_FORM_BUILDER = 'nested_models.builder.NestedFormBuilder'


def default_form_builder_path():
    # Read on every call so that override_settings is honoured.
    return getattr(settings, 'NESTED_MODELS_DEFAULT_FORM_BUILDER',
                   DEFAULT_FORM_BUILDER)
