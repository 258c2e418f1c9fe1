'''Settings for running the nested_models test suite.'''

SECRET_KEY = 'nested-models-tests'

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'rest_framework',
    'nested_models',
    'nested_models.tests',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'APP_DIRS': True,
    },
]

DEFAULT_AUTO_FIELD = 'django.db.models.AutoField'

USE_TZ = True
