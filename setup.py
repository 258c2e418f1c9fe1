from setuptools import setup, find_packages

setup( name='django-nested-models',
    version = '0.1.0',
    description = 'Nested attributes, autosave associations and nested form '
                  'builders for Django',
    keywords = ['django', 'forms', 'nested attributes'],
    packages = find_packages(),
    include_package_data = True,
    zip_safe = False,
    python_requires = '>=3.8',
    classifiers = [
        'Environment :: Web Environment',
        'Framework :: Django',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    install_requires = [
        'Django>=3.2',
        'djangorestframework>=3.12',
    ],
    extras_require = {
        'test': [
            'pytest',
            'pytest-django',
        ],
    },
)
