#!/usr/bin/env python
# coding: utf-8

from setuptools import setup

# Prepare install requires and extra requires
install_requires = [
    'python_dateutil',
    'requests',
    ]
extras_require = {
    'tests': ['pytest'],
    }
extras_require['all'] = [
    dependency
    for extra in extras_require.values()
    for dependency in extra]

# Prepare the long description from readme
with open('README.rst', encoding='utf-8') as readme:
    description = readme.read()

setup(
    name='project_stats',
    description='project_stats - Who did what since the last release?',
    long_description=description,

    version='0.1.0',
    provides=['project_stats'],
    packages=['project_stats', 'project_stats.sections'],
    scripts=['bin/project_stats'],
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires='>=3.9',

    license='GPLv2+',

    keywords=['git', 'statistics', 'contributors', 'report'],
    classifiers=[
        'License :: OSI Approved :: '
            'GNU General Public License v2 or later (GPLv2+)',
        'Natural Language :: English',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Software Development :: Version Control :: Git',
        'Topic :: Utilities',
        ],

    data_files=[],
    dependency_links=[],
    package_dir={},
    zip_safe=False,
    )
