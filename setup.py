#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import find_packages, setup

with open('README.md', encoding='utf8') as readme_file:
    readme = readme_file.read()
with open('gameasure/VERSION', encoding='utf8') as version_file:
    version = version_file.read().strip()


setup(
    name='gameasure',
    version=version,
    description="Batches analytics hits and ships them to a Measurement Protocol endpoint.",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'gameasure': ['VERSION']},
    entry_points={
        'console_scripts': [
            'gameasure=gameasure.cli:cli_app'
        ]
    },
    include_package_data=True,
    install_requires=[
        'httpx>=0.26.0',
        'typer>=0.12.0,<0.26',
        'click>=8.0.2',
        'rich',
        'typing-extensions>=4.7.1',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'packaging>=21.0',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='analytics measurement-protocol telemetry',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
