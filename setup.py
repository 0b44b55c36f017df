#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import os
import re

from setuptools import find_packages, setup

# XXX: the version is read instead of imported so the dependencies don't have to be installed to build
with open(os.path.join(os.path.dirname(__file__), 'serbin', 'version.py')) as fp:
    version_match = re.search(r"^__version__ = '([^']+)'", fp.read(), re.MULTILINE)
    assert version_match is not None
    __version__ = version_match.group(1)

setup(
    name='serbin',
    version=__version__,
    description='Native binary encoding of Python values driven by type annotations',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('serbin_tests', 'serbin_tests.*')),
    package_data={'serbin.conf': ['*.yml']},
    python_requires='>=3.11',
    install_requires=[
        'pydantic>=2',
        'PyYAML',
        'structlog',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
