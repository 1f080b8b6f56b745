##############################################################################
# Copyright 2016 IBM Corp.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
##############################################################################

import os
from openstack_cpi.lib.messages import (
    PACKAGE_FORMAL_DESCRIPTION,
    PACKAGE_FORMAL_KEYWORDS,
)
from setuptools import setup, find_packages
import codecs  # To use a consistent encoding

HERE = os.path.abspath(os.path.dirname(__file__))

with codecs.open(os.path.join(HERE, 'DESCRIPTION.rst'),
                 encoding='utf-8') as description:
    long_description = description.read()

with open(os.path.join(HERE, "requirements.txt")) as requirements:
    install_requires = [line.strip() for line in requirements
                        if line.strip() and not line.startswith('#')]

setup(
    name='openstack_cpi',
    version='1.0.0',
    description=PACKAGE_FORMAL_DESCRIPTION,
    long_description=long_description,
    license='Apache 2.0',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],

    keywords=PACKAGE_FORMAL_KEYWORDS,
    packages=find_packages(exclude=['test*']),
    python_requires='>=3.8',
    install_requires=install_requires,
    extras_require={
        'test': ['mock', 'pytest'],
    },
    data_files=[('etc/openstack_cpi', ['conf/template_cloud.yml'])]
)
