#!/usr/bin/env python
"""
Copyright 2012 NetApp, Inc. All Rights Reserved,
contribution by Weston Andros Adamson <dros@netapp.com>

This program is free software; you can redistribute it and/or modify it under
the terms of the GNU General Public License as published by the Free Software
Foundation; either version 2 of the License, or (at your option) any later
version.
This program is distributed in the hope that it will be useful, but WITHOUT
ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
FOR A PARTICULAR PURPOSE. See the GNU General Public License for more details.
"""
from setuptools import setup

# keep in sync with NFSSTATS_VERSION in nfsstatslib/config.py
NFSSTATS_VERSION = '1.0'

setup(name='nfsstats',
      version=NFSSTATS_VERSION,
      description='Linux NFS client mountstats parser',
      license='GPLv2',
      python_requires='>=3.8',
      install_requires=['numpy', 'mako'],
      extras_require={'test': ['pytest']},
      scripts=['src/nfsstats.py'],
      packages=['nfsstatslib'],
      package_dir={'nfsstatslib': 'src/nfsstatslib'},
      package_data={'nfsstatslib': ['templates/*.txt'],},
     )
