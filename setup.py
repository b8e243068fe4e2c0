#!/usr/bin/env python

from setuptools import setup, find_packages
import os

from hashstat import __version__

here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md')) as f:
    README = f.read()

requires = []

setup(name='python-hashstat',
      version=__version__,
      description='Block time statistics and network hashrate estimates from a local Bitcoin Core node.',
      long_description=README,
      long_description_content_type='text/markdown',
      classifiers=[
          "Programming Language :: Python",
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
      ],
      keywords='bitcoin hashrate difficulty',
      packages=find_packages(exclude=['examples']),
      python_requires='>=3.8',
      zip_safe=False,
      install_requires=requires,
      entry_points={
          'console_scripts': ['hashstat = hashstat.cli:main'],
      },
      test_suite="hashstat.tests"
     )
