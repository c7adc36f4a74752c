#!/usr/bin/env python

from setuptools import setup

setup(name="minigps",
      packages = ['minigps'],
      package_dir = {'': 'src'},
      entry_points = {'console_scripts': ['minigps = minigps.minigps:main']},
      version = "0.1.0",
      description = "Read and write the files of the MiniGPS handheld GPS receiver",
      keywords = 'gps gis gpx',
      python_requires = '>=3.8',
      install_requires = ['rawutil', 'gpxpy', 'tabulate'],
      extras_require = {'test': ['pytest']},
    )
