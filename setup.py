#!/usr/bin/env python
"""
Installs the ovsdump library

ovs-ofctl is not installed, it is run from the host or over ssh when
dumping a live switch.
"""

from setuptools import setup

with open('README.md') as f:
    README = f.read()

setup(
    name='ovsdump',
    version='1.0.0',
    description=('A python library which parses the flows, ports and groups '
                 'dumped from Open vSwitch bridges.'),
    long_description=README,
    long_description_content_type='text/markdown',
    author='The ovsdump Authors',
    license='Apache License 2.0',
    packages=['ovsdump'],
    python_requires='>=3.6',
    install_requires=[
        "tqdm",
        ],
    extras_require={
        "test": ["pytest"],
        },
    entry_points={
        "console_scripts": [
            "ovs_dump_bridge = ovsdump.dump_bridge:main",
            ]
        }
    )
