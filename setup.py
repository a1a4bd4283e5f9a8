#!/usr/bin/env python3

import setuptools


setuptools.setup(
    name='oihelper',
    version='0.4.0',
    description='Local judge for competitive programming: run C++ solutions against sample test cases',
    python_requires='>=3.10',
    packages=setuptools.find_packages(exclude=['oihelper.tests', 'oihelper.tests.*']),
    package_data={
        'oihelper': ['config/*.yaml'],
    },
    install_requires=[
        'PyYAML',
        'pydantic>=2',
        'colorlog',
        'requests',
        'beautifulsoup4',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'oihelper=oihelper.cli:main',
        ],
    },
)
