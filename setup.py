#!/usr/bin/env python

from setuptools import setup, find_packages
from os.path import exists


setup(
    name="nonamesensor",
    version="0.1.0",
    description="Decode frames from a noname chinese outdoor "
    "temperature & humidity sensor",
    license="GPLv2+",
    keywords="433mhz sensor temperature humidity",
    packages=find_packages(),
    long_description=(open("README.md").read() if exists("README.md") else ""),
    install_requires=list(open("requirements.txt").read().strip().split("\n")),
    scripts=[],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["nonamesensor=nonamesensor.__main__:app_main"]
    },
    zip_safe=False,
)
