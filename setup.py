#!/usr/bin/env python
# -*- coding: utf-8 -*-
import io
import os
import re

from setuptools import setup, find_packages


classifiers = """\
    Development Status :: 3 - Alpha
    Programming Language :: Python
    Programming Language :: Python :: 3
    Programming Language :: Python :: 3.8
    Programming Language :: Python :: 3.9
    Programming Language :: Python :: 3.10
"""


def _read(*parts, **kwargs):
    filepath = os.path.join(os.path.dirname(__file__), *parts)
    encoding = kwargs.pop("encoding", "utf-8")
    with io.open(filepath, encoding=encoding) as fh:
        text = fh.read()
    return text


def get_version():
    version = re.search(
        r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
        _read("hictable", "__init__.py"),
        re.MULTILINE,
    ).group(1)
    return version


def get_long_description():
    return _read("README.md")


def get_requirements(path):
    content = _read(path)
    return [
        req
        for req in content.split("\n")
        if req != "" and not (req.startswith("#") or req.startswith("-"))
    ]


install_requires = get_requirements("requirements.txt")

extras_require = {
    "test": get_requirements("requirements-dev.txt"),
}


packages = find_packages(exclude=["tests", "tests.*"])


setup(
    name="hictable",
    author="hictable developers",
    version=get_version(),
    license="MIT",
    description="Joint comparison tables of two sparse Hi-C contact maps",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    keywords=["genomics", "bioinformatics", "Hi-C", "analysis", "differential"],
    zip_safe=False,
    classifiers=[s.strip() for s in classifiers.split("\n") if s],
    python_requires=">=3.8",
    packages=packages,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "hictable = hictable.cli:cli",
        ]
    },
)
